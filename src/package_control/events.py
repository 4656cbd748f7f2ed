"""
Event dispatch for Package Control.

A host delivers lifecycle events to subscribers through an EventDispatcher.
Subscribers declare interest with a `subscribed_events()` mapping from event
name to method name, the same shape Composer uses for its plugins.

Usage:
    dispatcher = EventDispatcher()
    dispatcher.add_subscriber(plugin)
    dispatcher.dispatch(PluginEvents.PRE_POOL_CREATE, event)

Handlers run synchronously in registration order. Exceptions raised by a
handler propagate to the caller of dispatch(); the dispatcher never swallows
them, so a policy violation aborts the host operation.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from package_control.errors import PluginStateError

logger = logging.getLogger("package_control.events")


class PluginEvents:
    """Names of the host events a plugin may subscribe to."""

    PRE_POOL_CREATE = "pre-pool-create"


class EventSubscriber(Protocol):
    """Anything that can tell a dispatcher which events it handles."""

    @classmethod
    def subscribed_events(cls) -> Mapping[str, str]: ...


class EventDispatcher:
    """
    Registry of event handlers keyed by event name.

    Attributes:
        _listeners: Internal mapping of event names to bound handlers
    """

    def __init__(self) -> None:
        """Initialize an empty dispatcher."""
        self._listeners: dict[str, list[Callable[[Any], None]]] = {}

    def add_subscriber(self, subscriber: EventSubscriber) -> None:
        """
        Bind every event the subscriber declares to its handler method.

        Raises:
            PluginStateError: If a declared handler does not exist on the subscriber
        """
        for event_name, method_name in subscriber.subscribed_events().items():
            handler = getattr(subscriber, method_name, None)
            if not callable(handler):
                raise PluginStateError(
                    message=(
                        f"{type(subscriber).__name__} subscribes to {event_name} "
                        f"but has no method {method_name}"
                    ),
                    operation="add_subscriber",
                )
            self.add_listener(event_name, handler)

    def add_listener(self, event_name: str, handler: Callable[[Any], None]) -> None:
        """Register a single handler for an event."""
        self._listeners.setdefault(event_name, []).append(handler)

    def has_listeners(self, event_name: str) -> bool:
        """Check if any handler is registered for an event."""
        return bool(self._listeners.get(event_name))

    def dispatch(self, event_name: str, event: Any) -> None:
        """
        Deliver an event to its handlers, in registration order.

        Args:
            event_name: The event being fired
            event: Payload passed to each handler
        """
        handlers = self._listeners.get(event_name, [])
        logger.debug("Dispatching %s to %d handler(s)", event_name, len(handlers))
        for handler in handlers:
            handler(event)
