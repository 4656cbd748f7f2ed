"""
Package Control plugin.

This plugin acts as a gatekeeper for Winter CMS plugins, themes and modules,
allowing these packages to be installed only if they meet one of the
following requirements:

    - They have been approved by the Winter CMS maintainers and are delivered
      through the Winter CMS Composer repository.
    - They are sourced from a non-Packagist repository, i.e. a private
      repository, or through GitHub or another source-code control source.
    - They are stored locally.

This stops plugins, themes and modules from being installed via Packagist,
where anyone can publish packages, unless the project explicitly allows it
with `extra.winter.allowPackagist`.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from package_control.config import load_composer_extra, resolve_config
from package_control.errors import PluginStateError
from package_control.events import PluginEvents
from package_control.gate import PoolGate
from package_control.schema import PrePoolCreateEvent

logger = logging.getLogger("package_control.plugin")


@dataclass
class ActivationContext:
    """
    What the host hands the plugin on activation.

    Attributes:
        extra: The `extra` section of the root composer.json
        io: Host I/O handle; kept for interface compatibility, unused by the policy
    """

    extra: dict[str, Any] = field(default_factory=dict)
    io: Any = None

    @classmethod
    def from_composer_json(cls, path: Path | str, io: Any = None) -> "ActivationContext":
        """Build a context from a composer.json file."""
        return cls(extra=load_composer_extra(path), io=io)


class PackageControlPlugin:
    """
    Host-facing plugin object.

    Until activate() is called the plugin holds an enforcing gate, so a host
    that forgets to activate still gets the policy. Activation is guarded by
    a lock, so concurrent activate() calls assign the gate exactly once.

    Attributes:
        gate: The PoolGate used for every pre-pool-create event
    """

    def __init__(self) -> None:
        self.gate = PoolGate()
        self._activated = False
        self._activation_lock = threading.Lock()

    def activate(self, context: ActivationContext) -> None:
        """
        Resolve configuration and build the gate. May only be called once.

        Raises:
            PluginStateError: If the plugin was already activated
        """
        with self._activation_lock:
            if self._activated:
                raise PluginStateError(
                    message="Package Control plugin is already activated",
                    operation="activate",
                )

            config = resolve_config(context.extra)
            self.gate = PoolGate(config)
            self._activated = True
        logger.info(
            "Package Control activated (allowPackagist=%s)",
            config.allow_packagist,
        )

    def deactivate(self, context: ActivationContext) -> None:
        """Nothing to do."""

    def uninstall(self, context: ActivationContext) -> None:
        """Nothing to do."""

    @property
    def activated(self) -> bool:
        return self._activated

    @classmethod
    def subscribed_events(cls) -> dict[str, str]:
        """Events this plugin handles, mapped to handler method names."""
        return {
            PluginEvents.PRE_POOL_CREATE: "on_pre_pool_create",
        }

    def on_pre_pool_create(self, event: PrePoolCreateEvent) -> None:
        """
        Check the candidate pool before the host builds it.

        Raises:
            UnapprovedPackageError: If a Winter package would come from Packagist
        """
        self.gate.enforce(event.packages)
