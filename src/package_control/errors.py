"""
Exception hierarchy for Package Control.

All Package Control exceptions inherit from PackageControlError, allowing
hosts to catch every plugin-specific failure with a single except clause.

Exception Categories:
    - UnapprovedPackageError: Candidate package rejected by the approval policy
    - ConfigLoadError: composer.json could not be read
    - PoolLoadError: Pool manifest could not be read or validated
    - PluginStateError: Plugin activated twice or wired incorrectly

Design Principles:
    - All errors have error codes for programmatic handling
    - All errors include context (package, path, event where applicable)
    - Policy violations are never downgraded: they always propagate to the host
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Policy errors: 1xxx
ERROR_UNAPPROVED_PACKAGE = 1001

# Loading errors: 2xxx
ERROR_CONFIG_LOAD = 2001
ERROR_POOL_LOAD = 2002

# Plugin errors: 3xxx
ERROR_PLUGIN_STATE = 3001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class PackageControlError(Exception):
    """
    Base exception for all Package Control errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [self.message]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Policy Errors
# =============================================================================


@dataclass
class UnapprovedPackageError(PackageControlError):
    """
    Raised when a Winter plugin, theme or module would be installed from Packagist.

    The host must abort the whole resolution when it sees this error.
    The message already tells the user what to do, so no suggestion is set.

    Attributes:
        package: Name of the rejected package
        package_type: Declared type of the rejected package
        repository_url: URL of the registry the package came from
    """

    package: str = ""
    package_type: str = ""
    repository_url: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = (
                f"Package {self.package} is not approved by Winter CMS for installation. "
                "Please remove it from your requirements in composer.json."
            )
        if self.code == 0:
            self.code = ERROR_UNAPPROVED_PACKAGE
        self.context.update({
            "package": self.package,
            "package_type": self.package_type,
            "repository_url": self.repository_url,
        })


# =============================================================================
# Loading Errors
# =============================================================================


@dataclass
class ConfigLoadError(PackageControlError):
    """Raised when composer.json cannot be read or parsed."""

    path: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Failed to load {self.path}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_CONFIG_LOAD
        if not self.suggestion:
            self.suggestion = "Check that composer.json exists and is valid JSON"
        self.context.update({
            "path": self.path,
            "underlying_error": self.underlying_error,
        })


@dataclass
class PoolLoadError(PackageControlError):
    """Raised when a pool manifest cannot be read or validated."""

    path: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid pool manifest {self.path}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_POOL_LOAD
        self.context.update({
            "path": self.path,
            "underlying_error": self.underlying_error,
        })


# =============================================================================
# Plugin Errors
# =============================================================================


@dataclass
class PluginStateError(PackageControlError):
    """Raised when the plugin is activated twice or subscribed incorrectly."""

    operation: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if self.code == 0:
            self.code = ERROR_PLUGIN_STATE
        self.context["operation"] = self.operation
