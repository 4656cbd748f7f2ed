"""
Schema definitions for Package Control.

This module defines the Pydantic models used throughout Package Control:
- Repository variants: Where a candidate package was resolved from
- Package: A candidate considered for the resolution pool
- PrePoolCreateEvent: The payload the host sends before building a pool
- PackageControlConfig: The frozen override resolved at activation
- GateDecision: The result of evaluating a package or pool

Design Decisions:
    - Package metadata belongs to the host; models are frozen so the gate
      can never mutate the candidate pool
    - Repositories are a tagged union on `kind` instead of isinstance checks
      against host classes
"""

from pathlib import Path
from typing import Annotated, Any, ClassVar, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from package_control.errors import PoolLoadError


# =============================================================================
# Repository Models
# =============================================================================


class ComposerRepository(BaseModel):
    """
    A remote Composer registry (Packagist, a private Satis/Packagist, a mirror).

    Attributes:
        url: Registry URL as configured in the host
        options: Any other repository configuration the host carries
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["composer"] = "composer"
    url: str = Field(..., description="Registry URL", min_length=1)
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional repository configuration",
    )

    @property
    def repo_config(self) -> dict[str, Any]:
        """Repository configuration map, as the host exposes it."""
        return {**self.options, "type": self.kind, "url": self.url}


class VcsRepository(BaseModel):
    """A version-control backed repository (GitHub, GitLab, plain git)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["vcs"] = "vcs"
    url: str = Field(..., description="Version control URL", min_length=1)


class PathRepository(BaseModel):
    """A package stored on the local filesystem."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["path"] = "path"
    path: str = Field(..., description="Local path to the package", min_length=1)


class OtherRepository(BaseModel):
    """Any other repository kind (artifact, inline package, platform)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["other"] = "other"
    name: str | None = Field(default=None, description="Host name for the repository")


Repository = Annotated[
    Union[ComposerRepository, VcsRepository, PathRepository, OtherRepository],
    Field(discriminator="kind"),
]


# =============================================================================
# Package Models
# =============================================================================


class Package(BaseModel):
    """
    A candidate package considered for a resolution pool.

    Attributes:
        name: Unique package name (e.g., "acme/blog-plugin")
        type: Declared package type; Composer defaults to "library"
        version: Optional version string, for display only
        repository: Where the host resolved the package from (None for the root package)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Package name", min_length=1)
    type: str = Field(default="library", description="Declared package type")
    version: str | None = Field(default=None, description="Package version")
    repository: Repository | None = Field(
        default=None,
        description="Repository the package was resolved from",
    )


class PrePoolCreateEvent(BaseModel):
    """
    Payload of the host's "before the pool is created" event.

    Attributes:
        packages: Every candidate under consideration, in host order
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: ClassVar[str] = "pre-pool-create"

    packages: tuple[Package, ...] = Field(
        default_factory=tuple,
        description="Ordered candidate packages",
    )


# =============================================================================
# Configuration & Decision Models
# =============================================================================


class PackageControlConfig(BaseModel):
    """
    Project-level settings resolved once at activation.

    Attributes:
        allow_packagist: When True the policy is disabled for the whole run
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allow_packagist: bool = Field(
        default=False,
        description="Allow Winter packages from Packagist (disables the gate)",
    )


class GateDecision(BaseModel):
    """
    Result of evaluating a package, or a whole pool, against the policy.

    Attributes:
        allowed: Whether the package (or pool) is accepted
        reason: Human-readable explanation of the decision
        rule_matched: Which rule produced this decision
        package: Name of the package the decision is about (None for a whole pool)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allowed: bool = Field(..., description="Whether the candidate is accepted")
    reason: str = Field(..., description="Human-readable explanation")
    rule_matched: str | None = Field(default=None, description="Rule that decided")
    package: str | None = Field(default=None, description="Package decided on")

    @classmethod
    def allow(
        cls,
        reason: str,
        rule: str | None = None,
        package: str | None = None,
    ) -> "GateDecision":
        """Create an ALLOW decision."""
        return cls(allowed=True, reason=reason, rule_matched=rule, package=package)

    @classmethod
    def deny(
        cls,
        reason: str,
        rule: str | None = None,
        package: str | None = None,
    ) -> "GateDecision":
        """Create a DENY decision."""
        return cls(allowed=False, reason=reason, rule_matched=rule, package=package)


# =============================================================================
# Pool Manifest Loading
# =============================================================================


class PoolManifest(BaseModel):
    """A list of candidate packages stored in a YAML or JSON file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    packages: list[Package] = Field(default_factory=list)


def load_pool(path: Path | str) -> PoolManifest:
    """
    Load a pool manifest from a YAML (or JSON) file.

    Raises:
        PoolLoadError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PoolLoadError(path=str(path), underlying_error=str(e)) from e

    return _parse_pool(content, str(path))


def load_pool_from_string(content: str) -> PoolManifest:
    """Load a pool manifest from a YAML string."""
    return _parse_pool(content, "<string>")


def _parse_pool(content: str, source: str) -> PoolManifest:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PoolLoadError(path=source, underlying_error=str(e)) from e

    if data is None:
        data = {}

    try:
        return PoolManifest.model_validate(data)
    except ValidationError as e:
        raise PoolLoadError(path=source, underlying_error=str(e)) from e
