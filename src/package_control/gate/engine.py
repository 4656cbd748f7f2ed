"""
Pool Gate for Package Control.

The gate decides whether a resolution pool may be built. It is the only
place where the approval policy lives.

How it works:
    1. If the project allows Packagist, the pool is accepted untouched
    2. Otherwise each candidate is classified in host order:
       allow-listed name -> accepted
       type other than winter-plugin/theme/module -> accepted
       delivered by a Composer registry ending in repo.packagist.org -> rejected
       anything else (Winter repo, VCS, path, private registry) -> accepted
    3. The first rejected candidate aborts the whole pass

The gate never filters or mutates the pool. The answer is all or nothing.

Known limitation:
    The Packagist check is a plain suffix test on the registry URL, not a
    parsed host comparison. `https://mirror.example/repo.packagist.org`
    matches, `https://repo.packagist.org/` (trailing slash) does not.
"""

import logging
from collections.abc import Iterable

from package_control.errors import UnapprovedPackageError
from package_control.schema import (
    ComposerRepository,
    GateDecision,
    Package,
    PackageControlConfig,
)

logger = logging.getLogger("package_control.gate")

# Packages that may always be installed, whatever their type or source
ALLOWED_PACKAGES: frozenset[str] = frozenset({
    "winter/wn-backend-module",
    "winter/wn-cms-module",
    "winter/wn-system-module",
})

PROTECTED_TYPES: frozenset[str] = frozenset({
    "winter-plugin",
    "winter-theme",
    "winter-module",
})

PACKAGIST_HOST = "repo.packagist.org"


class PoolGate:
    """
    Approval gate for Winter CMS plugins, themes and modules.

    Usage:
        gate = PoolGate(resolve_config(extra))
        decision = gate.evaluate(packages)
        if not decision.allowed:
            # abort resolution
        # or let the gate raise:
        gate.enforce(packages)

    Attributes:
        config: The frozen configuration resolved at activation
    """

    def __init__(self, config: PackageControlConfig | None = None) -> None:
        self.config = config or PackageControlConfig()

    @property
    def disabled(self) -> bool:
        """True when the project allows Packagist and the gate lets everything through."""
        return self.config.allow_packagist

    def classify(self, package: Package) -> GateDecision:
        """
        Decide a single candidate, ignoring the override.

        Args:
            package: The candidate package

        Returns:
            GateDecision for this package
        """
        if package.name in ALLOWED_PACKAGES:
            return GateDecision.allow(
                f"Package is always allowed: {package.name}",
                rule="allowed_packages",
                package=package.name,
            )

        if package.type not in PROTECTED_TYPES:
            return GateDecision.allow(
                f"Type not controlled: {package.type}",
                rule="unprotected_type",
                package=package.name,
            )

        if self._is_packagist(package):
            return GateDecision.deny(
                f"{package.type} delivered by Packagist",
                rule="packagist_source",
                package=package.name,
            )

        return GateDecision.allow(
            "Delivered by a non-Packagist source",
            rule="approved_source",
            package=package.name,
        )

    def evaluate(self, packages: Iterable[Package]) -> GateDecision:
        """
        Decide a whole pool.

        Candidates are inspected in the order given and inspection stops
        at the first rejected package.

        Args:
            packages: Candidate packages in host order

        Returns:
            The first DENY decision, or an ALLOW decision for the pool
        """
        if self.disabled:
            return GateDecision.allow(
                "Packagist packages allowed by project configuration",
                rule="allow_packagist",
            )

        violation = self._first_violation(packages)
        if violation is not None:
            return violation[1]

        return GateDecision.allow("No unapproved packages in pool", rule="pool")

    def enforce(self, packages: Iterable[Package]) -> None:
        """
        Decide a whole pool and raise on the first rejected package.

        Raises:
            UnapprovedPackageError: If a candidate is rejected
        """
        if self.disabled:
            logger.debug("Gate disabled by allowPackagist, pool not inspected")
            return

        violation = self._first_violation(packages)
        if violation is None:
            return

        package, decision = violation
        repository = package.repository
        url = repository.url if isinstance(repository, ComposerRepository) else ""
        logger.warning("Rejecting %s: %s", package.name, decision.reason)
        raise UnapprovedPackageError(
            package=package.name,
            package_type=package.type,
            repository_url=url,
        )

    def report(self, packages: Iterable[Package]) -> list[GateDecision]:
        """
        Classify every candidate without stopping at the first rejection.

        For diagnostics only; use evaluate() or enforce() to decide a pool.
        """
        return [self.classify(package) for package in packages]

    def _first_violation(
        self,
        packages: Iterable[Package],
    ) -> tuple[Package, GateDecision] | None:
        for package in packages:
            decision = self.classify(package)
            if not decision.allowed:
                return package, decision
            logger.debug("Accepted %s (%s)", package.name, decision.rule_matched)
        return None

    def _is_packagist(self, package: Package) -> bool:
        repository = package.repository
        if not isinstance(repository, ComposerRepository):
            return False
        return repository.repo_config["url"].endswith(PACKAGIST_HOST)
