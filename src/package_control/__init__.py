"""
Package Control - Approval gate for Winter CMS packages.

Package Control hooks into dependency resolution and refuses to build a
pool that would install a Winter CMS plugin, theme or module from Packagist.
It provides:
- A single, explicit approval policy (PoolGate)
- A per-project opt-out (`extra.winter.allowPackagist: true`)
- A host-facing plugin with one event subscription
- An offline checker for pool manifests

Example usage:
    $ package-control check pool.yaml --composer composer.json
"""

__version__ = "0.1.0"
__author__ = "Package Control Contributors"

from package_control.errors import UnapprovedPackageError
from package_control.gate import PoolGate
from package_control.plugin import ActivationContext, PackageControlPlugin

__all__ = [
    "__version__",
    "__author__",
    "ActivationContext",
    "PackageControlPlugin",
    "PoolGate",
    "UnapprovedPackageError",
]
