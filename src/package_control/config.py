"""
Configuration resolver for Package Control.

A Winter CMS project can allow Packagist packages by adding the following
to the `extra` section of its composer.json:

    {
        "extra": {
            "winter": {
                "allowPackagist": true
            }
        }
    }

Only a literal JSON `true` enables the override. Anything else (missing key,
`false`, "true", 1) leaves the policy enforced.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from package_control.errors import ConfigLoadError
from package_control.schema import PackageControlConfig

logger = logging.getLogger("package_control.config")

EXTRA_NAMESPACE = "winter"
ALLOW_PACKAGIST_KEY = "allowPackagist"


def resolve_config(extra: Any) -> PackageControlConfig:
    """
    Resolve the plugin configuration from a project's `extra` map.

    Args:
        extra: The `extra` section of the root composer.json; anything that
            is not a mapping (None included) counts as no configuration

    Returns:
        Frozen configuration for the run
    """
    if not isinstance(extra, Mapping):
        return PackageControlConfig()

    winter_config = extra.get(EXTRA_NAMESPACE)
    if not isinstance(winter_config, Mapping):
        return PackageControlConfig()

    # `is True` on purpose: truthy values such as "true" or 1 do not count
    allow_packagist = winter_config.get(ALLOW_PACKAGIST_KEY) is True
    return PackageControlConfig(allow_packagist=allow_packagist)


def load_composer_extra(path: Path | str) -> dict[str, Any]:
    """
    Read the `extra` section from a composer.json file.

    Args:
        path: Path to composer.json

    Returns:
        The `extra` map, or an empty dict when absent or not an object

    Raises:
        ConfigLoadError: If the file is missing, unreadable or not valid JSON
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigLoadError(path=str(path), underlying_error=str(e)) from e

    if not isinstance(data, dict):
        raise ConfigLoadError(
            path=str(path),
            underlying_error="top-level value must be an object",
        )

    extra = data.get("extra")
    if not isinstance(extra, dict):
        if extra is not None:
            logger.debug("Ignoring non-object extra section in %s", path)
        return {}
    return extra
