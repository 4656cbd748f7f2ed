"""
Pytest configuration and fixtures for Package Control tests.

This module provides shared fixtures used across unit and integration tests.
"""

import json
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from package_control.schema import (
    ComposerRepository,
    OtherRepository,
    Package,
    PathRepository,
    VcsRepository,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def packagist() -> ComposerRepository:
    """The public Packagist registry."""
    return ComposerRepository(url="https://repo.packagist.org")


@pytest.fixture
def winter_repo() -> ComposerRepository:
    """The Winter CMS approved Composer repository."""
    return ComposerRepository(url="https://packages.wintercms.com")


@pytest.fixture
def vcs_repo() -> VcsRepository:
    """A GitHub-hosted repository."""
    return VcsRepository(url="https://github.com/acme/foo")


@pytest.fixture
def path_repo() -> PathRepository:
    """A locally stored package."""
    return PathRepository(path="./plugins/acme/foo")


@pytest.fixture
def other_repo() -> OtherRepository:
    """An artifact repository."""
    return OtherRepository(name="artifact")


@pytest.fixture
def packagist_plugin(packagist: ComposerRepository) -> Package:
    """A Winter plugin delivered by Packagist."""
    return Package(name="acme/foo", type="winter-plugin", repository=packagist)


@pytest.fixture
def write_composer_json(temp_dir: Path):
    """Return a helper that writes composer.json with the given extra section."""

    def _write(extra: dict | None = None) -> Path:
        data: dict = {"name": "acme/site", "require": {}}
        if extra is not None:
            data["extra"] = extra
        path = temp_dir / "composer.json"
        path.write_text(json.dumps(data))
        return path

    return _write


@pytest.fixture
def sample_pool_yaml() -> str:
    """Return a pool manifest with one Packagist plugin."""
    return """
packages:
  - name: winter/wn-cms-module
    type: winter-module
    repository:
      kind: composer
      url: https://repo.packagist.org
  - name: laravel/framework
    type: library
    repository:
      kind: composer
      url: https://repo.packagist.org
  - name: acme/foo
    type: winter-plugin
    version: 1.0.0
    repository:
      kind: composer
      url: https://repo.packagist.org
"""


@pytest.fixture
def clean_pool_yaml() -> str:
    """Return a pool manifest with no unapproved packages."""
    return """
packages:
  - name: winter/wn-system-module
    type: winter-module
    repository:
      kind: composer
      url: https://repo.packagist.org
  - name: acme/foo
    type: winter-plugin
    repository:
      kind: vcs
      url: https://github.com/acme/foo
  - name: acme/bar-theme
    type: winter-theme
    repository:
      kind: path
      path: ./themes/bar
"""
