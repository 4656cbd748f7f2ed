"""
Integration tests for the package-control CLI.

Tests cover:
- check accepting and rejecting pools
- The allowPackagist override read from composer.json
- JSON output and load errors
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from package_control import __version__
from package_control.cli import EXIT_LOAD_ERROR, EXIT_UNAPPROVED, app


runner = CliRunner()


@pytest.fixture
def violating_pool(temp_dir: Path, sample_pool_yaml: str) -> Path:
    """A pool manifest containing a Packagist plugin."""
    path = temp_dir / "pool.yaml"
    path.write_text(sample_pool_yaml)
    return path


@pytest.fixture
def clean_pool(temp_dir: Path, clean_pool_yaml: str) -> Path:
    """A pool manifest with no unapproved packages."""
    path = temp_dir / "clean.yaml"
    path.write_text(clean_pool_yaml)
    return path


class TestVersion:
    """Tests for --version."""

    def test_version(self) -> None:
        """--version prints the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCheckCommand:
    """Tests for `package-control check`."""

    def test_clean_pool_accepted(self, clean_pool: Path, write_composer_json) -> None:
        """A clean pool exits 0."""
        composer = write_composer_json()
        result = runner.invoke(app, ["check", str(clean_pool), "--composer", str(composer)])
        assert result.exit_code == 0
        assert "Pool accepted" in result.stdout

    def test_violation_rejected(self, violating_pool: Path, write_composer_json) -> None:
        """A Packagist plugin exits 1 and names the package."""
        composer = write_composer_json({"winter": {}})
        result = runner.invoke(app, ["check", str(violating_pool), "--composer", str(composer)])
        assert result.exit_code == EXIT_UNAPPROVED
        assert "acme/foo" in result.stdout
        assert "not approved" in result.stdout

    def test_override_accepts_violation(self, violating_pool: Path, write_composer_json) -> None:
        """allowPackagist in composer.json lets the same pool through."""
        composer = write_composer_json({"winter": {"allowPackagist": True}})
        result = runner.invoke(app, ["check", str(violating_pool), "--composer", str(composer)])
        assert result.exit_code == 0

    def test_verbose_table(self, violating_pool: Path, write_composer_json) -> None:
        """--verbose lists every package with its rule."""
        composer = write_composer_json()
        result = runner.invoke(
            app,
            ["check", str(violating_pool), "--composer", str(composer), "--verbose"],
        )
        assert result.exit_code == EXIT_UNAPPROVED
        assert "allowed_packages" in result.stdout
        assert "unprotected_type" in result.stdout
        assert "packagist_source" in result.stdout

    def test_json_violation(self, violating_pool: Path, write_composer_json) -> None:
        """--json prints the error as JSON with the exact message."""
        composer = write_composer_json()
        result = runner.invoke(
            app,
            ["check", str(violating_pool), "--composer", str(composer), "--json"],
        )
        assert result.exit_code == EXIT_UNAPPROVED
        data = json.loads(result.stdout)
        assert data["error"] is True
        assert data["error_type"] == "UnapprovedPackageError"
        assert data["message"] == (
            "Package acme/foo is not approved by Winter CMS for installation. "
            "Please remove it from your requirements in composer.json."
        )

    def test_json_accepted(self, clean_pool: Path, write_composer_json) -> None:
        """--json prints a summary on success."""
        composer = write_composer_json()
        result = runner.invoke(
            app,
            ["check", str(clean_pool), "--composer", str(composer), "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {"accepted": True, "packages": 3, "allow_packagist": False}

    def test_default_composer_json_missing(
        self,
        violating_pool: Path,
        temp_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Without --composer and no ./composer.json, the policy is enforced."""
        monkeypatch.chdir(temp_dir)
        result = runner.invoke(app, ["check", str(violating_pool)])
        assert result.exit_code == EXIT_UNAPPROVED

    def test_default_composer_json_read(
        self,
        violating_pool: Path,
        temp_dir: Path,
        write_composer_json,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Without --composer, ./composer.json is used when present."""
        write_composer_json({"winter": {"allowPackagist": True}})
        monkeypatch.chdir(temp_dir)
        result = runner.invoke(app, ["check", str(violating_pool)])
        assert result.exit_code == 0

    def test_missing_pool(self, temp_dir: Path, write_composer_json) -> None:
        """A missing manifest exits 2."""
        composer = write_composer_json()
        result = runner.invoke(
            app,
            ["check", str(temp_dir / "missing.yaml"), "--composer", str(composer)],
        )
        assert result.exit_code == EXIT_LOAD_ERROR

    def test_invalid_composer_json(self, clean_pool: Path, temp_dir: Path) -> None:
        """A malformed composer.json exits 2."""
        composer = temp_dir / "composer.json"
        composer.write_text("{broken")
        result = runner.invoke(app, ["check", str(clean_pool), "--composer", str(composer)])
        assert result.exit_code == EXIT_LOAD_ERROR

    def test_invalid_utf8_pool(self, temp_dir: Path, write_composer_json) -> None:
        """A manifest that is not valid UTF-8 is a load error, not a violation."""
        composer = write_composer_json()
        pool = temp_dir / "pool.yaml"
        pool.write_bytes(b"packages:\n  - name: acme/\xff\xfe\n")
        result = runner.invoke(app, ["check", str(pool), "--composer", str(composer)])
        assert result.exit_code == EXIT_LOAD_ERROR

    def test_invalid_utf8_composer_json(self, clean_pool: Path, temp_dir: Path) -> None:
        """A composer.json that is not valid UTF-8 is a load error."""
        composer = temp_dir / "composer.json"
        composer.write_bytes(b'{"name": "\xff"}')
        result = runner.invoke(app, ["check", str(clean_pool), "--composer", str(composer)])
        assert result.exit_code == EXIT_LOAD_ERROR

    def test_debug_json_includes_traceback(
        self,
        violating_pool: Path,
        write_composer_json,
    ) -> None:
        """--debug --json adds the traceback to the error output."""
        composer = write_composer_json()
        result = runner.invoke(
            app,
            ["check", str(violating_pool), "--composer", str(composer), "--json", "--debug"],
        )
        assert result.exit_code == EXIT_UNAPPROVED
        assert '"traceback"' in result.stdout
        assert "UnapprovedPackageError" in result.stdout

    def test_debug_text_includes_traceback(
        self,
        violating_pool: Path,
        write_composer_json,
    ) -> None:
        """--debug prints the traceback after the error line."""
        composer = write_composer_json()
        result = runner.invoke(
            app,
            ["check", str(violating_pool), "--composer", str(composer), "--debug"],
        )
        assert result.exit_code == EXIT_UNAPPROVED
        assert "Traceback" in result.stdout
