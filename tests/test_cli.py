"""
Unit tests for CLI functionality.

Tests the qharness command-line interface commands: status, cleanup, config.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from qdrant_harness import __version__
from qdrant_harness.cli import main
from qdrant_harness.errors import BackendError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def settings_file(tmp_path):
    """Settings file with two managers"""
    path = tmp_path / "qdrant-harness.json"
    path.write_text(json.dumps({
        "url": "http://qdrant:6333",
        "api_key": "top-secret",
        "retries": 4,
        "managers": {
            "default": {"collection": "tests-default"},
            "archive": {"collection": "tests-archive", "api_key": "archive-secret"},
        }
    }), encoding="utf-8")
    return str(path)


class TestMain:
    """Test the command group"""

    def test_version(self, runner):
        """Test --version prints the package version"""
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_settings(self, runner, tmp_path):
        """Test configuration errors exit with status 1"""
        path = tmp_path / "broken.json"
        path.write_text("{broken", encoding="utf-8")

        result = runner.invoke(main, ["--config", str(path), "config"])

        assert result.exit_code == 1
        assert "Failed to parse" in result.output


class TestStatus:
    """Test status command"""

    def test_all_reachable(self, runner, settings_file):
        """Test status queries every manager and reports the retry budget"""
        with patch("qdrant_harness.cli.QdrantManager.get_version_number", return_value="1.12.4") as version:
            result = runner.invoke(main, ["--config", settings_file, "status"])

        assert result.exit_code == 0
        assert version.call_count == 2
        assert "Retries per test: 4" in result.output

    def test_unreachable(self, runner, settings_file):
        """Test unreachable backends make status exit with status 1"""
        with patch(
            "qdrant_harness.cli.QdrantManager.get_version_number",
            side_effect=BackendError("connection refused")
        ):
            result = runner.invoke(main, ["--config", settings_file, "status"])

        assert result.exit_code == 1


class TestCleanup:
    """Test cleanup command"""

    def test_drops_existing_collections(self, runner, settings_file):
        """Test existing collections are dropped and missing ones reported"""
        with patch("qdrant_harness.cli.QdrantManager.index_exists", side_effect=[True, False]), \
             patch("qdrant_harness.cli.QdrantManager.drop_index") as drop_index:
            result = runner.invoke(main, ["--config", settings_file, "cleanup", "--yes"])

        assert result.exit_code == 0
        drop_index.assert_called_once_with()
        assert "Dropped tests-default" in result.output
        assert "tests-archive does not exist" in result.output

    def test_selected_manager(self, runner, settings_file):
        """Test --manager limits cleanup to the named managers"""
        with patch("qdrant_harness.cli.QdrantManager.index_exists", return_value=True) as exists, \
             patch("qdrant_harness.cli.QdrantManager.drop_index"):
            result = runner.invoke(main, ["--config", settings_file, "cleanup", "-m", "archive", "-y"])

        assert result.exit_code == 0
        assert exists.call_count == 1
        assert "Dropped tests-archive" in result.output

    def test_unknown_manager(self, runner, settings_file):
        """Test unknown manager names exit with status 1"""
        result = runner.invoke(main, ["--config", settings_file, "cleanup", "-m", "nope", "-y"])

        assert result.exit_code == 1
        assert "Unknown managers: nope" in result.output

    def test_confirmation_declined(self, runner, settings_file):
        """Test nothing is dropped without confirmation"""
        with patch("qdrant_harness.cli.QdrantManager.index_exists") as exists:
            result = runner.invoke(main, ["--config", settings_file, "cleanup"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        exists.assert_not_called()

    def test_backend_failure(self, runner, settings_file):
        """Test backend failures are reported and exit with status 1"""
        with patch(
            "qdrant_harness.cli.QdrantManager.index_exists",
            side_effect=BackendError("timed out")
        ):
            result = runner.invoke(main, ["--config", settings_file, "cleanup", "-y"])

        assert result.exit_code == 1
        assert "timed out" in result.output


class TestShowConfig:
    """Test config command"""

    def test_masks_api_keys(self, runner, settings_file):
        """Test resolved settings are printed with API keys masked"""
        result = runner.invoke(main, ["--config", settings_file, "config"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["retries"] == 4
        assert data["api_key"] == "***"
        assert data["managers"]["archive"]["api_key"] == "***"
        assert data["managers"]["default"]["api_key"] is None
        assert "top-secret" not in result.output
