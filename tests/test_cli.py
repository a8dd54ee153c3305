"""
Integration tests for the swgen CLI.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from swgen.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_path(doc_root: Path, isolated_env: Path) -> Path:
    """Config file living in the document root."""
    path = doc_root / "swgen.yaml"
    path.write_text(
        "cache_name: site-v1\n"
        "client_output: sw-register.js\n"
        "files:\n"
        "  cache_first: [index.html]\n"
        "directories:\n"
        "  cache_first: [css]\n"
        "  on_demand: [vendor]\n"
        "directory_indexes: ['/']\n"
        "fallbacks:\n"
        "  - pattern: '\\.svg$'\n"
        "    path: img/fallback.svg\n"
    )
    return path


@pytest.mark.integration
class TestInitCommand:
    """Test swgen init."""

    def test_creates_config(self, runner: CliRunner, isolated_env: Path) -> None:
        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 0
        assert "Created" in result.output
        assert (isolated_env / "swgen.yaml").exists()

    def test_existing_config_kept(self, runner: CliRunner, config_path: Path) -> None:
        before = config_path.read_text()

        result = runner.invoke(cli, ["init", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert config_path.read_text() == before


@pytest.mark.integration
class TestBuildCommand:
    """Test swgen build."""

    def test_build_writes_worker_and_state(self, runner: CliRunner, config_path: Path, doc_root: Path) -> None:
        result = runner.invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert "Changed: yes" in result.output
        program = (doc_root / "sw.js").read_text()
        assert 'const CACHE_NAME = "site-v1";' in program
        assert (doc_root / "sw-register.js").exists()
        assert json.loads((doc_root / "sw.lock.json").read_text())["cacheName"] == "site-v1"

    def test_second_build_unchanged(self, runner: CliRunner, config_path: Path, doc_root: Path) -> None:
        runner.invoke(cli, ["build", "--config", str(config_path)])
        first = (doc_root / "sw.js").read_text()

        result = runner.invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert "Changed: no" in result.output
        assert (doc_root / "sw.js").read_text() == first

    def test_dry_run_writes_nothing(self, runner: CliRunner, config_path: Path, doc_root: Path) -> None:
        result = runner.invoke(cli, ["build", "--config", str(config_path), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert not (doc_root / "sw.js").exists()
        assert not (doc_root / "sw.lock.json").exists()

    def test_output_override(self, runner: CliRunner, config_path: Path, doc_root: Path) -> None:
        result = runner.invoke(cli, ["build", "--config", str(config_path), "--output", "dist/worker.js"])

        assert result.exit_code == 0, result.output
        assert (doc_root / "dist" / "worker.js").exists()
        assert not (doc_root / "sw.js").exists()

    def test_missing_file_reports_error(self, runner: CliRunner, config_path: Path) -> None:
        config_path.write_text("files:\n  cache_first: [missing.html]\n")

        result = runner.invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_path_outside_root_reports_error(self, runner: CliRunner, config_path: Path) -> None:
        config_path.write_text("files:\n  cache_first: ['../outside.html']\n")

        result = runner.invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "is outside of" in result.output

    def test_invalid_cache_name_reports_error(self, runner: CliRunner, config_path: Path) -> None:
        config_path.write_text('cache_name: "bad name"\n')

        result = runner.invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unwritable_state_file_reports_error(self, runner: CliRunner, config_path: Path, doc_root: Path) -> None:
        (doc_root / "sw.lock.json" / "blocker").mkdir(parents=True)

        result = runner.invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Failed to save snapshot" in result.output
        assert not (doc_root / "sw.js").exists()


@pytest.mark.integration
class TestStateCommand:
    """Test swgen state."""

    def test_no_snapshot(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(cli, ["state", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "No snapshot" in result.output

    def test_prints_snapshot(self, runner: CliRunner, config_path: Path) -> None:
        runner.invoke(cli, ["build", "--config", str(config_path)])

        result = runner.invoke(cli, ["state", "--config", str(config_path)])

        assert result.exit_code == 0
        assert '"cacheName": "site-v1"' in result.output
        assert '"/vendor/lib.js"' in result.output
