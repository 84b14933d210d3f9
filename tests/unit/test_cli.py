"""
Tests for the command-line interface.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from armsim import cli

REPO_CONFIG_DIR = Path(__file__).parents[2] / "config"


@pytest.fixture
def runner(monkeypatch):
    # CliRunner swaps the std streams per invocation; keep logging off them
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    return CliRunner()


class TestSolve:
    """Tests for the solve command."""

    def test_reachable(self, runner):
        result = runner.invoke(cli.main, ["solve", "0", "1", "3"])
        assert result.exit_code == 0
        assert "IK solution" in result.output
        assert "shoulder" in result.output

    def test_unreachable(self, runner):
        result = runner.invoke(cli.main, ["solve", "0", "1", "10"])
        assert result.exit_code == 2
        assert "Unreachable" in result.output

    def test_profile_requires_config_dir(self, runner):
        result = runner.invoke(cli.main, ["solve", "0", "1", "3", "--profile", "default"])
        assert result.exit_code != 0
        assert "--config-dir" in result.output


class TestRun:
    """Tests for the run command."""

    def test_headless_run(self, runner):
        result = runner.invoke(cli.main, ["run", "--ticks", "30"])
        assert result.exit_code == 0
        assert "Ran 30 ticks" in result.output
        assert "Entities" in result.output

    def test_auto_run_with_profile(self, runner):
        result = runner.invoke(
            cli.main,
            [
                "--config-dir",
                str(REPO_CONFIG_DIR),
                "run",
                "--auto",
                "--profile",
                "two_blocks",
                "-n",
                "120",
            ],
        )
        assert result.exit_code == 0
        assert "two_blocks" in result.output
        assert "Telemetry" in result.output

    def test_unknown_profile(self, runner, sample_config_dir):
        result = runner.invoke(
            cli.main,
            ["--config-dir", str(sample_config_dir), "run", "--profile", "missing"],
        )
        assert result.exit_code == 1
        assert "Simulation failed" in result.output


class TestConfigCommands:
    """Tests for the config command group."""

    def test_list_arms(self, runner, sample_config_dir):
        result = runner.invoke(
            cli.main, ["--config-dir", str(sample_config_dir), "config", "list-arms"]
        )
        assert result.exit_code == 0
        assert "Available Arms" in result.output
        assert "test_arm" in result.output

    def test_list_shipped_profiles(self, runner):
        result = runner.invoke(
            cli.main, ["--config-dir", str(REPO_CONFIG_DIR), "config", "list-arms"]
        )
        assert result.exit_code == 0
        assert "default" in result.output
        assert "two_blocks" in result.output

    def test_show(self, runner, sample_config_dir):
        result = runner.invoke(
            cli.main, ["--config-dir", str(sample_config_dir), "config", "show", "test_arm"]
        )
        assert result.exit_code == 0
        assert "capacity" in result.output

    def test_show_missing(self, runner, sample_config_dir):
        result = runner.invoke(
            cli.main, ["--config-dir", str(sample_config_dir), "config", "show", "missing"]
        )
        assert result.exit_code == 1
        assert "Failed to load arm profile" in result.output

    def test_requires_config_dir(self, runner):
        result = runner.invoke(cli.main, ["config", "list-arms"])
        assert result.exit_code != 0
