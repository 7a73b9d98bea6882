"""
Unit tests for the config deps CLI command.
"""

import subprocess

import pytest

from multitarget.cli import cli


@pytest.fixture
def all_tools(mocker):
    """Pretend cargo, rustup and cross are on PATH."""
    mocker.patch(
        "multitarget.services.dependency.shutil.which",
        side_effect=lambda name: f"/usr/bin/{name}",
    )
    mocker.patch(
        "multitarget.services.dependency.subprocess.run",
        return_value=subprocess.CompletedProcess(args=[], returncode=0, stdout="tool 1.80.0 (abc)\n"),
    )


@pytest.fixture
def no_cross(mocker):
    """Pretend only cross is missing."""
    mocker.patch(
        "multitarget.services.dependency.shutil.which",
        side_effect=lambda name: None if name == "cross" else f"/usr/bin/{name}",
    )
    mocker.patch(
        "multitarget.services.dependency.subprocess.run",
        return_value=subprocess.CompletedProcess(args=[], returncode=0, stdout="tool 1.80.0\n"),
    )


class TestConfigDepsCommand:
    """Tests for multitarget config deps command."""

    def test_deps_shows_status(self, runner, all_tools):
        """Test that deps shows tool status."""
        result = runner.invoke(cli, ["config", "deps"])

        assert result.exit_code == 0
        assert "Host Build Tools" in result.output
        assert "All host build tools are installed" in result.output

    def test_deps_shows_all_tools_with_versions(self, runner, all_tools):
        result = runner.invoke(cli, ["config", "deps"])

        assert result.exit_code == 0
        for name in ("cargo", "rustup", "cross"):
            assert name in result.output
        assert "v1.80.0" in result.output

    def test_deps_shows_install_hint(self, runner, no_cross):
        result = runner.invoke(cli, ["config", "deps"])

        assert result.exit_code == 0
        assert "not installed" in result.output
        assert "cargo install cross" in result.output
        assert "All host build tools are installed" not in result.output


class TestConfigDepsHelp:
    """Tests for config deps command help."""

    def test_config_deps_in_config_help(self, runner):
        """Test that deps appears in config --help."""
        result = runner.invoke(cli, ["config", "--help"])

        assert result.exit_code == 0
        assert "deps" in result.output
