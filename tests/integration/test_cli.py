"""
Integration tests for the multitarget CLI.

Commands run inside an isolated filesystem with a ServiceFactory wired to
fake host facts, a fake HTTP client and a recording command runner.
"""

import os
from pathlib import Path

import pytest

from multitarget import __version__
from multitarget.cli import cli
from multitarget.cli.service_helpers import prompt_for_tool, set_factory
from multitarget.core.glue import load_glue
from multitarget.services import ServiceFactory

WIDGET = "https://github.com/acme/widget-hal"
EMBEDDED = "thumbv7em-none-eabi"


@pytest.fixture
def wire(make_probe, make_runner, widget_client):
    """Install a factory with fakes; returns the runner recording commands."""

    def _wire(tools=("cargo",), targets=(), automated=False, returncode=0, client=None):
        command_runner = make_runner(returncode)
        set_factory(
            ServiceFactory(
                probe=make_probe(tools=tools, targets=targets, automated=automated),
                prompt=prompt_for_tool,
                http_client=client or widget_client,
                runner=command_runner,
            )
        )
        return command_runner

    return _wire


@pytest.fixture
def workspace(runner, wire):
    """Run inside a freshly initialized 'blinky' workspace."""
    with runner.isolated_filesystem() as fs:
        wire()
        result = runner.invoke(cli, ["init", "blinky"])
        assert result.exit_code == 0, result.output
        root = Path(fs) / "blinky"
        previous = Path.cwd()
        os.chdir(root)
        try:
            yield root
        finally:
            os.chdir(previous)


class TestCLIBasic:
    """Basic CLI tests."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("init", "platform", "glue", "build", "test", "toolchain", "config"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(cli, ["flash"])

        assert result.exit_code == 2


class TestInit:
    def test_creates_project(self, runner, wire):
        with runner.isolated_filesystem():
            wire()
            result = runner.invoke(cli, ["init", "blinky"])

            assert result.exit_code == 0
            assert "initialized successfully" in result.output
            assert Path("blinky/glue.toml").is_file()
            assert Path("blinky/core-lib/src/lib.rs").is_file()

    def test_existing_project_fails(self, runner, wire):
        with runner.isolated_filesystem():
            wire()
            runner.invoke(cli, ["init", "blinky"])
            result = runner.invoke(cli, ["init", "blinky"])

            assert result.exit_code == 1
            assert "Error:" in result.output
            assert "already exists" in result.output


class TestPlatformCommands:
    def test_add_list_remove(self, runner, workspace):
        result = runner.invoke(cli, ["platform", "add", "stm32", "--target", EMBEDDED, "--hal", "stm32f4xx-hal"])
        assert result.exit_code == 0, result.output
        assert (workspace / "app-stm32" / "src" / "main.rs").is_file()

        result = runner.invoke(cli, ["platform", "list"])
        assert result.exit_code == 0
        assert "Configured platforms:" in result.output
        assert "stm32" in result.output
        assert "HAL: stm32f4xx-hal" in result.output

        result = runner.invoke(cli, ["platform", "remove", "stm32"])
        assert result.exit_code == 0
        assert load_glue(workspace / "glue.toml").platforms == []

    def test_list_empty(self, runner, workspace):
        result = runner.invoke(cli, ["platform", "list"])

        assert result.exit_code == 0
        assert "No platforms configured" in result.output

    def test_add_duplicate_shows_remedy(self, runner, workspace):
        runner.invoke(cli, ["platform", "add", "stm32", "--target", EMBEDDED])

        result = runner.invoke(cli, ["platform", "add", "stm32", "--target", EMBEDDED])

        assert result.exit_code == 1
        assert "Error: Platform 'stm32' already exists" in result.output
        assert "Remedy:" in result.output

    def test_add_requires_target(self, runner, workspace):
        result = runner.invoke(cli, ["platform", "add", "stm32"])

        assert result.exit_code == 2

    def test_remove_absent(self, runner, workspace):
        result = runner.invoke(cli, ["platform", "remove", "ghost"])

        assert result.exit_code == 0
        assert "was not configured" in result.output


class TestGlueCommands:
    def test_init_reports_traits(self, runner, workspace):
        result = runner.invoke(cli, ["glue", "init", "widget", WIDGET])

        assert result.exit_code == 0, result.output
        assert "Analyzed widget-hal 1.2.0" in result.output
        assert "Gpio" in result.output
        assert "Pin" in result.output
        assert "not known to be available" in result.output

        platform = load_glue(workspace / "glue.toml").platforms[0]
        assert platform.capabilities.trait("Gpio").implementors == ["Pin"]

    def test_init_invalid_url(self, runner, workspace):
        result = runner.invoke(cli, ["glue", "init", "widget", "not-a-url"])

        assert result.exit_code == 1
        assert "Invalid repository URL" in result.output
        assert "Remedy:" in result.output

    def test_init_unavailable_repo(self, runner, workspace, wire, make_client):
        wire(client=make_client())

        result = runner.invoke(cli, ["glue", "init", "widget", WIDGET])

        assert result.exit_code == 1
        assert "main, master" in result.output

    def test_list_after_init(self, runner, workspace):
        runner.invoke(cli, ["glue", "init", "widget", WIDGET])

        result = runner.invoke(cli, ["glue", "list"])

        assert result.exit_code == 0
        assert "Capabilities 1.2.0" in result.output

    def test_validate(self, runner, workspace):
        runner.invoke(cli, ["glue", "init", "widget", WIDGET])

        result = runner.invoke(cli, ["glue", "validate"])

        assert result.exit_code == 0
        assert "Validating platform 'widget'" in result.output
        assert "hal-widget directory not found" in result.output
        assert "Validation complete" in result.output

    def test_validate_without_glue(self, runner, wire):
        with runner.isolated_filesystem():
            wire()
            result = runner.invoke(cli, ["glue", "validate"])

            assert result.exit_code == 0
            assert "No glue.toml found" in result.output


class TestBuildCommands:
    def test_host_build(self, runner, workspace, wire):
        commands = wire()

        result = runner.invoke(cli, ["build"])

        assert result.exit_code == 0, result.output
        assert commands.commands == [["cargo", "build", "--workspace"]]
        assert "Build completed successfully!" in result.output

    def test_platform_build_with_cross(self, runner, workspace, wire):
        runner.invoke(cli, ["platform", "add", "stm32", "--target", EMBEDDED])
        commands = wire(tools=("cargo", "cross"))

        result = runner.invoke(cli, ["build", "--target", "stm32"])

        assert result.exit_code == 0, result.output
        assert commands.commands == [["cross", "build", "--target", EMBEDDED, "-p", "app-stm32"]]
        assert load_glue(workspace / "glue.toml").build.toolchain_preferences == {EMBEDDED: "cross"}

    def test_platform_build_without_tools(self, runner, workspace, wire):
        runner.invoke(cli, ["platform", "add", "stm32", "--target", EMBEDDED])
        wire()

        result = runner.invoke(cli, ["build", "-t", "stm32"])

        assert result.exit_code == 1
        assert f"rustup target add {EMBEDDED}" in result.output

    def test_platform_build_in_automation_is_simulated(self, runner, workspace, wire):
        runner.invoke(cli, ["platform", "add", "stm32", "--target", EMBEDDED])
        wire(automated=True, returncode=1)

        result = runner.invoke(cli, ["build", "--target", "stm32"])

        assert result.exit_code == 0, result.output
        assert "simulated" in result.output
        assert "Build completed successfully!" in result.output

    def test_build_failure(self, runner, workspace, wire):
        wire(returncode=101)

        result = runner.invoke(cli, ["build"])

        assert result.exit_code == 1
        assert "exit code 101" in result.output

    def test_host_tests(self, runner, workspace, wire):
        commands = wire()

        result = runner.invoke(cli, ["test"])

        assert result.exit_code == 0
        assert commands.commands[0][:2] == ["cargo", "test"]
        assert "Tests passed!" in result.output

    def test_platform_tests_print_instructions(self, runner, workspace, wire):
        runner.invoke(cli, ["platform", "add", "stm32", "--target", EMBEDDED])
        commands = wire()

        result = runner.invoke(cli, ["test", "--target", "stm32"])

        assert result.exit_code == 0
        assert commands.commands == []
        assert "probe-rs" in result.output


class TestToolchainCommands:
    def test_show_empty(self, runner, workspace):
        result = runner.invoke(cli, ["toolchain", "show"])

        assert result.exit_code == 0
        assert "Default tool: cargo" in result.output
        assert "No toolchain preferences saved." in result.output

    def test_select_then_show(self, runner, workspace, wire):
        wire(tools=("cargo", "cross"))

        result = runner.invoke(cli, ["toolchain", "select", EMBEDDED])
        assert result.exit_code == 0, result.output
        assert "Using cross" in result.output

        result = runner.invoke(cli, ["toolchain", "show"])
        assert "cross" in result.output

    def test_select_forced_cross_missing(self, runner, workspace):
        result = runner.invoke(cli, ["toolchain", "select", EMBEDDED, "--cross"])

        assert result.exit_code == 1
        assert "cargo install cross" in result.output

    def test_configure_prompts(self, runner, workspace, wire):
        wire(tools=("cargo", "cross"), targets=(EMBEDDED,))

        result = runner.invoke(cli, ["toolchain", "configure", EMBEDDED], input="cross\n")

        assert result.exit_code == 0, result.output
        assert "Select build tool" in result.output
        assert load_glue(workspace / "glue.toml").build.toolchain_preferences[EMBEDDED] == "cross"


class TestConfigCommands:
    def test_show(self, runner):
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "[fetch]" in result.output
        assert "manifest_path = Cargo.toml" in result.output

    def test_init_and_refuse_overwrite(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "init"])
            assert result.exit_code == 0
            assert Path("multitarget.toml").is_file()

            result = runner.invoke(cli, ["config", "init"])
            assert result.exit_code == 1

            result = runner.invoke(cli, ["config", "init", "--force"])
            assert result.exit_code == 0

    def test_explicit_config_file(self, runner):
        with runner.isolated_filesystem():
            Path("custom.toml").write_text("[fetch]\ntimeout = 3\n")

            result = runner.invoke(cli, ["--config", "custom.toml", "config", "show"])

            assert result.exit_code == 0
            assert "timeout = 3" in result.output
            assert "custom.toml" in result.output

    def test_path(self, runner):
        result = runner.invoke(cli, ["config", "path"])

        assert result.exit_code == 0
        assert "multitarget.toml" in result.output
