"""
multitarget CLI - Multi-Target Rust Embedded Projects
"""

from typing import Optional

import click

from multitarget import __version__

from .commands import build, config, glue, init, platform, test, toolchain


@click.group()
@click.version_option(version=__version__, prog_name="multitarget")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (overrides the standard locations)",
)
def cli(verbose: bool, quiet: bool, config_path: Optional[str]) -> None:
    """multitarget - manage cross-platform, host-testable Rust embedded projects

    Use 'multitarget COMMAND --help' for more information on a command.
    """
    from multitarget.core.config import load_config_cascade, set_config
    from multitarget.core.logger import set_level

    loaded = load_config_cascade(config_path)
    set_config(loaded)

    if verbose:
        set_level("DEBUG")
    elif quiet:
        set_level("ERROR")
    else:
        set_level(loaded.get("logging", "level", "WARNING"))


# Register commands
cli.add_command(init)
cli.add_command(platform)
cli.add_command(glue)
cli.add_command(build)
cli.add_command(test)
cli.add_command(toolchain)
cli.add_command(config)


if __name__ == "__main__":
    cli()
