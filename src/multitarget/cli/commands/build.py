"""Build and test commands."""

import click


@click.command("build")
@click.option("--target", "-t", "platform_name", default=None, help="Platform to build for")
@click.option("--cross", "use_cross", is_flag=True, help="Use cross instead of cargo")
def build(platform_name: str, use_cross: bool) -> None:
    """Build the project.

    Without --target, builds the host workspace with cargo. With a
    platform, picks cargo or cross for its target triple (remembering the
    choice in glue.toml) and builds app-PLATFORM.

    \b
    Examples:
        multitarget build
        multitarget build --target stm32
        multitarget build --target stm32 --cross
    """
    from multitarget.cli.progress import console, is_terminal, print_success, print_warning
    from multitarget.cli.service_helpers import handle_result, services

    if platform_name:
        console.print(f"[bold]Building for platform:[/bold] {platform_name}")
    else:
        console.print("[bold]Building core-lib and tests for host[/bold]")

    result = services.build.build(platform_name, force_secondary=use_cross, interactive=is_terminal())
    outcome = handle_result(result)

    console.print(f"Ran: {' '.join(outcome.command)}")
    for warning in result.warnings:
        print_warning(warning)
    print_success("Build completed successfully!")


@click.command("test")
@click.option("--target", "-t", "platform_name", default=None, help="Platform to test on")
def test(platform_name: str) -> None:
    """Run tests.

    Without --target, runs host tests for every crate except app-*.
    """
    from multitarget.cli.progress import console, print_info, print_success
    from multitarget.cli.service_helpers import handle_result, services

    if platform_name:
        console.print(f"[bold]Running tests on target:[/bold] {platform_name}")
    else:
        console.print("[bold]Running native unit tests[/bold]")

    result = services.build.test(platform_name)
    handle_result(result)

    if platform_name:
        print_info(result.message)
        for line in result.warnings:
            console.print(line)
        return

    print_success("Tests passed!")
