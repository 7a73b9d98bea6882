"""Glue model commands: HAL capability analysis and validation."""

import click


@click.group()
def glue() -> None:
    """Manage glue configurations (HAL capabilities per platform)."""
    pass


@glue.command("init")
@click.argument("platform_name", metavar="PLATFORM")
@click.argument("repo_url")
@click.option("--target", "-t", default=None, help="Target triple (inferred when omitted)")
def glue_init(platform_name: str, repo_url: str, target: str) -> None:
    """Analyze a HAL crate on GitHub and record its capabilities.

    Fetches Cargo.toml and src/lib.rs, extracts the traits the crate
    declares and implements, and reports which can be mocked for host
    testing.

    \b
    Examples:
        multitarget glue init stm32 https://github.com/stm32-rs/stm32f4xx-hal
        multitarget glue init nrf https://github.com/nrf-rs/nrf-hal --target thumbv7em-none-eabihf
    """
    from multitarget.cli.progress import console, print_success, print_warning, status
    from multitarget.cli.service_helpers import handle_result, services

    with status(f"Analyzing {repo_url}..."):
        result = services.glue.analyze(platform_name, repo_url, target=target)
    platform = handle_result(result)
    report = platform.capabilities

    version = f" {report.version}" if report.version else ""
    print_success(f"Analyzed {platform.hal_crate or repo_url}{version} for '{platform.name}' ({platform.target})")

    if report.traits:
        console.print("Traits:")
        for info in report.traits:
            mark = "[green]mock[/green]" if info.native_mock else "[yellow]hardware[/yellow]"
            implementors = ", ".join(info.implementors) or "-"
            console.print(f"  - {info.name} ({mark}) implemented by: {implementors}")
    else:
        console.print("No traits found.")

    if report.mocked_traits:
        console.print(f"Mockable on host: {', '.join(report.mocked_traits)}")
    if report.required_traits:
        console.print(f"From dependencies: {', '.join(report.required_traits)}")
    for warning in result.warnings:
        print_warning(warning)


@glue.command("list")
def glue_list() -> None:
    """List glue configurations (alias for 'platform list')."""
    from multitarget.cli.commands.platform import print_platforms
    from multitarget.cli.service_helpers import handle_result, services

    print_platforms(handle_result(services.glue.list_platforms()))


@glue.command("validate")
def glue_validate() -> None:
    """Validate glue configurations against the workspace."""
    from multitarget.cli.progress import console, print_success, print_warning
    from multitarget.cli.service_helpers import handle_result, services

    console.print("Validating glue configurations...")
    report = handle_result(services.glue.validate())

    if not report.glue_found:
        console.print("No glue.toml found")
        return

    for check in report.platforms:
        console.print(f"Validating platform '{check.name}'")
        for issue in check.issues:
            print_warning(f"Warning: {issue}")

    print_success("Validation complete")
