"""Platform management commands."""

import click


@click.group()
def platform() -> None:
    """Add, list and remove target platforms."""
    pass


@platform.command("add")
@click.argument("name")
@click.option("--target", "-t", required=True, help="Target triple (e.g. thumbv7em-none-eabi)")
@click.option("--hal", default=None, help="HAL crate the wrapper crate depends on")
def platform_add(name: str, target: str, hal: str) -> None:
    """Add a new target platform.

    Registers the platform in glue.toml and generates hal-NAME and
    app-NAME crates.

    \b
    Examples:
        multitarget platform add stm32 --target thumbv7em-none-eabi --hal stm32f4xx-hal
        multitarget platform add desktop --target x86_64-unknown-linux-gnu
    """
    from multitarget.cli.progress import console, print_success, print_warning
    from multitarget.cli.service_helpers import handle_result, services

    console.print(f"[bold]Adding platform[/bold] '{name}' with target '{target}'")
    result = services.project.add_platform(name, target, hal_crate=hal)
    summary = handle_result(result)

    for path in summary.created:
        console.print(f"  [green]✓[/green] Created {path.relative_to(summary.root)}")
    for warning in result.warnings:
        print_warning(warning)

    print_success(f"Platform '{name}' added successfully!")


def print_platforms(platforms) -> None:
    from multitarget.cli.progress import console

    if not platforms:
        console.print("No platforms configured. Use 'multitarget platform add' to add one.")
        return

    console.print("Configured platforms:")
    for p in platforms:
        console.print(f"  - {p.name} ({p.target})")
        if p.hal_crate:
            console.print(f"    HAL: {p.hal_crate}")
        report = p.capabilities
        if report is not None:
            version = f" {report.version}" if report.version else ""
            console.print(
                f"    Capabilities{version}: {len(report.traits)} trait(s), "
                f"{len(report.mocked_traits)} mockable, {len(report.warnings)} warning(s)"
            )


@platform.command("list")
def platform_list() -> None:
    """List all configured platforms."""
    from multitarget.cli.service_helpers import handle_result, services

    print_platforms(handle_result(services.glue.list_platforms()))


@platform.command("remove")
@click.argument("name")
def platform_remove(name: str) -> None:
    """Remove a platform from glue.toml.

    Generated crates are left on disk.
    """
    from multitarget.cli.progress import print_info, print_success
    from multitarget.cli.service_helpers import handle_result, services

    result = services.glue.remove_platform(name)
    removed = handle_result(result)
    if removed:
        print_success(result.message)
    else:
        print_info(result.message)
