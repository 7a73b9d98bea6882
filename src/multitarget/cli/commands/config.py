"""Configuration management commands."""

import click


@click.group()
def config() -> None:
    """Configuration and host tool information commands."""
    pass


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    from multitarget.cli.progress import console
    from multitarget.cli.service_helpers import handle_result, services

    config_obj = handle_result(services.config.get_config())

    console.print("\n[bold]Current Configuration[/bold]")
    if config_obj._source:
        console.print(f"[dim]Source: {config_obj._source}[/dim]\n")
    else:
        console.print("[dim]Source: defaults (no config file found)[/dim]\n")

    for section_name in ("fetch", "toolchain", "logging"):
        section = getattr(config_obj, section_name, {})
        if section:
            console.print(f"[bold blue]\\[{section_name}][/bold blue]")
            for key, value in section.items():
                console.print(f"  {key} = {value}", markup=False)
            console.print()


@config.command("init")
@click.option("--output", "-o", default="multitarget.toml", help="Output file path")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing file")
def config_init(output: str, force: bool) -> None:
    """Create a default configuration file."""
    from multitarget.cli.progress import print_error, print_success
    from multitarget.cli.service_helpers import services

    result = services.config.create_default_config(output, force=force)

    if not result.success:
        print_error(result.error)
        raise SystemExit(1)

    print_success(f"Created configuration file: {output}")


@config.command("path")
def config_path() -> None:
    """Show configuration file search paths."""
    from pathlib import Path

    from multitarget.cli.progress import console
    from multitarget.cli.service_helpers import services

    console.print("\n[bold]Configuration File Search Paths[/bold]\n")
    console.print("Files are merged in reverse order (first listed wins):\n")

    active_result = services.config.find_config_file()
    active_config = Path(active_result.data) if active_result.success and active_result.data else None

    locations_result = services.config.get_config_locations()
    if locations_result.success:
        locations = [Path(loc) for loc in locations_result.data]
        for i, location in enumerate(locations, 1):
            exists = location.exists()
            status = (
                "[green]✓ ACTIVE[/green]"
                if location == active_config
                else ("[dim]exists[/dim]" if exists else "[dim]not found[/dim]")
            )
            console.print(f"  {i}. {location} {status}")

    console.print()


@config.command("deps")
def config_deps() -> None:
    """Check host build tools (cargo, rustup, cross).

    \b
    Examples:
        multitarget config deps
    """
    from multitarget.cli.progress import console
    from multitarget.cli.service_helpers import handle_result, services

    report = handle_result(services.dependency.check_all())

    console.print("\n[bold]Host Build Tools[/bold]\n")

    for tool in report.tools:
        if tool.installed:
            version_str = f" (v{tool.version})" if tool.version else ""
            console.print(f"[green]✓[/green] {tool.name}{version_str}")
            console.print(f"  [dim]{tool.description} - {tool.required_for}[/dim]")
        else:
            console.print(f"[red]✗[/red] {tool.name} [red]not installed[/red]")
            console.print(f"  [dim]{tool.description} - {tool.required_for}[/dim]")
            if tool.install_hint:
                console.print(f"  [yellow]Install: {tool.install_hint}[/yellow]")

    console.print()

    if report.all_installed:
        console.print("[green]All host build tools are installed![/green]")
