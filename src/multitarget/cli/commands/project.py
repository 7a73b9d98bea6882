"""Workspace creation command."""

import click


@click.command("init")
@click.argument("name")
def init(name: str) -> None:
    """Initialize a new multi-target project.

    \b
    Examples:
        multitarget init blinky
    """
    from multitarget.cli.progress import console, print_success
    from multitarget.cli.service_helpers import handle_result, services

    console.print(f"[bold]Initializing new multi-target project:[/bold] {name}")
    summary = handle_result(services.project.init(name))

    for path in summary.created:
        console.print(f"  [green]✓[/green] Created {path.relative_to(summary.root)}")

    print_success(f"Project '{name}' initialized successfully!")
    console.print(f"Created at: {summary.root}")
    console.print("\nNext steps:")
    console.print(f"  cd {name}")
    console.print("  multitarget test                               # Run host tests")
    console.print("  multitarget platform add <name> --target <triple>")
