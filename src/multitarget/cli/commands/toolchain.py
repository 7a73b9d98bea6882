"""Toolchain preference commands."""

import click


@click.group()
def toolchain() -> None:
    """Inspect and choose the build tool (cargo or cross) per target."""
    pass


@toolchain.command("show")
def toolchain_show() -> None:
    """Show saved toolchain preferences."""
    from multitarget.cli.progress import console, print_table
    from multitarget.cli.service_helpers import handle_result, services

    summary = handle_result(services.toolchain.show())

    console.print(f"Default tool: {summary.default_tool}")
    if not summary.preferences:
        console.print("No toolchain preferences saved.")
        return

    targets = {}
    for name, target in summary.platform_targets.items():
        targets.setdefault(target, []).append(name)

    rows = [
        [target, tool, ", ".join(targets.get(target, [])) or "-"]
        for target, tool in summary.preferences.items()
    ]
    print_table("Toolchain preferences", ["Target", "Tool", "Platforms"], rows)


@toolchain.command("select")
@click.argument("name")
@click.option("--cross", "use_cross", is_flag=True, help="Require cross")
def toolchain_select(name: str, use_cross: bool) -> None:
    """Choose a build tool automatically for a platform or target triple."""
    from multitarget.cli.progress import print_success, print_warning
    from multitarget.cli.service_helpers import handle_result, services

    result = services.toolchain.select(name, force_secondary=use_cross)
    handle_result(result)
    for warning in result.warnings:
        print_warning(warning)
    print_success(result.message)


@toolchain.command("configure")
@click.argument("name")
def toolchain_configure(name: str) -> None:
    """Choose a build tool interactively and save it."""
    from multitarget.cli.progress import print_success, print_warning
    from multitarget.cli.service_helpers import handle_result, services

    result = services.toolchain.configure(name)
    handle_result(result)
    for warning in result.warnings:
        print_warning(warning)
    print_success(result.message)
