"""
CLI Service Helpers
===================

CLI-specific utilities for working with services and the ServiceFactory.

This module provides convenience functions for CLI commands to:
1. Access a singleton ServiceFactory instance
2. Handle service result errors consistently, including remedies
3. Reduce boilerplate in command implementations

Usage:
    from multitarget.cli.service_helpers import services, handle_result

    platforms = handle_result(services.glue.list_platforms())
"""

from typing import TYPE_CHECKING, Any, Optional, Sequence, TypeVar

import click

if TYPE_CHECKING:
    from multitarget.services import ServiceFactory
    from multitarget.services.base import ServiceResult
    from multitarget.services.build import BuildService
    from multitarget.services.config import ConfigService
    from multitarget.services.dependency import DependencyService
    from multitarget.services.glue import GlueService
    from multitarget.services.project import ProjectService
    from multitarget.services.toolchain import ToolchainService

# Type variable for generic result handling
T = TypeVar("T")


def prompt_for_tool(target: str, options: Sequence[str], default: str) -> str:
    """Ask the user which build tool to use for ``target``."""
    return click.prompt(
        f"Select build tool for {target}",
        type=click.Choice(list(options)),
        default=default,
    )


# ============================================================================
# Singleton Factory Instance
# ============================================================================

_factory: "Optional[ServiceFactory]" = None


def get_factory() -> "ServiceFactory":
    """
    Get the singleton ServiceFactory instance for CLI.

    This is lazily initialized on first access. For testing or custom
    configurations, use set_factory() to inject a custom instance.
    """
    global _factory
    if _factory is None:
        from multitarget.services import ServiceFactory

        _factory = ServiceFactory(prompt=prompt_for_tool)
    return _factory


def set_factory(factory: "ServiceFactory") -> None:
    """
    Set a custom ServiceFactory instance.

    Example:
        # In tests
        set_factory(ServiceFactory(probe=FakeProbe(), http_client=FakeClient()))
    """
    global _factory
    _factory = factory


class _ServiceAccessor:
    """
    Lazy accessor for services.

    Each access builds a fresh service from the singleton factory, so
    services never hold state across commands.
    """

    @property
    def glue(self) -> "GlueService":
        return get_factory().create_glue_service()

    @property
    def toolchain(self) -> "ToolchainService":
        return get_factory().create_toolchain_service()

    @property
    def build(self) -> "BuildService":
        return get_factory().create_build_service()

    @property
    def project(self) -> "ProjectService":
        return get_factory().create_project_service()

    @property
    def config(self) -> "ConfigService":
        return get_factory().create_config_service()

    @property
    def dependency(self) -> "DependencyService":
        return get_factory().create_dependency_service()


services = _ServiceAccessor()


# ============================================================================
# Result Handling Utilities
# ============================================================================


def handle_result(result: "ServiceResult[T]") -> T:
    """
    Handle a service result, exiting with error if failed.

    Args:
        result: Service result to handle

    Returns:
        The result data if successful

    Raises:
        SystemExit: If result indicates failure (exits with code 1)
    """
    if not result.success:
        exit_with_error(result.error or "Unknown error", remedy=result.remedy)
    return result.data


def exit_with_error(message: str, code: int = 1, remedy: Optional[str] = None) -> None:
    """
    Print error message (and remedy, if any) and exit.

    Raises:
        SystemExit: Always exits with specified code
    """
    click.echo(f"Error: {message}", err=True)
    if remedy:
        click.echo(f"Remedy: {remedy}", err=True)
    raise SystemExit(code)


def check_result(result: "ServiceResult[Any]", error_message: Optional[str] = None) -> bool:
    """
    Check if a result is successful, exit with error if not.

    Returns:
        True if successful (always returns True, exits otherwise)
    """
    if not result.success:
        exit_with_error(error_message or result.error or "Unknown error", remedy=result.remedy)
    return True


def reset_factory() -> None:
    """Reset the singleton factory instance (used by tests)."""
    global _factory
    _factory = None


__all__ = [
    "services",
    "get_factory",
    "set_factory",
    "handle_result",
    "exit_with_error",
    "check_result",
    "reset_factory",
    "prompt_for_tool",
]
