"""Command-line interface for multitarget."""

from .cli import cli

__all__ = ["cli"]
