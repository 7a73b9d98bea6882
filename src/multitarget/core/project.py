"""
Project Discovery
=================

A multitarget project is a Cargo workspace whose root holds ``glue.toml``.
"""

from pathlib import Path
from typing import Optional

from multitarget.core.glue import GLUE_FILENAME

PROJECT_MARKER = GLUE_FILENAME
WORKSPACE_MANIFEST = "Cargo.toml"


def find_project_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the project root by searching for glue.toml.

    Traverses from the start path upward through parent directories
    until a glue.toml file is found or the filesystem root is reached.

    Args:
        start_path: Directory to start search from (default: cwd)

    Returns:
        Path to project root, or None if not in a project
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()

    while current != current.parent:
        if (current / PROJECT_MARKER).is_file():
            return current
        current = current.parent

    # Check root directory
    if (current / PROJECT_MARKER).is_file():
        return current

    return None


def is_in_project(path: Optional[Path] = None) -> bool:
    return find_project_root(path) is not None


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """The enclosing project root, or the start directory when not inside one."""
    start = Path(path) if path is not None else Path.cwd()
    root = find_project_root(start)
    return root if root is not None else start.resolve()


def glue_path(root: Path) -> Path:
    return Path(root) / GLUE_FILENAME
