"""CLI command modules for multitarget."""

from .build import build, test
from .config import config
from .glue import glue
from .platform import platform
from .project import init
from .toolchain import toolchain

__all__ = [
    "build",
    "config",
    "glue",
    "init",
    "platform",
    "test",
    "toolchain",
]
