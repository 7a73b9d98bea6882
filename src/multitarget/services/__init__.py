"""
Services
========

Operations used by the CLI. Each returns a ServiceResult instead of
raising for expected failures.
"""

from .base import BaseService, ServiceResult
from .build import BuildService
from .config import ConfigService
from .dependency import DependencyService
from .factory import ServiceFactory
from .glue import GlueService
from .project import ProjectService
from .toolchain import ToolchainService

__all__ = [
    "BaseService",
    "BuildService",
    "ConfigService",
    "DependencyService",
    "GlueService",
    "ProjectService",
    "ServiceFactory",
    "ServiceResult",
    "ToolchainService",
]
