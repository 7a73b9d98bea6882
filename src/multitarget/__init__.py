"""
multitarget - Multi-Target Rust Project Tooling
===============================================

Version: 0.1.0
"""

__version__ = "0.1.0"

# Re-export the persisted model types for convenience
from multitarget.models.glue import (
    BuildConfig,
    CapabilityReport,
    GlueModel,
    InterfaceInfo,
    Platform,
)

__all__ = [
    "__version__",
    "BuildConfig",
    "CapabilityReport",
    "GlueModel",
    "InterfaceInfo",
    "Platform",
]
