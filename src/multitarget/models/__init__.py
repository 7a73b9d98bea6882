"""Data models shared by the core, services and CLI layers."""

from .base import ToDictMixin
from .dependency import ToolInfo, ToolReport
from .glue import (
    PRIMARY_TOOL,
    SECONDARY_TOOL,
    BuildConfig,
    CapabilityReport,
    GlueModel,
    InterfaceInfo,
    Platform,
)
from .toolchain import BuildOutcome, ToolchainDecision

__all__ = [
    "PRIMARY_TOOL",
    "SECONDARY_TOOL",
    "BuildConfig",
    "BuildOutcome",
    "CapabilityReport",
    "GlueModel",
    "InterfaceInfo",
    "Platform",
    "ToDictMixin",
    "ToolInfo",
    "ToolReport",
    "ToolchainDecision",
]
