"""Toolchain decision and build outcome models."""

from dataclasses import dataclass, field
from typing import List, Optional

from multitarget.models.base import ToDictMixin


@dataclass
class ToolchainDecision(ToDictMixin):
    """
    Which build tool to use for a target, and why.

    ``reason`` is one of: forced, saved, installed-target, secondary-available,
    desktop, interactive, simulated.
    """

    tool: str
    target: str
    reason: str
    simulated: bool = False


@dataclass
class BuildOutcome(ToDictMixin):
    """Result of one build or test invocation."""

    tool: str
    command: List[str]
    returncode: int
    target: Optional[str] = None
    simulated: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0 or self.simulated
