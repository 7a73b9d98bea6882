# services/toolchain.py
"""
Service for inspecting and choosing build tools per target.

Every decision is written back to glue.toml before it is returned.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from multitarget.core.errors import MultitargetError
from multitarget.core.glue import GLUE_FILENAME, find_platform, load_glue, save_glue
from multitarget.core.toolchain import EnvironmentProbe, HostEnvironment, Prompt, ToolchainSelector
from multitarget.models.base import ToDictMixin
from multitarget.models.glue import PRIMARY_TOOL, GlueModel
from multitarget.models.toolchain import ToolchainDecision

from .base import BaseService, ServiceResult

logger = logging.getLogger(__name__)


@dataclass
class ToolchainSummary(ToDictMixin):
    """Saved preferences plus the target of every configured platform."""

    default_tool: str = PRIMARY_TOOL
    preferences: Dict[str, str] = field(default_factory=dict)
    platform_targets: Dict[str, str] = field(default_factory=dict)


def resolve_target(model: GlueModel, name: str) -> Tuple[Optional[str], str]:
    """
    Interpret ``name`` as a platform name, falling back to a raw target triple.

    Returns:
        Tuple of (platform name or None, target triple)
    """
    platform = find_platform(model, name)
    if platform is not None:
        return platform.name, platform.target
    return None, name


class ToolchainService(BaseService):
    """
    Service for toolchain preferences and selection.

    Args:
        config: Tool configuration
        project_root: Directory holding glue.toml
        probe: Host facts; a HostEnvironment using the configured automation
            markers is created when omitted
        prompt: Chooser used by ``configure`` when both tools are viable
    """

    def __init__(
        self,
        config=None,
        project_root=None,
        probe: Optional[EnvironmentProbe] = None,
        prompt: Optional[Prompt] = None,
    ) -> None:
        super().__init__(config=config, project_root=project_root)
        self._probe = probe
        self.prompt = prompt

    @property
    def probe(self) -> EnvironmentProbe:
        if self._probe is None:
            markers = self.config.get("toolchain", "automation_markers", None)
            self._probe = HostEnvironment(markers) if markers is not None else HostEnvironment()
        return self._probe

    @property
    def glue_path(self) -> Path:
        return self.project_root / GLUE_FILENAME

    def selector(self) -> ToolchainSelector:
        return ToolchainSelector(self.probe, prompt=self.prompt)

    def show(self) -> ServiceResult[ToolchainSummary]:
        try:
            model = load_glue(self.glue_path)
        except MultitargetError as e:
            return ServiceResult.from_error(e)

        summary = ToolchainSummary(
            platform_targets={p.name: p.target for p in model.platforms},
        )
        if model.build is not None:
            summary.default_tool = model.build.default_tool
            summary.preferences = dict(model.build.toolchain_preferences)
        return ServiceResult.ok(data=summary)

    def select(self, name: str, force_secondary: bool = False) -> ServiceResult[ToolchainDecision]:
        """Run automatic selection for a platform or target triple and save the choice."""
        return self._decide(name, lambda sel, model, target: sel.select(model, target, force_secondary))

    def configure(self, name: str) -> ServiceResult[ToolchainDecision]:
        """Run interactive configuration for a platform or target triple and save the choice."""
        return self._decide(name, lambda sel, model, target: sel.configure(model, target))

    def _decide(self, name: str, decide) -> ServiceResult[ToolchainDecision]:
        try:
            model = load_glue(self.glue_path)
            _, target = resolve_target(model, name)
            decision = decide(self.selector(), model, target)
            save_glue(model, self.glue_path)
        except MultitargetError as e:
            return ServiceResult.from_error(e)
        except OSError as e:
            return ServiceResult.fail(f"Could not write {self.glue_path}: {e}")

        warnings = []
        if decision.simulated:
            warnings.append(f"Simulated {decision.tool} selection for {decision.target}")
        return ServiceResult.ok(
            data=decision,
            message=f"Using {decision.tool} for {decision.target} ({decision.reason})",
            warnings=warnings,
        )
