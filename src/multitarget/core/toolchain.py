"""
Build-Toolchain Selector
========================

Chooses between ``cargo`` (primary, always assumed present) and ``cross``
(secondary, builds inside a container and may not be installed) for a
target triple, and records the choice in the glue model.

Automatic selection evaluates an ordered list of strategies and stops at
the first one that produces a decision:

1. forced secondary (fails with ExecutorUnavailable if cross is missing)
2. saved preference (a saved ``cross`` only counts while cross is installed)
3. non-desktop targets: installed target -> cargo, else cross if installed,
   else NoViableExecutor
4. desktop targets -> cargo

Host facts come from an EnvironmentProbe so the decision logic can be
driven by synthetic facts in tests.
"""

import logging
import os
import shutil
import subprocess
from typing import Callable, Iterable, List, Optional, Protocol, Sequence

from multitarget.core.errors import ExecutorUnavailable, NoViableExecutor
from multitarget.core.glue import get_toolchain_preference, set_toolchain_preference
from multitarget.models.glue import PRIMARY_TOOL, SECONDARY_TOOL, GlueModel
from multitarget.models.toolchain import ToolchainDecision

logger = logging.getLogger(__name__)

DESKTOP_MARKERS = ("linux", "windows", "darwin")
DEFAULT_AUTOMATION_MARKERS = ("CI", "GITHUB_ACTIONS", "MULTITARGET_NONINTERACTIVE")

SECONDARY_INSTALL_REMEDY = "cargo install cross --git https://github.com/cross-rs/cross"
SECONDARY_RUNTIME_REMEDY = "ensure Docker or Podman is running (cross needs a container engine)"


def target_install_remedy(target: str) -> str:
    return f"rustup target add {target}"


def is_desktop_target(target: str) -> bool:
    """True if the triple names a desktop OS (linux, windows or darwin)."""
    return any(marker in target for marker in DESKTOP_MARKERS)


def failure_remedy(tool: str, target: Optional[str]) -> str:
    """Suggested fix after ``tool`` fails to build ``target``."""
    if tool == SECONDARY_TOOL:
        return SECONDARY_RUNTIME_REMEDY
    if target:
        return target_install_remedy(target)
    return "check the compiler output above"


class EnvironmentProbe(Protocol):
    """Read-only questions the selector asks about the host."""

    def is_tool_installed(self, tool: str) -> bool: ...

    def is_target_installed(self, target: str) -> bool: ...

    def is_automated(self) -> bool: ...


class HostEnvironment:
    """
    EnvironmentProbe backed by the real host.

    Args:
        automation_markers: Environment variables whose presence marks a
            non-interactive (automated) run
    """

    def __init__(self, automation_markers: Iterable[str] = DEFAULT_AUTOMATION_MARKERS):
        self.automation_markers = tuple(automation_markers)

    def is_tool_installed(self, tool: str) -> bool:
        return shutil.which(tool) is not None

    def installed_targets(self) -> List[str]:
        """Targets reported by ``rustup target list --installed``; empty if rustup fails."""
        try:
            result = subprocess.run(
                ["rustup", "target", "list", "--installed"],
                capture_output=True,
                text=True,
                timeout=30,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"rustup target list failed: {e}")
            return []
        if result.returncode != 0:
            logger.debug(f"rustup target list exited with {result.returncode}")
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def is_target_installed(self, target: str) -> bool:
        return target in self.installed_targets()

    def is_automated(self) -> bool:
        return any(os.environ.get(marker) for marker in self.automation_markers)


# (target, options, default) -> chosen tool
Prompt = Callable[[str, Sequence[str], str], str]

Strategy = Callable[[GlueModel, str], Optional[ToolchainDecision]]


class ToolchainSelector:
    """
    Decides which build tool to use for a target and records the choice.

    Args:
        probe: Source of host facts
        prompt: Called by ``configure`` when more than one tool is viable;
            when omitted the default option is taken

    Example:
        >>> selector = ToolchainSelector(HostEnvironment())
        >>> decision = selector.select(model, "thumbv7em-none-eabi")
        >>> decision.tool
        'cross'
    """

    def __init__(self, probe: EnvironmentProbe, prompt: Optional[Prompt] = None):
        self.probe = probe
        self.prompt = prompt

    def select(
        self,
        model: GlueModel,
        target: str,
        force_secondary: bool = False,
    ) -> ToolchainDecision:
        """
        Automatically choose a build tool for ``target``.

        The decision is written into the model's preferences; saving the
        model is left to the caller.

        Raises:
            ExecutorUnavailable: cross was forced but is not installed
            NoViableExecutor: embedded target with neither the target nor cross installed
        """
        strategies: List[Strategy] = []
        if force_secondary:
            strategies.append(self._forced_secondary)
        strategies.extend([self._saved_preference, self._embedded_heuristic, self._desktop_fallback])

        for strategy in strategies:
            decision = strategy(model, target)
            if decision is not None:
                return self._remember(model, decision)

        # _desktop_fallback always decides; unreachable in practice
        raise NoViableExecutor(target, self._remedies(target))

    def configure(self, model: GlueModel, target: str) -> ToolchainDecision:
        """
        Interactively choose a build tool for ``target`` and record it.

        One viable option is taken without asking: cargo when the target is
        installed, cross when only cross is. With both viable the prompt is
        shown with cargo as the default; automated runs take the default
        without asking.
        With none viable an automated run gets a simulated cargo choice;
        otherwise NoViableExecutor is raised.
        """
        target_installed = self.probe.is_target_installed(target)
        secondary_installed = self.probe.is_tool_installed(SECONDARY_TOOL)

        options: List[str] = []
        if target_installed or is_desktop_target(target):
            options.append(PRIMARY_TOOL)
        if secondary_installed:
            options.append(SECONDARY_TOOL)

        if not options:
            if self.probe.is_automated():
                logger.warning(
                    f"No build tool available for '{target}'; simulating {PRIMARY_TOOL} "
                    "in an automated run"
                )
                decision = ToolchainDecision(PRIMARY_TOOL, target, "simulated", simulated=True)
                return self._remember(model, decision)
            raise NoViableExecutor(target, self._remedies(target))

        if len(options) == 1:
            return self._remember(model, ToolchainDecision(options[0], target, "interactive"))

        default = PRIMARY_TOOL
        chosen = default
        if self.prompt is not None and not self.probe.is_automated():
            chosen = self.prompt(target, options, default)
            if chosen not in options:
                logger.warning(f"Ignoring unknown choice '{chosen}'; using {default}")
                chosen = default
        return self._remember(model, ToolchainDecision(chosen, target, "interactive"))

    def _forced_secondary(self, model: GlueModel, target: str) -> Optional[ToolchainDecision]:
        if not self.probe.is_tool_installed(SECONDARY_TOOL):
            raise ExecutorUnavailable(SECONDARY_TOOL, SECONDARY_INSTALL_REMEDY)
        return ToolchainDecision(SECONDARY_TOOL, target, "forced")

    def _saved_preference(self, model: GlueModel, target: str) -> Optional[ToolchainDecision]:
        saved = get_toolchain_preference(model, target)
        if saved == PRIMARY_TOOL:
            return ToolchainDecision(PRIMARY_TOOL, target, "saved")
        if saved == SECONDARY_TOOL:
            if self.probe.is_tool_installed(SECONDARY_TOOL):
                return ToolchainDecision(SECONDARY_TOOL, target, "saved")
            logger.info(f"Saved preference '{saved}' for {target} ignored: cross is not installed")
        elif saved is not None:
            logger.info(f"Ignoring unknown saved tool '{saved}' for {target}")
        return None

    def _embedded_heuristic(self, model: GlueModel, target: str) -> Optional[ToolchainDecision]:
        if is_desktop_target(target):
            return None
        if self.probe.is_target_installed(target):
            return ToolchainDecision(PRIMARY_TOOL, target, "installed-target")
        if self.probe.is_tool_installed(SECONDARY_TOOL):
            return ToolchainDecision(SECONDARY_TOOL, target, "secondary-available")
        raise NoViableExecutor(target, self._remedies(target))

    def _desktop_fallback(self, model: GlueModel, target: str) -> Optional[ToolchainDecision]:
        return ToolchainDecision(PRIMARY_TOOL, target, "desktop")

    @staticmethod
    def _remedies(target: str) -> List[str]:
        return [target_install_remedy(target), SECONDARY_INSTALL_REMEDY]

    @staticmethod
    def _remember(model: GlueModel, decision: ToolchainDecision) -> ToolchainDecision:
        set_toolchain_preference(model, decision.target, decision.tool)
        logger.info(f"Selected {decision.tool} for {decision.target} ({decision.reason})")
        return decision
