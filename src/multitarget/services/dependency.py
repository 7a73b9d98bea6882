# services/dependency.py
"""
Service for checking the host build tools multitarget drives
(cargo, rustup and cross).
"""

import shutil
import subprocess
from typing import Dict, List, Optional

from multitarget.core.toolchain import SECONDARY_INSTALL_REMEDY
from multitarget.models.dependency import ToolInfo, ToolReport

from .base import BaseService, ServiceResult

RUSTUP_URL = "https://rustup.rs"

TOOLS: Dict[str, Dict[str, str]] = {
    "cargo": {
        "description": "Rust package manager and build tool",
        "required_for": "Host builds, host tests and embedded builds with installed targets",
        "install_hint": f"Install Rust with rustup: {RUSTUP_URL}",
    },
    "rustup": {
        "description": "Rust toolchain installer",
        "required_for": "Detecting and adding cross-compilation targets",
        "install_hint": f"Install from {RUSTUP_URL}",
    },
    "cross": {
        "description": "Zero-setup cross compilation in containers",
        "required_for": "Embedded builds when the target is not installed locally",
        "install_hint": SECONDARY_INSTALL_REMEDY,
    },
}


def _tool_version(name: str) -> Optional[str]:
    """First line of ``<name> --version``, or None if it cannot be run."""
    try:
        result = subprocess.run(
            [name, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if result.returncode != 0:
        return None
    first_line = result.stdout.strip().split("\n")[0]
    parts = first_line.split()
    return parts[1] if len(parts) > 1 else first_line or None


def check_tool(name: str) -> ToolInfo:
    """Check whether a known host tool is installed."""
    details = TOOLS[name]
    installed = shutil.which(name) is not None
    return ToolInfo(
        name=name,
        description=details["description"],
        required_for=details["required_for"],
        installed=installed,
        version=_tool_version(name) if installed else None,
        install_hint=details["install_hint"],
    )


def check_all_tools() -> List[ToolInfo]:
    return [check_tool(name) for name in TOOLS]


class DependencyService(BaseService):
    """
    Service for host tool checking.

    Provides ServiceResult-wrapped methods for dependency reporting.
    """

    def check_all(self) -> ServiceResult[ToolReport]:
        """
        Check all host build tools.

        Returns:
            ServiceResult containing a ToolReport
        """
        tools = check_all_tools()
        report = ToolReport(all_installed=all(t.installed for t in tools), tools=tools)
        missing = [t.name for t in tools if not t.installed]
        message = "All tools installed" if not missing else f"Missing: {', '.join(missing)}"
        return ServiceResult.ok(data=report, message=message)

    def check(self, name: str) -> ServiceResult[ToolInfo]:
        if name not in TOOLS:
            return ServiceResult.fail(f"Unknown tool: {name}. Known tools: {', '.join(TOOLS)}")
        info = check_tool(name)
        status = "installed" if info.installed else "not installed"
        return ServiceResult.ok(data=info, message=f"{name} is {status}")
