"""Host tool tracking and reporting models."""

from dataclasses import dataclass
from typing import List, Optional

from multitarget.models.base import ToDictMixin


@dataclass
class ToolInfo(ToDictMixin):
    """Information about a host build tool."""

    name: str
    description: str
    required_for: str
    installed: bool
    version: Optional[str] = None
    install_hint: Optional[str] = None


@dataclass
class ToolReport(ToDictMixin):
    """Report of all host tool statuses."""

    all_installed: bool
    tools: List[ToolInfo]
