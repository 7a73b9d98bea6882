# services/project.py
"""
Service for workspace scaffolding: creating a new multi-target workspace
and adding platform crates to an existing one.

Usage:
    service = ProjectService()

    result = service.init("blinky")
    if result.success:
        print(f"Created: {result.data.root}")

    result = service.add_platform("stm32", "thumbv7em-none-eabi", hal_crate="stm32f4xx-hal")
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from multitarget.core.errors import MultitargetError
from multitarget.core.glue import GLUE_FILENAME, add_platform, load_glue, save_glue
from multitarget.core.scaffold import (
    add_workspace_members,
    create_platform_crates,
    create_workspace,
)
from multitarget.models.base import ToDictMixin
from multitarget.models.glue import Platform

from .base import BaseService, ServiceResult

logger = logging.getLogger(__name__)


@dataclass
class ScaffoldSummary(ToDictMixin):
    """Files written by a scaffolding operation."""

    root: Path
    created: List[Path] = field(default_factory=list)
    platform: Optional[Platform] = None


class ProjectService(BaseService):
    """Service for creating workspaces and platform crates."""

    def init(self, name: str, parent: Optional[Path] = None) -> ServiceResult[ScaffoldSummary]:
        """
        Create a new workspace ``<parent>/<name>``.

        Fails if the directory already contains a glue.toml.
        """
        parent = Path(parent) if parent is not None else Path.cwd()
        try:
            created = create_workspace(parent, name)
        except FileExistsError:
            return ServiceResult.fail(
                f"Project '{name}' already exists ({parent / name / GLUE_FILENAME} found)"
            )
        except OSError as e:
            return ServiceResult.fail(f"Failed to create project '{name}': {e}")

        root = parent / name
        return ServiceResult.ok(
            data=ScaffoldSummary(root=root, created=created),
            message=f"Project '{name}' initialized successfully",
        )

    def add_platform(
        self,
        name: str,
        target: str,
        hal_crate: Optional[str] = None,
    ) -> ServiceResult[ScaffoldSummary]:
        """
        Register a platform in glue.toml and generate its crates.

        Args:
            name: Platform name (e.g. stm32, esp32)
            target: Target triple
            hal_crate: HAL crate the wrapper depends on

        Returns:
            Result containing the files written and the new Platform
        """
        root = self.project_root
        glue = root / GLUE_FILENAME
        warnings: List[str] = []

        try:
            model = load_glue(glue)
            platform = add_platform(model, name, target, hal_crate=hal_crate)
            created = create_platform_crates(root, name, target, hal_crate=hal_crate)
            try:
                add_workspace_members(root, [f"hal-{name}", f"app-{name}"])
            except (FileNotFoundError, ValueError) as e:
                logger.warning(f"Workspace members not updated: {e}")
                warnings.append(f"Workspace Cargo.toml not updated: {e}")
            save_glue(model, glue)
        except MultitargetError as e:
            return ServiceResult.from_error(e)
        except OSError as e:
            return ServiceResult.fail(f"Failed to add platform '{name}': {e}")

        return ServiceResult.ok(
            data=ScaffoldSummary(root=root, created=created, platform=platform),
            message=f"Platform '{name}' added successfully",
            warnings=warnings,
        )
