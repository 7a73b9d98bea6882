# services/glue.py
"""
Service for glue model operations: HAL capability analysis, platform
listing and removal, and validation of the project layout against
glue.toml.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from multitarget.core.errors import MultitargetError
from multitarget.core.glue import (
    GLUE_FILENAME,
    infer_target,
    load_glue,
    merge_analysis,
    remove_platform,
    save_glue,
)
from multitarget.core.resolver import RemoteSourceResolver, TextClient
from multitarget.models.base import ToDictMixin
from multitarget.models.glue import GlueModel, Platform

from .base import BaseService, ServiceResult

logger = logging.getLogger(__name__)


@dataclass
class PlatformValidation(ToDictMixin):
    """Validation findings for one platform."""

    name: str
    issues: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


@dataclass
class ValidationReport(ToDictMixin):
    """Validation findings for every configured platform."""

    glue_found: bool
    platforms: List[PlatformValidation] = field(default_factory=list)

    @property
    def issue_count(self) -> int:
        return sum(len(p.issues) for p in self.platforms)


class GlueService(BaseService):
    """
    Service for reading and updating glue.toml.

    Args:
        config: Tool configuration
        project_root: Directory holding glue.toml
        client: HTTP client for the resolver; a real one is built from the
            ``[fetch]`` configuration when omitted
    """

    def __init__(self, config=None, project_root=None, client: Optional[TextClient] = None) -> None:
        super().__init__(config=config, project_root=project_root)
        self._client = client

    @property
    def glue_path(self) -> Path:
        return self.project_root / GLUE_FILENAME

    def load(self) -> ServiceResult[GlueModel]:
        try:
            return ServiceResult.ok(data=load_glue(self.glue_path))
        except MultitargetError as e:
            return ServiceResult.from_error(e)

    def list_platforms(self) -> ServiceResult[List[Platform]]:
        result = self.load()
        if not result.success:
            return result
        platforms = result.data.platforms
        return ServiceResult.ok(
            data=platforms,
            message=f"{len(platforms)} platform(s) configured",
        )

    def analyze(
        self,
        platform_name: str,
        locator: str,
        target: Optional[str] = None,
    ) -> ServiceResult[Platform]:
        """
        Analyze a HAL crate and record its capabilities for ``platform_name``.

        Nothing is written unless the analysis completes.

        Args:
            platform_name: Platform to create or update
            locator: GitHub repository URL of the HAL crate
            target: Explicit target triple; inferred when omitted

        Returns:
            Result containing the updated Platform, with the report's
            warnings as result warnings
        """
        try:
            model = load_glue(self.glue_path)
            with RemoteSourceResolver.from_config(self.config.fetch, client=self._client) as resolver:
                report = resolver.analyze(locator)

            triple = infer_target(
                model,
                platform_name,
                explicit=target,
                package_name=report.package or locator.rstrip("/").rsplit("/", 1)[-1],
                default_target=self.config.get("toolchain", "default_target", "thumbv7em-none-eabihf"),
            )
            platform = merge_analysis(model, platform_name, report, triple)
            save_glue(model, self.glue_path)
        except MultitargetError as e:
            return ServiceResult.from_error(e)
        except OSError as e:
            return ServiceResult.fail(f"Could not write {self.glue_path}: {e}")

        return ServiceResult.ok(
            data=platform,
            message=f"Analyzed {locator} for platform '{platform_name}'",
            warnings=list(report.warnings),
            traits=len(report.traits),
            mocked=len(report.mocked_traits),
        )

    def remove_platform(self, name: str) -> ServiceResult[bool]:
        """Remove a platform. Removing an absent platform succeeds with ``False``."""
        try:
            model = load_glue(self.glue_path)
            removed = remove_platform(model, name)
            if removed:
                save_glue(model, self.glue_path)
        except MultitargetError as e:
            return ServiceResult.from_error(e)
        except OSError as e:
            return ServiceResult.fail(f"Could not write {self.glue_path}: {e}")

        message = f"Removed platform '{name}'" if removed else f"Platform '{name}' was not configured"
        return ServiceResult.ok(data=removed, message=message)

    def validate(self) -> ServiceResult[ValidationReport]:
        """
        Check every platform against the workspace layout.

        Missing ``hal-<name>``/``app-<name>`` crates and capability warnings
        are reported as issues; an absent glue.toml validates trivially.
        """
        if not self.glue_path.exists():
            return ServiceResult.ok(
                data=ValidationReport(glue_found=False),
                message=f"No {GLUE_FILENAME} found",
            )

        try:
            model = load_glue(self.glue_path)
        except MultitargetError as e:
            return ServiceResult.from_error(e)

        report = ValidationReport(glue_found=True)
        for platform in model.platforms:
            check = PlatformValidation(name=platform.name)
            for prefix in ("hal", "app"):
                if not (self.project_root / f"{prefix}-{platform.name}").is_dir():
                    check.issues.append(f"{prefix}-{platform.name} directory not found")
            if platform.capabilities is not None:
                check.issues.extend(platform.capabilities.warnings)
            report.platforms.append(check)

        return ServiceResult.ok(
            data=report,
            message=f"Validated {len(report.platforms)} platform(s)",
        )
