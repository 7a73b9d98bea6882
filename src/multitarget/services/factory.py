"""
Service Factory
===============

Reusable factory for instantiating services with shared configuration,
project root and host collaborators.

Usage:
    from multitarget.services.factory import ServiceFactory

    factory = ServiceFactory()
    glue_svc = factory.create_glue_service()

    # Tests inject synthetic host facts and a fake HTTP client
    factory = ServiceFactory(probe=FakeProbe(), http_client=FakeClient())
"""

from pathlib import Path
from typing import Optional

from multitarget.core.config import Config
from multitarget.core.resolver import TextClient
from multitarget.core.toolchain import EnvironmentProbe, Prompt

from .build import BuildService, CommandRunner
from .config import ConfigService
from .dependency import DependencyService
from .glue import GlueService
from .project import ProjectService
from .toolchain import ToolchainService


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    Attributes:
        config: Tool configuration shared by every service
        project_root: Workspace root; discovered per service when None
        probe: Host facts for toolchain selection
        prompt: Chooser for interactive toolchain configuration
        http_client: HTTP client for remote source fetching
        runner: Subprocess runner for build and test commands
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        project_root: Optional[Path] = None,
        probe: Optional[EnvironmentProbe] = None,
        prompt: Optional[Prompt] = None,
        http_client: Optional[TextClient] = None,
        runner: Optional[CommandRunner] = None,
    ):
        self.config = config
        self.project_root = project_root
        self.probe = probe
        self.prompt = prompt
        self.http_client = http_client
        self.runner = runner

    def create_glue_service(self) -> GlueService:
        return GlueService(config=self.config, project_root=self.project_root, client=self.http_client)

    def create_toolchain_service(self) -> ToolchainService:
        return ToolchainService(
            config=self.config,
            project_root=self.project_root,
            probe=self.probe,
            prompt=self.prompt,
        )

    def create_build_service(self) -> BuildService:
        return BuildService(
            config=self.config,
            project_root=self.project_root,
            probe=self.probe,
            prompt=self.prompt,
            runner=self.runner,
        )

    def create_project_service(self) -> ProjectService:
        return ProjectService(config=self.config, project_root=self.project_root)

    def create_config_service(self) -> ConfigService:
        return ConfigService(config=self.config)

    def create_dependency_service(self) -> DependencyService:
        return DependencyService(config=self.config)
