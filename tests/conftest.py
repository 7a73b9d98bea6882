# tests/conftest.py
"""
Global pytest fixtures for multitarget tests.
"""

from typing import Dict, Iterable, List, Optional

import pytest
from click.testing import CliRunner

RAW = "https://raw.githubusercontent.com"

WIDGET_URL = "https://github.com/acme/widget-hal"

WIDGET_MANIFEST = """\
[package]
name = "widget-hal"
version = "1.2.0"
edition = "2021"

[dependencies]
embedded-hal = "1.0"
"""

WIDGET_SOURCE = """\
#![no_std]

pub struct Pin {
    id: u8,
}

pub trait Gpio {
    fn set(&mut self, high: bool);
}

impl Gpio for Pin {
    fn set(&mut self, high: bool) {
        let _ = high;
    }
}
"""

HAL_SOURCE = """\
#![no_std]

use core::convert::Infallible;
use embedded_hal::digital::{ErrorType, OutputPin};

pub struct Led;
pub struct Button;

impl ErrorType for Led {
    type Error = Infallible;
}

impl OutputPin for Led {
    fn set_low(&mut self) -> Result<(), Self::Error> {
        Ok(())
    }

    fn set_high(&mut self) -> Result<(), Self::Error> {
        Ok(())
    }
}

impl embedded_hal::digital::InputPin for Button {
    fn is_high(&mut self) -> Result<bool, Self::Error> {
        Ok(true)
    }

    fn is_low(&mut self) -> Result<bool, Self::Error> {
        Ok(false)
    }
}

pub trait Watchdog {
    fn feed(&mut self);
}

impl Watchdog for Led {
    fn feed(&mut self) {}
}

impl Led {
    pub fn new() -> Self {
        Led
    }
}
"""


class FakeProbe:
    """EnvironmentProbe with fixed answers."""

    def __init__(
        self,
        tools: Iterable[str] = ("cargo",),
        targets: Iterable[str] = (),
        automated: bool = False,
    ):
        self.tools = set(tools)
        self.targets = set(targets)
        self.automated = automated
        self.queries: List[str] = []

    def is_tool_installed(self, tool: str) -> bool:
        self.queries.append(f"tool:{tool}")
        return tool in self.tools

    def is_target_installed(self, target: str) -> bool:
        self.queries.append(f"target:{target}")
        return target in self.targets

    def is_automated(self) -> bool:
        return self.automated


class FakeClient:
    """HTTP client serving a fixed URL -> text mapping and recording requests."""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files = dict(files or {})
        self.requests: List[str] = []

    def get_text(self, url: str) -> Optional[str]:
        self.requests.append(url)
        return self.files.get(url)


class FakeRunner:
    """Command runner returning a fixed exit status and recording commands."""

    def __init__(self, returncode: int = 0):
        self.returncode = returncode
        self.commands: List[List[str]] = []

    def __call__(self, cmd, cwd) -> int:
        self.commands.append(list(cmd))
        return self.returncode


def raw_url(owner: str, repo: str, branch: str, path: str) -> str:
    return f"{RAW}/{owner}/{repo}/{branch}/{path}"


@pytest.fixture(autouse=True)
def reset_global_state():
    """Give every test a fresh config and service factory."""
    from multitarget.cli.service_helpers import reset_factory
    from multitarget.core.config import reset_config

    reset_factory()
    reset_config()
    yield
    reset_factory()
    reset_config()


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_probe():
    """Factory for FakeProbe instances."""
    return FakeProbe


@pytest.fixture
def make_client():
    """Factory for FakeClient instances."""
    return FakeClient


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def url_for():
    """Build raw-content URLs: url_for(owner, repo, branch, path)."""
    return raw_url


@pytest.fixture
def widget_manifest():
    return WIDGET_MANIFEST


@pytest.fixture
def widget_source():
    return WIDGET_SOURCE


@pytest.fixture
def hal_source():
    """embedded-hal style crate source with dependency and local traits."""
    return HAL_SOURCE


@pytest.fixture
def widget_client():
    """HTTP client serving acme/widget-hal from the main branch."""
    return FakeClient(
        {
            raw_url("acme", "widget-hal", "main", "Cargo.toml"): WIDGET_MANIFEST,
            raw_url("acme", "widget-hal", "main", "src/lib.rs"): WIDGET_SOURCE,
        }
    )


@pytest.fixture
def default_config():
    from multitarget.core.config import get_default_config

    return get_default_config()


@pytest.fixture
def project_dir(tmp_path):
    """A directory containing an empty glue.toml and a workspace Cargo.toml."""
    from multitarget.core.scaffold import WORKSPACE_CARGO

    (tmp_path / "glue.toml").write_text("platforms = []\n")
    (tmp_path / "Cargo.toml").write_text(WORKSPACE_CARGO)
    return tmp_path
