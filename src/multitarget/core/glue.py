"""
Persisted Glue Model
====================

Load, merge and save ``glue.toml``, the record of configured platforms,
their capability reports and per-target toolchain preferences.

The file is read fully, changed in memory and written back as a whole:
``save_glue`` replaces the file in a single rename, so readers never see
a partially written model. There is no locking; one command at a time is
assumed to own a project's glue file.

Example:
    model = load_glue(root / GLUE_FILENAME)
    merge_analysis(model, "stm32", report, target="thumbv7em-none-eabi")
    save_glue(model, root / GLUE_FILENAME)
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional, Union

from multitarget.core.config import atomic_write_text, dumps_toml
from multitarget.core.errors import DuplicatePlatform, GlueFileError, PlatformNotFound
from multitarget.models.glue import (
    PRIMARY_TOOL,
    BuildConfig,
    CapabilityReport,
    GlueModel,
    Platform,
)

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

GLUE_FILENAME = "glue.toml"
DEFAULT_TARGET = "thumbv7em-none-eabihf"

# Chip families and their usual target triples. esp32c3 must precede esp32.
CHIP_TARGETS = (
    ("esp32c3", "riscv32imc-unknown-none-elf"),
    ("esp32", "xtensa-esp32-none-elf"),
    ("stm32", "thumbv7em-none-eabihf"),
    ("nrf52", "thumbv7em-none-eabihf"),
    ("nrf91", "thumbv8m.main-none-eabihf"),
    ("rp2040", "thumbv6m-none-eabi"),
    ("atsamd", "thumbv6m-none-eabi"),
    ("lpc55", "thumbv8m.main-none-eabihf"),
)

_REPO_TAIL = re.compile(r"([^/]+?)(?:\.git)?/*$")


def load_glue(path: Union[str, Path]) -> GlueModel:
    """
    Load the glue model from ``path``.

    A missing file yields an empty model. A file that exists but cannot be
    read or parsed raises GlueFileError; it is never treated as empty.
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"{path} not found; starting with an empty model")
        return GlueModel()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise GlueFileError(str(path), str(e)) from e
    except OSError as e:
        raise GlueFileError(str(path), e.strerror or str(e)) from e

    try:
        return GlueModel.from_dict(data)
    except ValueError as e:
        raise GlueFileError(str(path), str(e)) from e
    except (KeyError, TypeError, AttributeError) as e:
        raise GlueFileError(str(path), f"unexpected structure ({e})") from e


def dumps_glue(model: GlueModel) -> str:
    """Serialize the model to TOML text."""
    return dumps_toml(model.to_toml_dict())


def save_glue(model: GlueModel, path: Union[str, Path]) -> Path:
    """Write the whole model to ``path``, replacing the file atomically."""
    path = Path(path)
    atomic_write_text(path, dumps_glue(model))
    logger.debug(f"Saved {len(model.platforms)} platform(s) to {path}")
    return path


def find_platform(model: GlueModel, name: str) -> Optional[Platform]:
    for platform in model.platforms:
        if platform.name == name:
            return platform
    return None


def get_platform(model: GlueModel, name: str) -> Platform:
    """Like find_platform, but raises PlatformNotFound."""
    platform = find_platform(model, name)
    if platform is None:
        raise PlatformNotFound(name)
    return platform


def add_platform(
    model: GlueModel,
    name: str,
    target: str,
    hal_crate: Optional[str] = None,
    linker_script: Optional[str] = None,
) -> Platform:
    """
    Append a new platform.

    Raises:
        DuplicatePlatform: If a platform with this name already exists
    """
    if find_platform(model, name) is not None:
        raise DuplicatePlatform(name)
    platform = Platform(name=name, target=target, hal_crate=hal_crate, linker_script=linker_script)
    model.platforms.append(platform)
    return platform


def remove_platform(model: GlueModel, name: str) -> bool:
    """Remove the platform named exactly ``name``. Returns whether one was removed."""
    for index, platform in enumerate(model.platforms):
        if platform.name == name:
            del model.platforms[index]
            return True
    return False


def derive_hal_crate(source: str) -> Optional[str]:
    """Last path segment of a repository locator, if it has one."""
    match = _REPO_TAIL.search(source.strip())
    if match is None:
        return None
    tail = match.group(1)
    if not tail or ":" in tail:
        return None
    return tail


def infer_target(
    model: GlueModel,
    platform_name: str,
    explicit: Optional[str] = None,
    package_name: Optional[str] = None,
    default_target: str = DEFAULT_TARGET,
) -> str:
    """
    Pick the target triple to record for an analyzed platform.

    Precedence: explicit triple, the existing platform's triple, a known chip
    family prefix in the platform or package name, then ``default_target``.
    """
    if explicit:
        return explicit

    existing = find_platform(model, platform_name)
    if existing is not None and existing.target:
        return existing.target

    for candidate in (platform_name, package_name or ""):
        lowered = candidate.lower()
        for prefix, triple in CHIP_TARGETS:
            if prefix in lowered:
                return triple

    return default_target


def merge_analysis(
    model: GlueModel,
    platform_name: str,
    report: CapabilityReport,
    target: str,
) -> Platform:
    """
    Record a fresh capability report for ``platform_name``.

    An existing platform keeps its position; its report and target triple
    are replaced. Otherwise a new platform is appended with its HAL crate
    derived from the report's source locator.
    """
    platform = find_platform(model, platform_name)
    if platform is not None:
        platform.capabilities = report
        platform.target = target
        logger.info(f"Updated capabilities for platform '{platform_name}'")
        return platform

    platform = Platform(
        name=platform_name,
        target=target,
        hal_crate=derive_hal_crate(report.source),
        capabilities=report,
    )
    model.platforms.append(platform)
    logger.info(f"Added platform '{platform_name}' ({target})")
    return platform


def set_toolchain_preference(model: GlueModel, target: str, tool: str) -> None:
    """Remember ``tool`` for ``target``, creating the build section on first use."""
    if model.build is None:
        model.build = BuildConfig(default_tool=PRIMARY_TOOL)
    model.build.toolchain_preferences[target] = tool


def get_toolchain_preference(model: GlueModel, target: str) -> Optional[str]:
    if model.build is None:
        return None
    return model.build.toolchain_preferences.get(target)
