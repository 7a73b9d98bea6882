"""
Configuration Management
========================

This module provides TOML-based configuration file support for the
multitarget CLI, and the TOML reader/writer used for glue.toml.

Configuration files are searched in the following order (highest to lowest priority):
1. Path specified via --config option
2. ./multitarget.toml (current directory)
3. ~/.config/multitarget/config.toml (user config)
4. /etc/multitarget/config.toml (system config)
5. Built-in defaults

Example configuration file (multitarget.toml):

    [fetch]
    host = "https://raw.githubusercontent.com"
    branches = ["main", "master"]
    manifest_path = "Cargo.toml"
    source_path = "src/lib.rs"
    timeout = 30

    [toolchain]
    default_target = "thumbv7em-none-eabihf"
    automation_markers = ["CI", "GITHUB_ACTIONS", "MULTITARGET_NONINTERACTIVE"]

    [logging]
    level = "WARNING"
"""

import logging
import math
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from multitarget import __version__

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)


# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "fetch": {
        "host": "https://raw.githubusercontent.com",
        "branches": ["main", "master"],
        "manifest_path": "Cargo.toml",
        "source_path": "src/lib.rs",
        "timeout": 30,
        "user_agent": f"multitarget/{__version__}",
    },
    "toolchain": {
        "default_target": "thumbv7em-none-eabihf",
        "automation_markers": ["CI", "GITHUB_ACTIONS", "MULTITARGET_NONINTERACTIVE"],
    },
    "logging": {
        "level": "WARNING",
    },
}

# Standard config file locations
CONFIG_LOCATIONS = [
    Path("multitarget.toml"),
    Path("~/.config/multitarget/config.toml").expanduser(),
    Path("/etc/multitarget/config.toml"),
]


@dataclass
class Config:
    """
    Configuration container for multitarget settings.

    Attributes:
        fetch: Remote source fetching (raw host, branch candidates, file paths, timeout)
        toolchain: Toolchain selection settings (default target, automation markers)
        logging: Logging settings
        _source: Path to the config file that was loaded
    """

    fetch: Dict[str, Any] = field(default_factory=dict)
    toolchain: Dict[str, Any] = field(default_factory=dict)
    logging: Dict[str, Any] = field(default_factory=dict)
    _source: Optional[str] = None

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        section_dict = getattr(self, section, {})
        if section_dict is None:
            return default
        return section_dict.get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set a configuration value."""
        section_dict = getattr(self, section, None)
        if section_dict is not None:
            section_dict[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "fetch": self.fetch,
            "toolchain": self.toolchain,
            "logging": self.logging,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "Config":
        """Create Config from dictionary."""
        return cls(
            fetch=data.get("fetch", {}),
            toolchain=data.get("toolchain", {}),
            logging=data.get("logging", {}),
            _source=source,
        )


# =============================================================================
# TOML reading and writing
# =============================================================================


def load_toml(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a TOML file.

    Args:
        filepath: Path to the TOML file

    Returns:
        Dictionary with the file's values

    Raises:
        FileNotFoundError: If file doesn't exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(path, "rb") as f:
        return tomllib.load(f)


def loads_toml(text: str) -> Dict[str, Any]:
    """Parse TOML text into a dictionary."""
    return tomllib.loads(text)


_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _format_string(value: str) -> str:
    out = []
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _format_key(key: str) -> str:
    return key if _BARE_KEY.match(key) else _format_string(key)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, str):
        return _format_string(value)
    if isinstance(value, Path):
        return _format_string(str(value))
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(v) for v in value if v is not None) + "]"
    if isinstance(value, dict):
        items = [
            f"{_format_key(k)} = {_format_value(v)}" for k, v in value.items() if v is not None
        ]
        return "{ " + ", ".join(items) + " }" if items else "{}"
    raise TypeError(f"Cannot serialize {type(value).__name__} to TOML")


def _is_table_array(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, dict) for v in value)


def _emit_table(lines: List[str], table: Dict[str, Any], path: Tuple[str, ...]) -> None:
    # Plain key/value pairs must precede any sub-table headers.
    for key, value in table.items():
        if value is None or isinstance(value, dict) or _is_table_array(value):
            continue
        lines.append(f"{_format_key(key)} = {_format_value(value)}")

    for key, value in table.items():
        sub_path = path + (key,)
        header = ".".join(_format_key(part) for part in sub_path)
        if isinstance(value, dict):
            if lines:
                lines.append("")
            lines.append(f"[{header}]")
            _emit_table(lines, value, sub_path)
        elif _is_table_array(value):
            for item in value:
                if lines:
                    lines.append("")
                lines.append(f"[[{header}]]")
                _emit_table(lines, item, sub_path)


def dumps_toml(data: Dict[str, Any]) -> str:
    """
    Serialize a dictionary to TOML text.

    Supports strings, booleans, numbers, arrays, nested tables and arrays
    of tables. Keys whose value is None are omitted, since TOML has no null.

    Args:
        data: Dictionary to serialize

    Returns:
        TOML document text ending with a newline
    """
    lines: List[str] = []
    _emit_table(lines, data, ())
    return "\n".join(lines) + "\n"


def atomic_write_text(path: Union[str, Path], text: str, encoding: str = "utf-8") -> None:
    """Write text to a sibling temporary file, then replace the target in one step."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        tmp.write_text(text, encoding=encoding)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def save_toml(config: Dict[str, Any], filepath: Union[str, Path]) -> str:
    """
    Save a dictionary to a TOML file, replacing the file atomically.

    Args:
        config: Dictionary to save
        filepath: Path to save the file

    Returns:
        Path to the saved file
    """
    path = Path(filepath)
    atomic_write_text(path, dumps_toml(config))
    return str(path)


# =============================================================================
# Config discovery and loading
# =============================================================================


def find_config_file(config_path: Optional[str] = None) -> Optional[Path]:
    """
    Find the configuration file to use.

    Args:
        config_path: Explicit path to config file (highest priority)

    Returns:
        Path to config file, or None if not found
    """
    if config_path:
        path = Path(config_path)
        if path.exists():
            return path
        logger.warning(f"Specified config file not found: {config_path}")
        return None

    for location in CONFIG_LOCATIONS:
        if location.exists():
            return location

    return None


def get_default_config() -> Config:
    """Get the default configuration."""
    return Config.from_dict(_deep_copy_dict(DEFAULT_CONFIG))


def create_default_config_file(filepath: Optional[str] = None) -> str:
    """
    Create a default configuration file.

    Args:
        filepath: Path to create the file (default: ./multitarget.toml)

    Returns:
        Path to the created file
    """
    if filepath is None:
        filepath = "multitarget.toml"

    return save_toml(DEFAULT_CONFIG, filepath)


def _deep_copy_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    """Create a deep copy of a dictionary."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy_dict(value)
        elif isinstance(value, list):
            result[key] = value.copy()
        else:
            result[key] = value
    return result


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two dictionaries, with override taking precedence."""
    result = _deep_copy_dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


# Global configuration instance
_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config_cascade()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to None (will reload on next access)."""
    global _global_config
    _global_config = None


def get_config_locations() -> List[Path]:
    """
    Get configuration file search locations in priority order.

    Returns:
        List of paths to search, in priority order (highest first)
    """
    return CONFIG_LOCATIONS.copy()


def load_config_cascade(explicit_path: Optional[str] = None) -> Config:
    """
    Load configuration with full cascade support.

    Merges configs from all levels in priority order:
    defaults -> system -> user -> current dir -> explicit

    Args:
        explicit_path: Explicit config file path (highest priority)

    Returns:
        Config object with merged settings from all sources
    """
    config_data = _deep_copy_dict(DEFAULT_CONFIG)
    source = None

    candidates = list(reversed(get_config_locations()))
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            candidates.append(path)
        else:
            logger.warning(f"Specified config file not found: {explicit_path}")

    for location in candidates:
        if not location.exists():
            continue
        try:
            config_data = _merge_dicts(config_data, load_toml(location))
            source = str(location)
            logger.debug(f"Merged configuration from {location}")
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Error loading {location}: {e}")

    return Config.from_dict(config_data, source=source)
