"""Persisted glue model: platforms, their capability reports and toolchain preferences."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from multitarget.models.base import ToDictMixin

PRIMARY_TOOL = "cargo"
SECONDARY_TOOL = "cross"


@dataclass
class InterfaceInfo(ToDictMixin):
    """One capability trait discovered in a HAL crate."""

    name: str
    module: str
    implementors: List[str] = field(default_factory=list)
    native_mock: bool = False

    def add_implementor(self, type_name: str) -> None:
        if type_name not in self.implementors:
            self.implementors.append(type_name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InterfaceInfo":
        return cls(
            name=str(data["name"]),
            module=str(data.get("module", "")),
            implementors=[str(v) for v in data.get("implementors", [])],
            native_mock=bool(data.get("native_mock", False)),
        )


@dataclass(frozen=True)
class CapabilityReport(ToDictMixin):
    """
    Result of analyzing one remote HAL crate.

    Replaced wholesale when the same platform is analyzed again.

    Attributes:
        source: Repository URL the crate was fetched from
        version: Crate version from its manifest, if declared
        package: Crate name from its manifest, if declared
        traits: Discovered traits, one record per trait name
        required_traits: Implemented traits that come from the crate's own dependencies
        mocked_traits: Traits that have host-side mock implementations
        warnings: One line per trait that cannot be mocked, plus analysis notes
    """

    source: str
    version: Optional[str] = None
    package: Optional[str] = None
    traits: Tuple[InterfaceInfo, ...] = ()
    required_traits: Tuple[str, ...] = ()
    mocked_traits: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    def trait(self, name: str) -> Optional[InterfaceInfo]:
        for info in self.traits:
            if info.name == name:
                return info
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CapabilityReport":
        version = data.get("version")
        return cls(
            source=str(data["source"]),
            version=str(version) if version is not None else None,
            package=data.get("package"),
            traits=tuple(InterfaceInfo.from_dict(t) for t in data.get("traits", [])),
            required_traits=tuple(str(v) for v in data.get("required_traits", [])),
            mocked_traits=tuple(str(v) for v in data.get("mocked_traits", [])),
            warnings=tuple(str(v) for v in data.get("warnings", [])),
        )


@dataclass
class Platform(ToDictMixin):
    """One configured build target."""

    name: str
    target: str
    hal_crate: Optional[str] = None
    linker_script: Optional[str] = None
    features: List[str] = field(default_factory=list)
    capabilities: Optional[CapabilityReport] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Platform":
        capabilities = data.get("capabilities")
        return cls(
            name=str(data["name"]),
            target=str(data["target"]),
            hal_crate=data.get("hal_crate"),
            linker_script=data.get("linker_script"),
            features=[str(v) for v in data.get("features", [])],
            capabilities=CapabilityReport.from_dict(capabilities) if capabilities else None,
        )


@dataclass
class BuildConfig(ToDictMixin):
    """Default build tool plus the per-target tool choices remembered across runs."""

    default_tool: str = PRIMARY_TOOL
    toolchain_preferences: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildConfig":
        return cls(
            default_tool=str(data.get("default_tool", PRIMARY_TOOL)),
            toolchain_preferences={
                str(k): str(v) for k, v in data.get("toolchain_preferences", {}).items()
            },
        )


@dataclass
class GlueModel(ToDictMixin):
    """Root of glue.toml."""

    platforms: List[Platform] = field(default_factory=list)
    build: Optional[BuildConfig] = None

    def to_toml_dict(self) -> Dict[str, Any]:
        return self.to_dict(omit_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlueModel":
        """
        Build a model from parsed TOML.

        Raises:
            ValueError: two platforms share a name
        """
        platforms = [Platform.from_dict(p) for p in data.get("platforms", [])]
        seen = set()
        for platform in platforms:
            if platform.name in seen:
                raise ValueError(f"duplicate platform '{platform.name}'")
            seen.add(platform.name)

        build = data.get("build")
        return cls(
            platforms=platforms,
            build=BuildConfig.from_dict(build) if build is not None else None,
        )
