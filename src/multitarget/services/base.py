# services/base.py
"""
Base class and utilities for all services.
"""

from dataclasses import asdict, dataclass, field, is_dataclass
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, TypeVar

from multitarget.core.config import Config, get_config
from multitarget.core.errors import MultitargetError
from multitarget.core.project import resolve_project_root

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Result object returned by service operations.

    Provides a consistent interface for views to handle operation outcomes.
    Failures built from a MultitargetError carry ``error_type`` and
    ``remedy`` in their metadata.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: T = None,
        message: str = None,
        warnings: List[str] = None,
        **metadata,
    ) -> "ServiceResult[T]":
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            message=message,
            warnings=warnings or [],
            metadata=metadata,
        )

    @classmethod
    def fail(cls, error: str, warnings: List[str] = None, **metadata) -> "ServiceResult[T]":
        """Create a failed result."""
        return cls(
            success=False,
            error=error,
            warnings=warnings or [],
            metadata=metadata,
        )

    @classmethod
    def from_error(cls, exc: MultitargetError, warnings: List[str] = None) -> "ServiceResult[T]":
        """Create a failed result from a multitarget error, keeping its remedy."""
        return cls.fail(exc.message, warnings=warnings, error_type=exc.error_type, remedy=exc.remedy)

    @property
    def remedy(self) -> Optional[str]:
        return self.metadata.get("remedy")

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        result = {
            "success": self.success,
            "message": self.message,
            "error": self.error,
            "warnings": self.warnings,
        }

        # Serialize data if present
        if self.data is not None:
            if hasattr(self.data, "to_dict"):
                result["data"] = self.data.to_dict()
            elif is_dataclass(self.data):
                result["data"] = asdict(self.data)
            elif isinstance(self.data, (dict, list, str, int, float, bool)):
                result["data"] = self.data
            else:
                result["data"] = str(self.data)
        else:
            result["data"] = None

        # Include non-empty metadata
        if self.metadata:
            result["metadata"] = self.metadata

        return result


class BaseService:
    """
    Base class for all services.

    Args:
        config: Tool configuration; the global cascade is used when omitted
        project_root: Directory holding glue.toml; discovered from the
            working directory when omitted
    """

    def __init__(self, config: Optional[Config] = None, project_root: Optional[Path] = None) -> None:
        self._config = config
        self._project_root = Path(project_root) if project_root is not None else None

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def project_root(self) -> Path:
        if self._project_root is None:
            self._project_root = resolve_project_root()
        return self._project_root
