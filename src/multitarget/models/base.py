from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional


class ToDictMixin:
    """
    Mixin that adds to_dict() method to dataclasses.

    Handles nested dataclasses, lists, tuples, sets and dicts. Records that
    are persisted to TOML call ``to_dict(omit_none=True)`` because TOML has
    no null value; an absent key is read back as None.

    Example:
        @dataclass
        class MyRecord(ToDictMixin):
            name: str
            note: Optional[str] = None

        MyRecord(name="a").to_dict(omit_none=True)  # {"name": "a"}
    """

    def to_dict(self, omit_none: bool = False) -> Dict[str, Any]:
        """Convert dataclass to dictionary, handling nested structures."""
        if not is_dataclass(self):
            raise TypeError(f"{self.__class__.__name__} is not a dataclass")

        result = {}
        for f in fields(self):
            if f.name.startswith("_"):
                continue
            value = getattr(self, f.name)
            if value is None and omit_none:
                continue
            result[f.name] = self._serialize_value(value, omit_none)

        extra = self._to_dict_extra()
        if extra:
            result.update(extra)

        return result

    def _serialize_value(self, value: Any, omit_none: bool = False) -> Any:
        """Serialize a single value for dict output."""
        if value is None:
            return None
        if isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, Path):
            return str(value)
        if isinstance(value, (list, tuple)):
            return [self._serialize_value(v, omit_none) for v in value]
        if isinstance(value, (set, frozenset)):
            return sorted(self._serialize_value(v, omit_none) for v in value)
        if isinstance(value, dict):
            return {
                k: self._serialize_value(v, omit_none)
                for k, v in value.items()
                if not (v is None and omit_none)
            }
        if isinstance(value, ToDictMixin):
            return value.to_dict(omit_none=omit_none)
        if hasattr(value, "to_dict"):
            return value.to_dict()
        return str(value)

    def _to_dict_extra(self) -> Optional[Dict[str, Any]]:
        """Override to add extra fields to dict output."""
        return None
