"""Dot-path option lookup with typed, validating accessors."""

from __future__ import annotations

import math
from typing import Any, Sequence

_MISSING = object()


class OptionsResolver:
    """Resolve typed option values from a nested settings mapping.

    Paths use dot notation (``'units.years.interval'``). Every typed accessor
    raises ``ValueError`` naming the full option path when a value is present
    but has the wrong type or range.
    """

    def __init__(self, settings: dict, prefix: str = ""):
        """Initialize the resolver.

        Args:
            settings: Dictionary of settings (typically one config section)
            prefix: Section name used in error messages, e.g. ``'gridlines'``
        """
        self.settings = settings
        self.prefix = prefix

    def _name(self, path: str) -> str:
        return f"{self.prefix}.{path}" if self.prefix else path

    def get(self, path: str, default: Any = None) -> Any:
        """Get a raw setting value.

        Args:
            path: Dot-notation path like 'units.years.format'
            default: Default value if path not found

        Returns:
            The value as stored, or ``default``.
        """
        value = self.settings
        for key in path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_dict(self, path: str) -> dict:
        """Get a mapping setting, or ``{}`` when it is missing or not a mapping."""
        value = self.get(path, {})
        return value if isinstance(value, dict) else {}

    def get_number(
        self,
        path: str,
        default: Any = _MISSING,
        minimum: float | None = None,
        allow_none: bool = False,
        allow_inf: bool = False,
    ) -> float | None:
        value = self._required(path, default)
        if value is None and allow_none:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
            raise ValueError(f"{self._name(path)} must be {self._describe_number(minimum)}")
        if math.isinf(value) and not allow_inf:
            raise ValueError(f"{self._name(path)} must be a finite number")
        if minimum is not None and value < minimum:
            raise ValueError(f"{self._name(path)} must be {self._describe_number(minimum)}")
        return value

    def get_int(self, path: str, default: Any = _MISSING, minimum: int | None = None) -> int:
        value = self._required(path, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{self._name(path)} must be {self._describe_number(minimum, 'integer')}")
        if minimum is not None and value < minimum:
            raise ValueError(f"{self._name(path)} must be {self._describe_number(minimum, 'integer')}")
        return value

    def get_bool(self, path: str, default: Any = _MISSING, allow_none: bool = False) -> bool | None:
        value = self._required(path, default)
        if value is None and allow_none:
            return None
        if not isinstance(value, bool):
            raise ValueError(f"{self._name(path)} must be true or false")
        return value

    def get_str(self, path: str, default: Any = _MISSING, allow_none: bool = False, allow_empty: bool = True) -> str | None:
        value = self._required(path, default)
        if value is None and allow_none:
            return None
        if not isinstance(value, str) or (not allow_empty and not value.strip()):
            raise ValueError(f"{self._name(path)} must be a {'non-empty ' if not allow_empty else ''}string")
        return value

    def get_enum(self, path: str, allowed: Sequence[str], default: Any = _MISSING) -> str:
        value = self._required(path, default)
        if value not in allowed:
            raise ValueError(f"Invalid {self._name(path)} '{value}'. Use one of: {', '.join(allowed)}.")
        return value

    def get_number_list(
        self,
        path: str,
        default: Any = _MISSING,
        minimum: float | None = None,
        integer: bool = False,
    ) -> list:
        value = self._required(path, default)
        kind = "integers" if integer else "numbers"
        if not isinstance(value, (list, tuple)) or not value:
            raise ValueError(f"{self._name(path)} must be a non-empty list of {kind}")
        for item in value:
            valid_type = int if integer else (int, float)
            if isinstance(item, bool) or not isinstance(item, valid_type):
                raise ValueError(f"{self._name(path)} entries must be {kind}")
            if minimum is not None and item < minimum:
                raise ValueError(f"{self._name(path)} entries must be at least {minimum}")
        return list(value)

    def _required(self, path: str, default: Any) -> Any:
        value = self.get(path, _MISSING)
        if value is _MISSING:
            if default is _MISSING:
                raise ValueError(f"Missing required option {self._name(path)}")
            return default
        return value

    @staticmethod
    def _describe_number(minimum: float | None, kind: str = "number") -> str:
        if minimum is None:
            return f"a {kind}"
        if minimum == 0:
            return f"a non-negative {kind}"
        if minimum == 1 and kind == "integer":
            return "a positive integer"
        return f"a {kind} >= {minimum}"
