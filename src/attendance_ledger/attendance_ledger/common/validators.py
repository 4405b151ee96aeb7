from __future__ import annotations

from typing import Any

from ..core.exceptions import ConfigurationError


def require_int(value: Any, field_name: str, *, min_value: int = 0) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer, got {value!r}")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigurationError(f"{field_name} must be an integer, got {value!r}")
    if number < min_value:
        raise ConfigurationError(f"{field_name} must be >= {min_value}, got {number}")
    return number
