from __future__ import annotations

import math
from typing import Any, Dict

_TRUTHY = {"1", "true", "t", "yes", "y"}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() in {"", "undefined"}


def strip_nulls(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``None``, NaN and empty-string entries from a serialized record."""
    return {key: value for key, value in payload.items() if not is_blank(value)}


def truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().lower() in _TRUTHY
