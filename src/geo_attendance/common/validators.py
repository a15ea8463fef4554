"""Lenient request parsing used by the HTTP layer.

Bad paging values fall back to defaults instead of failing the request.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_float(value: Any, field_name: str) -> float:
    if value is None or isinstance(value, bool) or value == "":
        raise ValidationError(f"Invalid {field_name}")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}") from None
    if not math.isfinite(result):
        raise ValidationError(f"Invalid {field_name}")
    return result


def float_or_default(value: Any, default: float, *, minimum: float = 0.0) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return max(result, minimum)


def int_or_default(value: Any, default: int, *, minimum: int = 0, maximum: Optional[int] = None) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError):
        return default
    if result < minimum:
        return default
    if maximum is not None:
        result = min(result, maximum)
    return result
