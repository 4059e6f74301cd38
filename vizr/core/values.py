from __future__ import annotations
import math
from typing import Any, Optional, Union

Scalar = Union[float, int, str, bool]


def is_scalar(value: Any) -> bool:
    return isinstance(value, (int, float, str, bool))


def as_number(value: Any) -> Optional[float]:
    """
    Finite float for ints, floats and numeric strings; None otherwise.
    Booleans are not numbers here even though Python treats them as ints.
    """
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        num = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        # OverflowError: JSON integers too large for a float
        return None
    return num if math.isfinite(num) else None


def number_or(value: Any, default: float) -> float:
    num = as_number(value)
    return default if num is None else num


def first_number(*candidates: Any, default: float) -> float:
    """First candidate that coerces to a number, else default (a `??` chain)."""
    for c in candidates:
        num = as_number(c)
        if num is not None:
            return num
    return default


def first_text(*candidates: Any, default: str) -> str:
    """First non-empty string/number candidate rendered as text, else default."""
    for c in candidates:
        if isinstance(c, bool) or c is None:
            continue
        if isinstance(c, str):
            if c:
                return c
            continue
        if isinstance(c, int):
            return str(c)
        if isinstance(c, float):
            # 3.0 -> "3"
            return str(int(c)) if c.is_integer() else str(c)
    return default


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
