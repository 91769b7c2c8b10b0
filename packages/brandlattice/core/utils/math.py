"""Scalar helpers for the color, metric and convergence code."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Bound ``value`` to ``[min_val, max_val]``, keeping its numeric type."""
    if value < min_val:
        return min_val
    if value > max_val:
        return max_val
    return value


def lerp(a: Number, b: Number, t: float) -> float:
    """Point a fraction ``t`` of the way from ``a`` to ``b`` (t is not clamped)."""
    start = float(a)
    return start + (float(b) - start) * t


def is_finite_number(value: object) -> bool:
    """True for real, finite ints and floats, numpy scalars included.

    Booleans are rejected even though they subclass int: a manifest field set
    to ``true`` is not a size.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        return False
    return math.isfinite(float(value))


def round_to(value: float, decimals: int = 4) -> float:
    """Round for stable formatting; never returns negative zero."""
    rounded = round(value, decimals)
    return rounded if rounded != 0 else 0.0


__all__ = ["clamp", "is_finite_number", "lerp", "round_to"]
