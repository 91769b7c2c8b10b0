"""Shared utilities for brandlattice."""

from brandlattice.core.utils.math import clamp, lerp
from brandlattice.core.utils.units import (
    parse_duration_s,
    parse_font_weight,
    parse_length_px,
    parse_number,
    resolve_position,
)

__all__ = [
    "clamp",
    "lerp",
    "parse_duration_s",
    "parse_font_weight",
    "parse_length_px",
    "parse_number",
    "resolve_position",
]
