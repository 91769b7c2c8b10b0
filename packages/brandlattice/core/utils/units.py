"""Parsing of CSS-like scalar values (lengths, durations, weights).

Manifests arrive from a loosely-typed command parser, so numeric fields may be
numbers or strings such as ``"48px"``, ``"1.5em"``, ``"500ms"`` or ``"bold"``.
Every parser here returns ``None`` for values it cannot interpret instead of
raising; callers decide whether ``None`` means "not specified" or "invalid".
"""

from __future__ import annotations

import math
import re

from brandlattice.core.utils.math import is_finite_number

# A number followed by an optional unit suffix.
_NUMBER_PREFIX_RE = re.compile(
    r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([a-zA-Z%]*)\s*$"
)

# px per unit, assuming a 16px root font size.
_LENGTH_UNITS: dict[str, float] = {
    "": 1.0,
    "px": 1.0,
    "em": 16.0,
    "rem": 16.0,
    "pt": 4.0 / 3.0,
    "pc": 16.0,
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "mm": 96.0 / 25.4,
}

_DURATION_UNITS: dict[str, float] = {
    "": 1.0,
    "s": 1.0,
    "ms": 0.001,
}

_FONT_WEIGHT_KEYWORDS: dict[str, float] = {
    "thin": 100.0,
    "extra-light": 200.0,
    "light": 300.0,
    "normal": 400.0,
    "regular": 400.0,
    "medium": 500.0,
    "semi-bold": 600.0,
    "bold": 700.0,
    "extra-bold": 800.0,
    "black": 900.0,
}


def split_number(value: object) -> tuple[float, str] | None:
    """Split a value into its numeric part and unit suffix.

    Args:
        value: Number or string such as ``"12px"``

    Returns:
        ``(number, unit)`` with a lower-cased unit, or None if the value has no
        finite leading number.

    Example:
        >>> split_number("12.5px")
        (12.5, 'px')
        >>> split_number(3)
        (3.0, '')
        >>> split_number("auto") is None
        True
    """
    if is_finite_number(value):
        return float(value), ""  # type: ignore[arg-type]
    if not isinstance(value, str):
        return None

    match = _NUMBER_PREFIX_RE.match(value)
    if match is None:
        return None

    number = float(match.group(1))
    if not math.isfinite(number):
        return None
    return number, match.group(2).lower()


def parse_number(value: object) -> float | None:
    """Parse the leading number of a value, ignoring any unit."""
    parts = split_number(value)
    return parts[0] if parts is not None else None


def parse_length_px(value: object) -> float | None:
    """Parse a CSS length into pixels.

    Bare numbers are pixels. Percentages are not lengths here and return None;
    use :func:`resolve_position` when a reference size is known.
    """
    parts = split_number(value)
    if parts is None:
        return None
    number, unit = parts
    factor = _LENGTH_UNITS.get(unit)
    if factor is None:
        return None
    return number * factor


def parse_duration_s(value: object) -> float | None:
    """Parse a duration into seconds (``"1s"``, ``"250ms"``, ``2``)."""
    parts = split_number(value)
    if parts is None:
        return None
    number, unit = parts
    factor = _DURATION_UNITS.get(unit)
    if factor is None:
        return None
    return number * factor


def parse_font_weight(value: object) -> float | None:
    """Parse a numeric or keyword font weight (``700``, ``"bold"``)."""
    if isinstance(value, str):
        keyword = value.strip().lower().replace("_", "-")
        if keyword in _FONT_WEIGHT_KEYWORDS:
            return _FONT_WEIGHT_KEYWORDS[keyword]
    parts = split_number(value)
    if parts is None or parts[1]:
        return None
    return parts[0]


def resolve_position(value: object, reference: float) -> float | None:
    """Resolve a position (``"50%"``, ``"120px"``, ``120``) to pixels.

    Args:
        value: Position value
        reference: Size that percentages are resolved against

    Returns:
        Position in pixels, or None if unparseable
    """
    parts = split_number(value)
    if parts is None:
        return None
    number, unit = parts
    if unit == "%":
        return number / 100.0 * reference
    factor = _LENGTH_UNITS.get(unit)
    if factor is None:
        return None
    return number * factor


def format_quantity(value: float, unit: str = "") -> str:
    """Format a number with up to 4 decimals and a unit suffix (``"0.08em"``)."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text in ("", "-0"):
        text = "0"
    return f"{text}{unit}"


def format_px(value: float) -> str:
    """Format a pixel value the way manifests write it (``"16px"``)."""
    return format_quantity(value, "px")


def format_seconds(value: float) -> str:
    """Format a duration in seconds (``"1.5s"``)."""
    return format_quantity(value, "s")


def format_percent(value: float) -> str:
    """Format a percentage (``"33.3333%"``)."""
    return format_quantity(value, "%")
