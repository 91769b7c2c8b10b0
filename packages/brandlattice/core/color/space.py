"""Color parsing and sRGB <-> CIE Lab conversion.

Colors in manifests are free-form strings. This module turns them into
``RGB`` triples and converts between sRGB and CIE Lab (D65 white point) with
numpy. Parsing never raises: unparseable input yields ``None``.
"""

from __future__ import annotations

import re
from typing import NamedTuple

import numpy as np

# D65 reference white
_XN, _YN, _ZN = 0.95047, 1.0, 1.08883
_EPSILON = 0.008856
_KAPPA = 903.3

_SRGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)
_XYZ_TO_SRGB = np.array(
    [
        [3.2404542, -1.5371385, -0.4985314],
        [-0.9692660, 1.8760108, 0.0415560],
        [0.0556434, -0.2040259, 1.0572252],
    ]
)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_FUNC_RE = re.compile(
    r"^rgba?\(\s*([\d.]+%?)\s*[,\s]\s*([\d.]+%?)\s*[,\s]\s*([\d.]+%?)\s*(?:[,/]\s*[\d.]+%?\s*)?\)$",
    re.IGNORECASE,
)

# CSS level 1 keywords plus orange
NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "silver": "#c0c0c0",
    "gray": "#808080",
    "grey": "#808080",
    "white": "#ffffff",
    "maroon": "#800000",
    "red": "#ff0000",
    "purple": "#800080",
    "fuchsia": "#ff00ff",
    "green": "#008000",
    "lime": "#00ff00",
    "olive": "#808000",
    "yellow": "#ffff00",
    "navy": "#000080",
    "blue": "#0000ff",
    "teal": "#008080",
    "aqua": "#00ffff",
    "orange": "#ffa500",
}


class RGB(NamedTuple):
    """An sRGB color with 0-255 integer channels."""

    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


def _parse_channel(token: str) -> int | None:
    try:
        if token.endswith("%"):
            value = float(token[:-1]) * 255.0 / 100.0
        else:
            value = float(token)
    except ValueError:
        return None
    if not 0.0 <= value <= 255.0:
        return None
    return int(round(value))


def parse_color(value: object) -> RGB | None:
    """Parse a color string into an RGB triple.

    Accepts ``#rgb``, ``#rgba``, ``#rrggbb``, ``#rrggbbaa`` (alpha ignored),
    ``rgb()``/``rgba()`` functional notation and the CSS basic color names.

    Args:
        value: Color value from a manifest

    Returns:
        RGB triple, or None if the value is not a recognizable color

    Example:
        >>> parse_color("#0066cc")
        RGB(r=0, g=102, b=204)
        >>> parse_color("not-a-color") is None
        True
    """
    if isinstance(value, RGB):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    named = NAMED_COLORS.get(text.lower())
    if named is not None:
        text = named

    match = _HEX_RE.match(text)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits[:3])
        return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    match = _RGB_FUNC_RE.match(text)
    if match:
        channels = [_parse_channel(token) for token in match.groups()]
        if any(channel is None for channel in channels):
            return None
        return RGB(*channels)  # type: ignore[arg-type]

    return None


def is_valid_color(value: object) -> bool:
    """Return True if value parses as a color."""
    return parse_color(value) is not None


def normalize_hex(value: object) -> str | None:
    """Normalize a color to lowercase ``#rrggbb``, or None if unparseable."""
    rgb = parse_color(value)
    return rgb.to_hex() if rgb is not None else None


def srgb_to_linear(channels: np.ndarray) -> np.ndarray:
    """Undo sRGB gamma for channels scaled to [0, 1]."""
    return np.where(channels > 0.04045, ((channels + 0.055) / 1.055) ** 2.4, channels / 12.92)


def linear_to_srgb(channels: np.ndarray) -> np.ndarray:
    """Apply sRGB gamma to linear channels in [0, 1]."""
    clipped = np.clip(channels, 0.0, None)
    return np.where(
        clipped > 0.0031308, 1.055 * np.power(clipped, 1 / 2.4) - 0.055, 12.92 * clipped
    )


def rgb_to_lab(rgb: RGB) -> np.ndarray:
    """Convert an RGB triple to a Lab vector ``[L, a, b]``."""
    linear = srgb_to_linear(np.array(rgb, dtype=np.float64) / 255.0)
    x, y, z = _SRGB_TO_XYZ @ linear
    xyz = np.array([x / _XN, y / _YN, z / _ZN])

    f = np.where(xyz > _EPSILON, np.cbrt(xyz), (_KAPPA * xyz + 16.0) / 116.0)
    fx, fy, fz = f

    return np.array([116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)])


def lab_to_rgb(lab: np.ndarray) -> RGB:
    """Convert a Lab vector to the nearest in-gamut RGB triple."""
    lightness, a, b = (float(v) for v in lab)

    fy = (lightness + 16.0) / 116.0
    fx = a / 500.0 + fy
    fz = fy - b / 200.0

    x = fx**3 if fx**3 > _EPSILON else (116.0 * fx - 16.0) / _KAPPA
    y = fy**3 if lightness > _KAPPA * _EPSILON else lightness / _KAPPA
    z = fz**3 if fz**3 > _EPSILON else (116.0 * fz - 16.0) / _KAPPA

    linear = _XYZ_TO_SRGB @ np.array([x * _XN, y * _YN, z * _ZN])
    srgb = np.clip(linear_to_srgb(linear) * 255.0, 0.0, 255.0)
    r, g, b_out = (int(round(float(v))) for v in srgb)
    return RGB(r, g, b_out)


def color_to_lab(value: object) -> np.ndarray | None:
    """Parse a color and convert it to Lab, or None if unparseable."""
    rgb = parse_color(value)
    return rgb_to_lab(rgb) if rgb is not None else None


def lab_to_hex(lab: np.ndarray) -> str:
    """Convert a Lab vector to ``#rrggbb``."""
    return lab_to_rgb(lab).to_hex()


__all__ = [
    "NAMED_COLORS",
    "RGB",
    "color_to_lab",
    "is_valid_color",
    "lab_to_hex",
    "lab_to_rgb",
    "normalize_hex",
    "parse_color",
    "rgb_to_lab",
    "srgb_to_linear",
]
