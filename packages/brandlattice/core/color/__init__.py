"""Color parsing, perceptual distance and WCAG contrast primitives."""

from brandlattice.core.color.adjust import NearestColor, brighten, darken, mix, nearest_color
from brandlattice.core.color.contrast import (
    ContrastReport,
    WCAGLevel,
    check_text_contrast,
    contrast_ratio,
    relative_luminance,
    suggest_text_color,
)
from brandlattice.core.color.distance import UNPARSEABLE_DISTANCE, perceptual_distance
from brandlattice.core.color.space import RGB, is_valid_color, normalize_hex, parse_color

__all__ = [
    "RGB",
    "UNPARSEABLE_DISTANCE",
    "ContrastReport",
    "NearestColor",
    "WCAGLevel",
    "brighten",
    "check_text_contrast",
    "contrast_ratio",
    "darken",
    "is_valid_color",
    "mix",
    "nearest_color",
    "normalize_hex",
    "parse_color",
    "perceptual_distance",
    "relative_luminance",
    "suggest_text_color",
]
