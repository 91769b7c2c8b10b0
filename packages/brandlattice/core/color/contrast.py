"""WCAG 2.1 luminance and contrast utilities.

Standards:
- WCAG AA: 4.5:1 for normal text, 3:1 for large text
- WCAG AAA: 7:1 for normal text, 4.5:1 for large text

Unparseable colors fail closed: luminance 0.0 and contrast 1.0 (the minimum),
so downstream checks always receive a usable number.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from brandlattice.core.color.space import parse_color
from brandlattice.core.utils.math import clamp

MIN_CONTRAST = 1.0
MAX_CONTRAST = 21.0

# px thresholds for "large" text
LARGE_TEXT_PX = 24.0
LARGE_BOLD_TEXT_PX = 18.66
BOLD_WEIGHT = 700.0

_LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


class WCAGLevel(str, Enum):
    """WCAG conformance level."""

    A = "A"
    AA = "AA"
    AAA = "AAA"


# (normal text, large text)
_THRESHOLDS: dict[WCAGLevel, tuple[float, float]] = {
    WCAGLevel.A: (4.5, 3.0),
    WCAGLevel.AA: (4.5, 3.0),
    WCAGLevel.AAA: (7.0, 4.5),
}

AA_NORMAL_TEXT = _THRESHOLDS[WCAGLevel.AA][0]


def relative_luminance(color: object) -> float:
    """Relative luminance of a color per WCAG 2.1 (0 = black, 1 = white).

    Returns 0.0 for unparseable colors.
    """
    rgb = parse_color(color)
    if rgb is None:
        return 0.0
    channels = np.array(rgb, dtype=np.float64) / 255.0
    linear = np.where(channels <= 0.03928, channels / 12.92, ((channels + 0.055) / 1.055) ** 2.4)
    return float(clamp(float(_LUMINANCE_WEIGHTS @ linear), 0.0, 1.0))


def contrast_ratio(foreground: object, background: object) -> float:
    """Contrast ratio between two colors, in [1, 21].

    ratio = (L_lighter + 0.05) / (L_darker + 0.05)

    Returns 1.0 (minimum contrast) when either color is unparseable.

    Example:
        >>> contrast_ratio("#000000", "#ffffff")
        21.0
    """
    if parse_color(foreground) is None or parse_color(background) is None:
        return MIN_CONTRAST

    lum_fg = relative_luminance(foreground)
    lum_bg = relative_luminance(background)
    lighter, darker = max(lum_fg, lum_bg), min(lum_fg, lum_bg)

    ratio = round((lighter + 0.05) / (darker + 0.05), 10)
    return float(clamp(ratio, MIN_CONTRAST, MAX_CONTRAST))


def contrast_threshold(level: WCAGLevel = WCAGLevel.AA, large_text: bool = False) -> float:
    """Minimum contrast ratio required for a WCAG level."""
    normal, large = _THRESHOLDS[level]
    return large if large_text else normal


def meets_wcag(ratio: float, level: WCAGLevel = WCAGLevel.AA, large_text: bool = False) -> bool:
    """Check whether a contrast ratio meets a WCAG level."""
    return ratio >= contrast_threshold(level, large_text)


def is_large_text(font_size_px: float, font_weight: float = 400.0) -> bool:
    """WCAG "large text": at least 24px, or at least 18.66px when bold."""
    if font_size_px >= LARGE_TEXT_PX:
        return True
    return font_size_px >= LARGE_BOLD_TEXT_PX and font_weight >= BOLD_WEIGHT


def wcag_level(ratio: float, large_text: bool = False) -> WCAGLevel | None:
    """Highest WCAG level achieved by a contrast ratio, or None."""
    if meets_wcag(ratio, WCAGLevel.AAA, large_text):
        return WCAGLevel.AAA
    if meets_wcag(ratio, WCAGLevel.AA, large_text):
        return WCAGLevel.AA
    if ratio >= 3.0:
        return WCAGLevel.A
    return None


class ContrastReport(BaseModel):
    """Detailed text/background contrast compliance."""

    model_config = ConfigDict(frozen=True)

    ratio: float = Field(description="Contrast ratio rounded to 2 decimals")
    text_color: str
    background_color: str
    font_size_px: float
    font_weight: float
    large_text: bool
    level: WCAGLevel | None
    meets_aa: bool
    meets_aaa: bool
    threshold_aa: float
    threshold_aaa: float


def check_text_contrast(
    text_color: str,
    background_color: str,
    font_size_px: float = 16.0,
    font_weight: float = 400.0,
) -> ContrastReport:
    """Build a compliance report for a text/background pair."""
    ratio = contrast_ratio(text_color, background_color)
    large = is_large_text(font_size_px, font_weight)

    return ContrastReport(
        ratio=round(ratio, 2),
        text_color=text_color,
        background_color=background_color,
        font_size_px=font_size_px,
        font_weight=font_weight,
        large_text=large,
        level=wcag_level(ratio, large),
        meets_aa=meets_wcag(ratio, WCAGLevel.AA, large),
        meets_aaa=meets_wcag(ratio, WCAGLevel.AAA, large),
        threshold_aa=contrast_threshold(WCAGLevel.AA, large),
        threshold_aaa=contrast_threshold(WCAGLevel.AAA, large),
    )


def suggest_text_color(
    background_color: str,
    level: WCAGLevel = WCAGLevel.AA,
    large_text: bool = False,
) -> str:
    """Suggest black or white text for a background.

    Picks whichever extreme reaches the level's threshold, preferring the
    stronger contrast. Any background reaches at least ~4.58:1 against one of
    the two, so AA is always satisfiable.
    """
    threshold = contrast_threshold(level, large_text)
    on_black = contrast_ratio("#000000", background_color)
    on_white = contrast_ratio("#ffffff", background_color)

    candidates = [(on_black, "#000000"), (on_white, "#ffffff")]
    passing = [c for c in candidates if c[0] >= threshold]
    best = max(passing or candidates, key=lambda c: c[0])
    return best[1]


__all__ = [
    "AA_NORMAL_TEXT",
    "ContrastReport",
    "WCAGLevel",
    "check_text_contrast",
    "contrast_ratio",
    "contrast_threshold",
    "is_large_text",
    "meets_wcag",
    "relative_luminance",
    "suggest_text_color",
    "wcag_level",
]
