"""Brand subspace membership.

A state is on brand when three independent checks pass:

1. Palette containment: every specified color role is within ΔE < 10 of some
   palette entry (vacuous without a palette).
2. Font allowance: the font family contains an allowed family name,
   case-insensitively (vacuous without a font list or a font family).
3. Contrast: text/background contrast reaches the profile minimum.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

from brandlattice.core.color.contrast import contrast_ratio
from brandlattice.core.color.distance import perceptual_distance
from brandlattice.core.color.space import parse_color
from brandlattice.core.models import BrandProfile, Manifest

logger = logging.getLogger(__name__)

# ΔE below which two colors count as the same brand color
BRAND_COLOR_THRESHOLD = 10.0

DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_BACKGROUND_COLOR = "#ffffff"


class BrandReport(BaseModel):
    """Outcome of each brand sub-check."""

    model_config = ConfigDict(frozen=True)

    palette_ok: bool
    fonts_ok: bool
    contrast_ok: bool
    contrast: float
    off_palette_roles: tuple[str, ...] = ()

    @property
    def on_brand(self) -> bool:
        return self.palette_ok and self.fonts_ok and self.contrast_ok


def within_palette(
    color: object, palette: Sequence[object], threshold: float = BRAND_COLOR_THRESHOLD
) -> bool:
    """True if color is perceptually close to at least one palette entry."""
    return any(perceptual_distance(color, allowed) < threshold for allowed in palette)


def font_allowed(font_family: str | None, allowed_fonts: Sequence[str]) -> bool:
    """True if the font family contains one of the allowed names (case-insensitive)."""
    if not allowed_fonts or not font_family:
        return True
    current = font_family.casefold()
    return any(font.casefold() in current for font in allowed_fonts)


def brand_report(state: Manifest | Mapping[str, Any], profile: BrandProfile) -> BrandReport:
    """Run the three brand sub-checks and report each outcome."""
    manifest = Manifest.coerce(state)
    colors = manifest.colors.present() if manifest.colors else {}

    off_palette: tuple[str, ...] = ()
    if profile.palette:
        off_palette = tuple(
            role for role, value in colors.items() if not within_palette(value, profile.palette)
        )

    family = manifest.typography.font_family if manifest.typography else None
    fonts_ok = font_allowed(family, profile.fonts)

    text = colors.get("text", DEFAULT_TEXT_COLOR)
    background = colors.get("background", DEFAULT_BACKGROUND_COLOR)
    parseable = parse_color(text) is not None and parse_color(background) is not None
    ratio = contrast_ratio(text, background)

    return BrandReport(
        palette_ok=not off_palette,
        fonts_ok=fonts_ok,
        contrast_ok=parseable and ratio >= profile.minimum_contrast,
        contrast=ratio,
        off_palette_roles=off_palette,
    )


def is_on_brand(state: Manifest | Mapping[str, Any], profile: BrandProfile | None) -> bool:
    """Decide whether a state lies in the brand subspace of a profile.

    Args:
        state: Manifest (or mapping) to check
        profile: Brand profile; None imposes no constraints

    Returns:
        True if palette, font and contrast checks all pass
    """
    if profile is None:
        return True

    report = brand_report(state, profile)
    if not report.on_brand:
        logger.debug(
            "State off brand %s: palette=%s fonts=%s contrast=%.2f",
            profile.name or "<unnamed>",
            report.palette_ok,
            report.fonts_ok,
            report.contrast,
        )
    return report.on_brand


__all__ = [
    "BRAND_COLOR_THRESHOLD",
    "BrandReport",
    "brand_report",
    "font_allowed",
    "is_on_brand",
    "within_palette",
]
