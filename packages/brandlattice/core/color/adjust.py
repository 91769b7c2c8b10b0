"""Color adjustment helpers: darken, brighten, blend and palette lookup."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from brandlattice.core.color.distance import UNPARSEABLE_DISTANCE, perceptual_distance
from brandlattice.core.color.space import color_to_lab, lab_to_hex
from brandlattice.core.utils.math import clamp

# Lab lightness change per unit of darken/brighten amount
LIGHTNESS_STEP = 18.0


def darken(color: str, amount: float = 1.0) -> str | None:
    """Darken a color by lowering its Lab lightness by ``18 * amount``.

    Returns None if the color is unparseable.
    """
    lab = color_to_lab(color)
    if lab is None:
        return None
    lab[0] = clamp(float(lab[0]) - LIGHTNESS_STEP * amount, 0.0, 100.0)
    return lab_to_hex(lab)


def brighten(color: str, amount: float = 1.0) -> str | None:
    """Brighten a color; the inverse of :func:`darken`."""
    return darken(color, -amount)


def mix(color_a: str, color_b: str, t: float) -> str | None:
    """Blend two colors linearly in Lab space.

    Args:
        color_a: Start color
        color_b: End color
        t: Blend factor, 0 returns color_a and 1 returns color_b

    Returns:
        Blended ``#rrggbb`` color, or None if either input is unparseable
    """
    lab_a = color_to_lab(color_a)
    lab_b = color_to_lab(color_b)
    if lab_a is None or lab_b is None:
        return None
    return lab_to_hex(lab_a + (lab_b - lab_a) * t)


class NearestColor(BaseModel):
    """Result of a nearest-palette-color lookup."""

    model_config = ConfigDict(frozen=True)

    color: str
    distance: float

    @property
    def perceptible(self) -> bool:
        """True when the difference is noticeable (ΔE > 1)."""
        return self.distance > 1.0


def nearest_color(color: str, palette: Sequence[str]) -> NearestColor | None:
    """Find the palette entry perceptually closest to a color.

    Ties (including an unparseable input, where every distance is the
    sentinel) resolve to the earliest palette entry.

    Returns:
        The nearest entry and its distance, or None for an empty palette
    """
    if not palette:
        return None

    best = palette[0]
    best_distance = UNPARSEABLE_DISTANCE
    for candidate in palette:
        dist = perceptual_distance(color, candidate)
        if dist < best_distance:
            best, best_distance = candidate, dist

    return NearestColor(color=str(best), distance=best_distance)


__all__ = [
    "LIGHTNESS_STEP",
    "NearestColor",
    "brighten",
    "darken",
    "mix",
    "nearest_color",
]
