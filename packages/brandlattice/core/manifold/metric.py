"""Weighted distance between visual states.

d(a, b) = sqrt(c² + l² + t² + 0.5·m²)

- c: color, mean CIEDE2000 ΔE over the six color roles (roles missing in
  either state are skipped, but the sum is always divided by six)
- l: layout, Euclidean distance between resolved (x, y) positions in pixels
  on a 1080px reference canvas
- t: typography, categorical font-family penalty plus normalized size and
  weight differences
- m: motion, categorical animation-type penalty plus duration difference in
  seconds

This is a ranking metric mixing heterogeneous units through fixed weights,
not a geometric distance. The weights are constants so validator behavior
is reproducible.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from brandlattice.core.color.distance import perceptual_distance
from brandlattice.core.models import COLOR_ROLES, Layout, Manifest, Motion, Typography
from brandlattice.core.utils.units import (
    parse_duration_s,
    parse_font_weight,
    parse_length_px,
    resolve_position,
)

# Category weights (applied to squared category distances)
COLOR_WEIGHT = 1.0
LAYOUT_WEIGHT = 1.0
TYPOGRAPHY_WEIGHT = 1.0
MOTION_WEIGHT = 0.5

# Typography terms
FONT_FAMILY_PENALTY = 2.0
FONT_SIZE_WEIGHT = 1.5
FONT_SIZE_SCALE = 100.0
FONT_WEIGHT_WEIGHT = 1.2
FONT_WEIGHT_SCALE = 1000.0

# Motion terms
ANIMATION_TYPE_PENALTY = 1.0

REFERENCE_CANVAS_PX = 1080.0

# Values assumed when a state leaves a dimension unspecified
DEFAULT_POSITION = "50%"
DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE_PX = 16.0
DEFAULT_FONT_WEIGHT = 400.0
DEFAULT_ANIMATION = "none"
DEFAULT_DURATION_S = 0.0

StateLike = Manifest | Mapping[str, Any]


class CategoryDistances(BaseModel):
    """Unweighted per-category distances between two states."""

    model_config = ConfigDict(frozen=True)

    color: float
    layout: float
    typography: float
    motion: float

    @property
    def total(self) -> float:
        """Weighted combination of the categories."""
        return math.sqrt(
            COLOR_WEIGHT * self.color**2
            + LAYOUT_WEIGHT * self.layout**2
            + TYPOGRAPHY_WEIGHT * self.typography**2
            + MOTION_WEIGHT * self.motion**2
        )


def color_distance(state_a: Manifest, state_b: Manifest) -> float:
    """Mean perceptual distance over the color roles present in both states."""
    colors_a = state_a.colors.present() if state_a.colors else {}
    colors_b = state_b.colors.present() if state_b.colors else {}

    total = 0.0
    for role in COLOR_ROLES:
        if role not in colors_a or role not in colors_b:
            continue
        value_a, value_b = colors_a[role], colors_b[role]
        if value_a == value_b:
            continue
        total += perceptual_distance(value_a, value_b)

    return total / len(COLOR_ROLES)


def _resolve_xy(layout: Layout | None) -> tuple[float, float]:
    default = resolve_position(DEFAULT_POSITION, REFERENCE_CANVAS_PX) or 0.0
    if layout is None:
        return default, default
    x = resolve_position(layout.x, REFERENCE_CANVAS_PX)
    y = resolve_position(layout.y, REFERENCE_CANVAS_PX)
    return (x if x is not None else default, y if y is not None else default)


def layout_distance(state_a: Manifest, state_b: Manifest) -> float:
    """Euclidean distance between the two resolved positions, in pixels."""
    x1, y1 = _resolve_xy(state_a.layout)
    x2, y2 = _resolve_xy(state_b.layout)
    return math.hypot(x2 - x1, y2 - y1)


def _typography_values(typography: Typography | None) -> tuple[str, float, float]:
    if typography is None:
        return DEFAULT_FONT_FAMILY.casefold(), DEFAULT_FONT_SIZE_PX, DEFAULT_FONT_WEIGHT

    family = (typography.font_family or DEFAULT_FONT_FAMILY).strip().casefold()
    size = parse_length_px(typography.font_size)
    weight = parse_font_weight(typography.font_weight)
    return (
        family,
        size if size is not None else DEFAULT_FONT_SIZE_PX,
        weight if weight is not None else DEFAULT_FONT_WEIGHT,
    )


def typography_distance(state_a: Manifest, state_b: Manifest) -> float:
    """Weighted typography difference."""
    family_a, size_a, weight_a = _typography_values(state_a.typography)
    family_b, size_b, weight_b = _typography_values(state_b.typography)

    dist = 0.0
    if family_a != family_b:
        dist += FONT_FAMILY_PENALTY
    dist += FONT_SIZE_WEIGHT * abs(size_a - size_b) / FONT_SIZE_SCALE
    dist += FONT_WEIGHT_WEIGHT * abs(weight_a - weight_b) / FONT_WEIGHT_SCALE
    return dist


def _motion_values(motion: Motion | None) -> tuple[str, float]:
    if motion is None:
        return DEFAULT_ANIMATION, DEFAULT_DURATION_S
    duration = parse_duration_s(motion.duration)
    return (
        (motion.type or DEFAULT_ANIMATION).strip().casefold(),
        duration if duration is not None else DEFAULT_DURATION_S,
    )


def motion_distance(state_a: Manifest, state_b: Manifest) -> float:
    """Animation type mismatch plus duration difference in seconds."""
    type_a, duration_a = _motion_values(state_a.motion)
    type_b, duration_b = _motion_values(state_b.motion)

    dist = ANIMATION_TYPE_PENALTY if type_a != type_b else 0.0
    return dist + abs(duration_a - duration_b)


def category_distances(state_a: StateLike, state_b: StateLike) -> CategoryDistances:
    """Compute the four per-category distances between two states."""
    a = Manifest.coerce(state_a)
    b = Manifest.coerce(state_b)
    return CategoryDistances(
        color=color_distance(a, b),
        layout=layout_distance(a, b),
        typography=typography_distance(a, b),
        motion=motion_distance(a, b),
    )


def distance(state_a: StateLike, state_b: StateLike) -> float:
    """Weighted distance between two visual states.

    Identical states yield exactly 0 and the metric is symmetric. Unparseable
    colors that differ make the distance infinite (maximally different).

    Args:
        state_a: First state (Manifest or manifest mapping)
        state_b: Second state

    Returns:
        Non-negative distance

    Example:
        >>> distance({"layout": {"x": "0px", "y": "0px"}}, {"layout": {"x": "3px", "y": "4px"}})
        5.0
    """
    return category_distances(state_a, state_b).total


__all__ = [
    "CategoryDistances",
    "category_distances",
    "color_distance",
    "distance",
    "layout_distance",
    "motion_distance",
    "typography_distance",
]
