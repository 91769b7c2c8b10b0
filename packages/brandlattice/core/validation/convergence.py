"""Escape-path synthesis.

An invalid manifest is blended a fixed fraction toward the ground state,
step by step, until it validates or the step budget runs out. The ground
state itself is always appended as the final entry, so every path is finite
(at most ``max_steps + 1`` entries) and ends at a valid state.

Energy is the severity-weighted count of failing predicates (10 per error,
5 per warning). It is recorded per step but not required to decrease: a
blend can transiently break a different predicate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

from brandlattice.core.color.adjust import mix
from brandlattice.core.manifold.metric import REFERENCE_CANVAS_PX
from brandlattice.core.models import COLOR_ROLES, ColorSet, Layout, Manifest, Motion, Typography
from brandlattice.core.utils.logging import log_performance
from brandlattice.core.utils.math import clamp, lerp, round_to
from brandlattice.core.utils.units import (
    format_px,
    format_quantity,
    format_seconds,
    parse_duration_s,
    parse_font_weight,
    resolve_position,
    split_number,
)
from brandlattice.core.validation.models import EscapeStep
from brandlattice.core.validation.predicates import (
    PREDICATES,
    Predicate,
    evaluate_predicate,
    font_size_px,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10
DEFAULT_STEP_FRACTION = 0.2


class ConvergencePhase(str, Enum):
    """Phases of escape-path synthesis."""

    EVALUATING = "evaluating"
    INTERPOLATING = "interpolating"
    TERMINAL = "terminal"


# ============================================================================
# Interpolation
# ============================================================================


def _blend_same_unit(current: object, target: object, t: float) -> object | None:
    """Blend two quantities written in the same unit, keeping that unit."""
    a = split_number(current)
    b = split_number(target)
    if a is None or b is None or a[1] != b[1]:
        return None
    value = round_to(lerp(a[0], b[0], t))
    if not a[1] and not isinstance(current, str):
        return value
    return format_quantity(value, a[1])


def _blend(
    current: object,
    target: object,
    t: float,
    convert: Callable[[object], float | None] | None = None,
    render: Callable[[float], object] | None = None,
) -> Any:
    """Blend one numeric field.

    Absent values stay absent. Values in the same unit blend in that unit;
    otherwise both sides are converted to a common unit when possible. A value
    that cannot be blended snaps to the target.
    """
    if current is None:
        return None
    if target is None:
        return current

    blended = _blend_same_unit(current, target, t)
    if blended is not None:
        return blended

    if convert is not None and render is not None:
        a, b = convert(current), convert(target)
        if a is not None and b is not None:
            return render(round_to(lerp(a, b, t)))

    return target


def _blend_color(current: object, target: object, t: float) -> Any:
    if current is None:
        return None
    if target is None:
        return current
    return mix(current, target, t) or target  # type: ignore[arg-type]


def _position_px(value: object) -> float | None:
    return resolve_position(value, REFERENCE_CANVAS_PX)


def _interpolate_colors(
    current: ColorSet | None, target: ColorSet | None, t: float
) -> ColorSet | None:
    if current is None or target is None:
        return current
    return ColorSet(
        **{
            role: _blend_color(getattr(current, role), getattr(target, role), t)
            for role in COLOR_ROLES
        }
    )


def _interpolate_typography(
    current: Typography | None, target: Typography | None, t: float
) -> Typography | None:
    if current is None or target is None:
        return current
    return Typography(
        font_family=target.font_family,
        font_size=_blend(current.font_size, target.font_size, t, font_size_px, format_px),
        font_weight=_blend(current.font_weight, target.font_weight, t, parse_font_weight, float),
        line_height=_blend(current.line_height, target.line_height, t),
        letter_spacing=_blend(current.letter_spacing, target.letter_spacing, t),
        text_align=target.text_align,
        text_transform=target.text_transform,
    )


def _interpolate_layout(current: Layout | None, target: Layout | None, t: float) -> Layout | None:
    if current is None or target is None:
        return current
    return Layout(
        type=target.type,
        x=_blend(current.x, target.x, t, _position_px, format_px),
        y=_blend(current.y, target.y, t, _position_px, format_px),
        anchor=target.anchor,
        width=target.width,
        height=target.height,
    )


def _interpolate_motion(current: Motion | None, target: Motion | None, t: float) -> Motion | None:
    if current is None or target is None:
        return current
    return Motion(
        type=target.type,
        duration=_blend(current.duration, target.duration, t, parse_duration_s, format_seconds),
        delay=_blend(current.delay, target.delay, t, parse_duration_s, format_seconds),
        easing=target.easing,
        loop=target.loop,
        direction=target.direction,
    )


def interpolate(
    current: Manifest | Mapping[str, Any],
    target: Manifest | Mapping[str, Any],
    t: float,
) -> Manifest:
    """Move a manifest a fraction of the way toward a target.

    Colors blend in Lab space, numeric typography, layout position and motion
    timing blend arithmetically, and categorical fields snap to the target.
    Top-level content (scene, text, canvas, elements, effects, brand
    references, the record of malformed fields) snaps to the target.
    Sub-records absent from ``current`` stay absent.

    Args:
        current: Starting manifest
        target: Manifest to move toward
        t: Fraction of the way to move, clamped to [0, 1]

    Returns:
        A new manifest; neither input is modified
    """
    start = Manifest.coerce(current)
    goal = Manifest.coerce(target)
    t = clamp(t, 0.0, 1.0)

    return start.model_copy(
        update={
            "scene": goal.scene,
            "text": goal.text,
            "canvas": goal.canvas,
            "elements": goal.elements,
            "effects": goal.effects,
            "profile": goal.profile,
            "brand_colors": goal.brand_colors,
            "malformed": goal.malformed,
            "colors": _interpolate_colors(start.colors, goal.colors, t),
            "typography": _interpolate_typography(start.typography, goal.typography, t),
            "layout": _interpolate_layout(start.layout, goal.layout, t),
            "motion": _interpolate_motion(start.motion, goal.motion, t),
        }
    )


# ============================================================================
# Energy and path synthesis
# ============================================================================


def compute_energy(
    manifest: Manifest | Mapping[str, Any], predicates: Sequence[Predicate] = PREDICATES
) -> int:
    """Sum 10 per failing error predicate and 5 per failing warning predicate."""
    model = Manifest.coerce(manifest)
    energy = 0
    for predicate in predicates:
        violation = evaluate_predicate(predicate, model)
        if violation is not None:
            energy += violation.severity.energy
    return energy


class EscapePathSynthesizer:
    """Builds bounded escape paths toward a fixed ground state.

    Example:
        >>> synthesizer = EscapePathSynthesizer(get_ground_state())
        >>> path = synthesizer.synthesize({"canvas": "0:0"})
        >>> path[-1].energy
        0
    """

    def __init__(
        self,
        ground_state: Manifest,
        predicates: Sequence[Predicate] = PREDICATES,
        max_steps: int = DEFAULT_MAX_STEPS,
        step_fraction: float = DEFAULT_STEP_FRACTION,
    ):
        if max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")
        if not 0.0 < step_fraction <= 1.0:
            raise ValueError(f"step_fraction must be in (0, 1], got {step_fraction}")

        self.ground_state = ground_state
        self.predicates = tuple(predicates)
        self.max_steps = max_steps
        self.step_fraction = step_fraction

    def energy(self, manifest: Manifest) -> int:
        return compute_energy(manifest, self.predicates)

    @log_performance
    def synthesize(self, manifest: Manifest | Mapping[str, Any]) -> tuple[EscapeStep, ...]:
        """Compute the escape path for a manifest.

        Returns:
            Interpolated steps (indices 0..n-1) followed by the ground state
            with energy 0 at index n, where n <= max_steps
        """
        current = Manifest.coerce(manifest)
        energy = self.energy(current)
        path: list[EscapeStep] = []
        phase = ConvergencePhase.EVALUATING

        while phase is not ConvergencePhase.TERMINAL:
            if phase is ConvergencePhase.EVALUATING:
                if energy == 0 or len(path) >= self.max_steps:
                    phase = ConvergencePhase.TERMINAL
                else:
                    phase = ConvergencePhase.INTERPOLATING
            else:
                current = interpolate(current, self.ground_state, self.step_fraction)
                energy = self.energy(current)
                path.append(EscapeStep(step=len(path), state=current, energy=energy))
                phase = ConvergencePhase.EVALUATING

        logger.debug(
            "Escape path: %d interpolated steps, last energy %d", len(path), energy
        )
        path.append(EscapeStep(step=len(path), state=self.ground_state, energy=0))
        return tuple(path)


__all__ = [
    "DEFAULT_MAX_STEPS",
    "DEFAULT_STEP_FRACTION",
    "ConvergencePhase",
    "EscapePathSynthesizer",
    "compute_energy",
    "interpolate",
]
