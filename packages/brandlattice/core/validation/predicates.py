"""The fixed predicate set.

Each predicate pairs a test with an optional deterministic repair and a
severity. Predicates are plain data: a tuple of frozen records holding
functions, evaluated in order by the validator.

Order: color_contrast, layout_coherence, brand_compliance, animation_physics,
canvas_validity, text_readability. Individual outcomes do not depend on the
order, but violation and repair reports follow it.

Fields that ``Manifest.coerce`` set aside as malformed are reported by the
predicate owning that part of the manifest, and that predicate's repair drops
them.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from brandlattice.core.color.adjust import brighten, darken, nearest_color
from brandlattice.core.color.contrast import (
    AA_NORMAL_TEXT,
    contrast_ratio,
    relative_luminance,
    suggest_text_color,
)
from brandlattice.core.color.space import normalize_hex, parse_color
from brandlattice.core.manifold.brand import within_palette
from brandlattice.core.models import CanvasSize, ColorSet, Element, Manifest, Motion, Typography
from brandlattice.core.utils.math import clamp
from brandlattice.core.utils.units import (
    format_percent,
    format_px,
    parse_duration_s,
    parse_length_px,
    parse_number,
    resolve_position,
)
from brandlattice.core.validation.models import PredicateOutcome, Severity, Violation

logger = logging.getLogger(__name__)

# color_contrast
MIN_CONTRAST_RATIO = AA_NORMAL_TEXT
CONTRAST_STEP = 0.2
MAX_CONTRAST_STEPS = 5
DARK_LUMINANCE_FLOOR = 0.05
LIGHT_LUMINANCE_CEILING = 0.95
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_BACKGROUND_COLOR = "#ffffff"

# layout_coherence
DEFAULT_ELEMENT_SIZE = 100.0
OVERLAP_TOLERANCE = 1e-3

# animation_physics
STATIC_ANIMATION = "none"
NAMED_EASINGS = frozenset({"linear", "ease", "ease-in", "ease-out", "ease-in-out"})
DEFAULT_EASING = "ease"
DEFAULT_DURATION = "1s"
_NUM = r"\s*([+-]?(?:\d+\.?\d*|\.\d+))\s*"
_CUBIC_BEZIER_RE = re.compile(rf"^cubic-bezier\({_NUM},{_NUM},{_NUM},{_NUM}\)$")
_STEPS_RE = re.compile(
    r"^steps\(\s*(\d+)\s*(?:,\s*(jump-start|jump-end|jump-none|jump-both|start|end)\s*)?\)$"
)

# canvas_validity
DEFAULT_CANVAS = "1:1"

# text_readability
MIN_FONT_SIZE_PX = 8.0
MAX_FONT_SIZE_PX = 200.0
DEFAULT_FONT_SIZE = "16px"
PLACEHOLDER_TEXT = "Text"
ROOT_FONT_SIZE_PX = 16.0

# Fields set aside by Manifest.coerce, keyed to the predicate that reports them.
# Anything not listed (text, scene, typography, unknown keys) goes to
# text_readability.
MALFORMED_FIELD_OWNERS: dict[str, str] = {
    "colors": "color_contrast",
    "elements": "layout_coherence",
    "layout": "layout_coherence",
    "brand_colors": "brand_compliance",
    "profile": "brand_compliance",
    "motion": "animation_physics",
    "effects": "animation_physics",
    "canvas": "canvas_validity",
}
DEFAULT_MALFORMED_OWNER = "text_readability"

PredicateTest = Callable[[Manifest], PredicateOutcome]
PredicateFix = Callable[[Manifest], Manifest]


@dataclass(frozen=True)
class Predicate:
    """A named validity rule over manifests."""

    name: str
    severity: Severity
    test: PredicateTest
    fix: PredicateFix | None = None


def evaluate_predicate(predicate: Predicate, manifest: Manifest) -> Violation | None:
    """Run one predicate's test.

    A test that raises is reported as a violation carrying the exception
    message, with the predicate's severity, so the remaining predicates
    still run.

    Returns:
        The violation, or None if the predicate holds
    """
    try:
        outcome = predicate.test(manifest)
    except Exception as e:
        logger.warning("Predicate %s raised during test: %s", predicate.name, e, exc_info=True)
        return Violation(
            predicate=predicate.name,
            message=f"Predicate raised {type(e).__name__}: {e}",
            severity=predicate.severity,
        )

    if outcome.valid:
        return None
    return Violation(
        predicate=predicate.name,
        message=outcome.message or f"{predicate.name} failed",
        severity=predicate.severity,
    )


def attempt_repair(predicate: Predicate, manifest: Manifest) -> Manifest | None:
    """Run one predicate's fix; a fix that raises is logged and skipped."""
    if predicate.fix is None:
        return None
    try:
        return predicate.fix(manifest)
    except Exception as e:
        logger.warning("Predicate %s raised during fix: %s", predicate.name, e, exc_info=True)
        return None


# ============================================================================
# Malformed fields
# ============================================================================


def malformed_fields(manifest: Manifest, predicate_name: str) -> list[str]:
    """Names of the malformed fields a predicate is responsible for."""
    return [
        field
        for field in manifest.malformed or {}
        if MALFORMED_FIELD_OWNERS.get(field, DEFAULT_MALFORMED_OWNER) == predicate_name
    ]


def _malformed_outcome(manifest: Manifest, predicate_name: str) -> PredicateOutcome | None:
    fields = malformed_fields(manifest, predicate_name)
    if not fields:
        return None
    recorded = manifest.malformed or {}
    details = ", ".join(f"{field}={recorded[field]}" for field in fields)
    return PredicateOutcome.fail(f"Malformed field: {details}")


def _drop_malformed(manifest: Manifest, predicate_name: str) -> Manifest:
    fields = malformed_fields(manifest, predicate_name)
    if not fields:
        return manifest
    remaining = {k: v for k, v in (manifest.malformed or {}).items() if k not in fields}
    return manifest.model_copy(update={"malformed": remaining or None})


# ============================================================================
# color_contrast
# ============================================================================


def _text_and_background(manifest: Manifest) -> tuple[object, object]:
    colors = manifest.colors or ColorSet()
    text = colors.text if colors.text is not None else DEFAULT_TEXT_COLOR
    background = colors.background if colors.background is not None else DEFAULT_BACKGROUND_COLOR
    return text, background


def check_color_contrast(manifest: Manifest) -> PredicateOutcome:
    """Text must reach WCAG AA contrast (4.5:1) against the background."""
    malformed = _malformed_outcome(manifest, "color_contrast")
    if malformed:
        return malformed

    text, background = _text_and_background(manifest)

    if parse_color(text) is None or parse_color(background) is None:
        return PredicateOutcome.fail(
            f"Invalid color format: text={text!r}, background={background!r}"
        )

    ratio = contrast_ratio(text, background)
    if ratio >= MIN_CONTRAST_RATIO:
        return PredicateOutcome.ok()
    return PredicateOutcome.fail(
        f"Contrast ratio {ratio:.2f} is below minimum {MIN_CONTRAST_RATIO}"
    )


def readable_text_color(text: str, background: str) -> str:
    """Search for a text color readable on a background.

    Darkens in fixed steps (at most 5) until the ratio is reached or the color
    is nearly black, then lightens from the original (at most 5 steps) until
    the ratio is reached or the color is nearly white. If neither direction
    gets there, falls back to black or white, whichever contrasts more.
    """

    def readable(color: str) -> bool:
        return contrast_ratio(color, background) >= MIN_CONTRAST_RATIO

    original = normalize_hex(text) or DEFAULT_TEXT_COLOR

    candidate = original
    for _ in range(MAX_CONTRAST_STEPS):
        if readable(candidate) or relative_luminance(candidate) <= DARK_LUMINANCE_FLOOR:
            break
        candidate = darken(candidate, CONTRAST_STEP) or candidate
    if readable(candidate):
        return candidate

    candidate = original
    for _ in range(MAX_CONTRAST_STEPS):
        if readable(candidate) or relative_luminance(candidate) >= LIGHT_LUMINANCE_CEILING:
            break
        candidate = brighten(candidate, CONTRAST_STEP) or candidate
    if readable(candidate):
        return candidate

    return suggest_text_color(background)


def repair_color_contrast(manifest: Manifest) -> Manifest:
    """Adjust the text color until it is readable on the background.

    An unparseable background is replaced by white and an unparseable text
    color is searched from black.
    """
    manifest = _drop_malformed(manifest, "color_contrast")
    colors = manifest.colors or ColorSet()
    updates: dict[str, object] = {}

    background = normalize_hex(colors.background) if colors.background is not None else None
    if colors.background is not None and background is None:
        updates["background"] = DEFAULT_BACKGROUND_COLOR
    background = background or DEFAULT_BACKGROUND_COLOR

    text = normalize_hex(colors.text) if colors.text is not None else None
    updates["text"] = readable_text_color(text or DEFAULT_TEXT_COLOR, background)

    return manifest.model_copy(update={"colors": colors.model_copy(update=updates)})


# ============================================================================
# layout_coherence
# ============================================================================


def _element_box(element: Element) -> tuple[float, float, float, float]:
    """Bounding box (x, y, w, h); missing/zero size is 100, missing position 0."""
    x = parse_number(element.x) or 0.0
    y = parse_number(element.y) or 0.0
    w = parse_number(element.width) or DEFAULT_ELEMENT_SIZE
    h = parse_number(element.height) or DEFAULT_ELEMENT_SIZE
    return x, y, w, h


def elements_overlap(first: Element, second: Element) -> bool:
    """True if two elements' boxes intersect with positive area."""
    x1, y1, w1, h1 = _element_box(first)
    x2, y2, w2, h2 = _element_box(second)

    separated = (
        x1 + w1 <= x2 + OVERLAP_TOLERANCE
        or x2 + w2 <= x1 + OVERLAP_TOLERANCE
        or y1 + h1 <= y2 + OVERLAP_TOLERANCE
        or y2 + h2 <= y1 + OVERLAP_TOLERANCE
    )
    return not separated


def check_layout_coherence(manifest: Manifest) -> PredicateOutcome:
    """Positioned elements must not overlap."""
    malformed = _malformed_outcome(manifest, "layout_coherence")
    if malformed:
        return malformed

    elements = manifest.elements or ()
    for i, first in enumerate(elements):
        for j in range(i + 1, len(elements)):
            if elements_overlap(first, elements[j]):
                return PredicateOutcome.fail(f"Elements {i} and {j} overlap")
    return PredicateOutcome.ok()


def repair_layout_coherence(manifest: Manifest) -> Manifest:
    """Re-lay elements on a ceil(sqrt(n)) square grid of percentage cells."""
    manifest = _drop_malformed(manifest, "layout_coherence")
    elements = manifest.elements or ()
    if not elements:
        return manifest

    grid = math.ceil(math.sqrt(len(elements)))
    cell = 100.0 / grid

    placed = tuple(
        element.model_copy(
            update={
                "x": format_percent((index % grid) * cell),
                "y": format_percent((index // grid) * cell),
                "width": format_percent(cell),
                "height": format_percent(cell),
            }
        )
        for index, element in enumerate(elements)
    )
    return manifest.model_copy(update={"elements": placed})


# ============================================================================
# brand_compliance
# ============================================================================


def check_brand_compliance(manifest: Manifest) -> PredicateOutcome:
    """Every color must be close to a brand color when brand colors are given."""
    malformed = _malformed_outcome(manifest, "brand_compliance")
    if malformed:
        return malformed

    palette = manifest.brand_palette()
    if not palette or manifest.colors is None:
        return PredicateOutcome.ok()

    for value in manifest.colors.present().values():
        if not within_palette(value, palette):
            return PredicateOutcome.fail(f"Color {value} is not in brand palette")
    return PredicateOutcome.ok()


def repair_brand_compliance(manifest: Manifest) -> Manifest:
    """Replace each color with its perceptually nearest brand color."""
    manifest = _drop_malformed(manifest, "brand_compliance")
    palette = manifest.brand_palette()
    if not palette or manifest.colors is None:
        return manifest

    updates = {}
    for role, value in manifest.colors.present().items():
        nearest = nearest_color(value, palette)  # type: ignore[arg-type]
        if nearest is not None:
            updates[role] = nearest.color

    return manifest.model_copy(update={"colors": manifest.colors.model_copy(update=updates)})


# ============================================================================
# animation_physics
# ============================================================================


def is_valid_easing(easing: str) -> bool:
    """Named CSS easing, ``cubic-bezier(x1, y1, x2, y2)`` or ``steps(n[, pos])``."""
    normalized = easing.strip().lower()
    if normalized in NAMED_EASINGS:
        return True

    bezier = _CUBIC_BEZIER_RE.match(normalized)
    if bezier:
        x1, _y1, x2, _y2 = (float(v) for v in bezier.groups())
        return 0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0

    steps = _STEPS_RE.match(normalized)
    return bool(steps) and int(steps.group(1)) > 0  # type: ignore[union-attr]


def _is_animated(motion: Motion) -> bool:
    return (motion.type or "").strip().lower() != STATIC_ANIMATION


def _duration_problem(motion: Motion) -> str | None:
    """Static motion may declare a zero duration; anything else must be positive."""
    if motion.duration is None:
        return None
    seconds = parse_duration_s(motion.duration)
    if seconds is None:
        return f"Animation duration is not a valid time: {motion.duration!r}"
    if seconds < 0 or (seconds == 0 and _is_animated(motion)):
        return f"Animation duration must be positive, got {motion.duration}"
    return None


def check_animation_physics(manifest: Manifest) -> PredicateOutcome:
    """Animated manifests need a positive duration and a known easing."""
    malformed = _malformed_outcome(manifest, "animation_physics")
    if malformed:
        return malformed

    motion = manifest.motion
    if motion is None:
        return PredicateOutcome.ok()

    problem = _duration_problem(motion)
    if problem:
        return PredicateOutcome.fail(problem)

    if motion.easing is not None and not is_valid_easing(motion.easing):
        return PredicateOutcome.fail(f"Invalid easing function: {motion.easing}")

    return PredicateOutcome.ok()


def repair_animation_physics(manifest: Manifest) -> Manifest:
    """Reset an invalid duration to 1s and an invalid easing to ``ease``."""
    manifest = _drop_malformed(manifest, "animation_physics")
    motion = manifest.motion
    if motion is None:
        return manifest

    updates: dict[str, object] = {}
    if _duration_problem(motion):
        updates["duration"] = DEFAULT_DURATION
    if motion.easing is not None and not is_valid_easing(motion.easing):
        updates["easing"] = DEFAULT_EASING

    return manifest.model_copy(update={"motion": motion.model_copy(update=updates)})


# ============================================================================
# canvas_validity
# ============================================================================


def _positive_component(part: str) -> bool:
    try:
        value = float(part.strip())
    except ValueError:
        return False
    return math.isfinite(value) and value > 0


def canvas_string_problem(canvas: str) -> str | None:
    """Describe what is wrong with a ``W:H`` / ``WxH`` canvas string, if anything."""
    text = canvas.strip()
    if ":" in text:
        parts = text.split(":")
        if len(parts) != 2 or not all(_positive_component(p) for p in parts):
            return f"Invalid canvas ratio: {canvas}"
    elif "x" in text.lower():
        parts = text.lower().split("x")
        if len(parts) != 2 or not all(_positive_component(p) for p in parts):
            return f"Invalid canvas dimensions: {canvas}"
    return None


def _canvas_size_problem(canvas: CanvasSize) -> str | None:
    if canvas.aspect is not None:
        problem = canvas_string_problem(canvas.aspect)
        if problem:
            return problem
    for side in (canvas.width, canvas.height):
        if side is None:
            continue
        px = parse_length_px(side)
        if px is None or px <= 0:
            return f"Invalid canvas dimensions: {canvas.width}x{canvas.height}"
    return None


def check_canvas_validity(manifest: Manifest) -> PredicateOutcome:
    """Canvas ratios and dimensions must have positive numeric components."""
    malformed = _malformed_outcome(manifest, "canvas_validity")
    if malformed:
        return malformed

    canvas = manifest.canvas
    if canvas is None:
        return PredicateOutcome.ok()

    if isinstance(canvas, CanvasSize):
        problem = _canvas_size_problem(canvas)
    else:
        problem = canvas_string_problem(canvas)

    return PredicateOutcome.fail(problem) if problem else PredicateOutcome.ok()


def repair_canvas_validity(manifest: Manifest) -> Manifest:
    """Reset the canvas to the default square ratio."""
    manifest = _drop_malformed(manifest, "canvas_validity")
    return manifest.model_copy(update={"canvas": DEFAULT_CANVAS})


# ============================================================================
# text_readability
# ============================================================================


def font_size_px(value: object) -> float | None:
    """Font size in px-equivalent units; percentages are relative to 16px."""
    return resolve_position(value, ROOT_FONT_SIZE_PX)


def _font_size_problem(typography: Typography | None) -> str | None:
    if typography is None or typography.font_size is None:
        return None
    size = font_size_px(typography.font_size)
    if size is None:
        return f"Font size {typography.font_size!r} is not a valid length"
    if size < MIN_FONT_SIZE_PX or size > MAX_FONT_SIZE_PX:
        return (
            f"Font size {size:g}px is outside readable range "
            f"({MIN_FONT_SIZE_PX:g}-{MAX_FONT_SIZE_PX:g}px)"
        )
    return None


def check_text_readability(manifest: Manifest) -> PredicateOutcome:
    """Text, when given, must be non-blank and set in a readable size."""
    malformed = _malformed_outcome(manifest, "text_readability")
    if malformed:
        return malformed

    if manifest.text is not None and not manifest.text.strip():
        return PredicateOutcome.fail("Text content is empty")

    problem = _font_size_problem(manifest.typography)
    return PredicateOutcome.fail(problem) if problem else PredicateOutcome.ok()


def repair_text_readability(manifest: Manifest) -> Manifest:
    """Substitute placeholder text and clamp the font size into [8, 200]px."""
    manifest = _drop_malformed(manifest, "text_readability")
    updates: dict[str, object] = {}

    if manifest.text is not None and not manifest.text.strip():
        updates["text"] = PLACEHOLDER_TEXT

    typography = manifest.typography
    if typography is not None and _font_size_problem(typography):
        size = font_size_px(typography.font_size)
        new_size = (
            DEFAULT_FONT_SIZE
            if size is None
            else format_px(clamp(size, MIN_FONT_SIZE_PX, MAX_FONT_SIZE_PX))
        )
        updates["typography"] = typography.model_copy(update={"font_size": new_size})

    return manifest.model_copy(update=updates) if updates else manifest


# ============================================================================
# The set
# ============================================================================


def build_predicate_set() -> tuple[Predicate, ...]:
    """Build the fixed, ordered predicate set."""
    return (
        Predicate("color_contrast", Severity.ERROR, check_color_contrast, repair_color_contrast),
        Predicate(
            "layout_coherence", Severity.ERROR, check_layout_coherence, repair_layout_coherence
        ),
        Predicate(
            "brand_compliance", Severity.WARNING, check_brand_compliance, repair_brand_compliance
        ),
        Predicate(
            "animation_physics", Severity.WARNING, check_animation_physics, repair_animation_physics
        ),
        Predicate("canvas_validity", Severity.ERROR, check_canvas_validity, repair_canvas_validity),
        Predicate(
            "text_readability", Severity.WARNING, check_text_readability, repair_text_readability
        ),
    )


PREDICATES: tuple[Predicate, ...] = build_predicate_set()

PREDICATE_NAMES: tuple[str, ...] = tuple(p.name for p in PREDICATES)


__all__ = [
    "DEFAULT_MALFORMED_OWNER",
    "MALFORMED_FIELD_OWNERS",
    "PREDICATES",
    "PREDICATE_NAMES",
    "Predicate",
    "attempt_repair",
    "build_predicate_set",
    "check_animation_physics",
    "check_brand_compliance",
    "check_canvas_validity",
    "check_color_contrast",
    "check_layout_coherence",
    "check_text_readability",
    "elements_overlap",
    "evaluate_predicate",
    "font_size_px",
    "is_valid_easing",
    "malformed_fields",
    "readable_text_color",
    "repair_animation_physics",
    "repair_brand_compliance",
    "repair_canvas_validity",
    "repair_color_contrast",
    "repair_layout_coherence",
    "repair_text_readability",
]
