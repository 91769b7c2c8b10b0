"""Ground state: the fixed baseline manifest every escape path ends at.

The ground state is the simplest configuration that satisfies every
predicate: black text on white, a centered layout, no motion, a square
canvas and no positioned elements. Variants trade the palette or type scale
while keeping that guarantee.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from brandlattice.core.color.space import normalize_hex
from brandlattice.core.models import COLOR_ROLES, Manifest
from brandlattice.core.utils.units import parse_font_weight, parse_length_px

DEFAULT_VARIANT = "default"

_BASE: dict[str, Any] = {
    "scene": "minimal",
    "text": "Hello",
    "canvas": "1:1",
    "colors": {
        "primary": "#000000",
        "secondary": "#333333",
        "tertiary": "#666666",
        "accent": "#0066cc",
        "background": "#ffffff",
        "text": "#000000",
    },
    "typography": {
        "fontFamily": "Arial, sans-serif",
        "fontSize": "48px",
        "fontWeight": 400,
        "lineHeight": 1.2,
        "letterSpacing": "0em",
        "textAlign": "center",
        "textTransform": "none",
    },
    "layout": {
        "type": "centered",
        "x": "50%",
        "y": "50%",
        "anchor": "center",
        "width": "80%",
        "height": "auto",
    },
    "motion": {
        "type": "none",
        "duration": "0s",
        "delay": "0s",
        "easing": "linear",
        "loop": 1,
        "direction": "normal",
    },
    "effects": {
        "shadow": "none",
        "glow": "none",
        "blur": "0px",
        "opacity": 1.0,
    },
    "elements": [],
}

GROUND_STATE: Manifest = Manifest.model_validate(_BASE)

GROUND_STATE_VARIANTS: dict[str, Manifest] = {
    DEFAULT_VARIANT: GROUND_STATE,
    "dark": Manifest.model_validate(
        {
            **_BASE,
            "colors": {
                "primary": "#ffffff",
                "secondary": "#cccccc",
                "tertiary": "#999999",
                "accent": "#66b3ff",
                "background": "#000000",
                "text": "#ffffff",
            },
        }
    ),
    "accessible": Manifest.model_validate(
        {
            **_BASE,
            "colors": {
                "primary": "#000000",
                "secondary": "#000000",
                "tertiary": "#000000",
                "accent": "#0000ff",
                "background": "#ffffff",
                "text": "#000000",
            },
            "typography": {**_BASE["typography"], "fontSize": "64px", "fontWeight": 700},
        }
    ),
}

# Mismatch scores used by distance_to_ground_state
SCENE_MISMATCH = 5.0
COLOR_MISMATCH = 2.0
FONT_FAMILY_MISMATCH = 3.0
FONT_SIZE_MISMATCH = 1.0
LAYOUT_TYPE_MISMATCH = 2.0
ANIMATED_MISMATCH = 1.0


def get_ground_state() -> Manifest:
    """Return the default ground state.

    Manifests are frozen, so the shared instance is returned as is.
    """
    return GROUND_STATE


def get_ground_state_variant(name: str = DEFAULT_VARIANT) -> Manifest:
    """Return a named ground state variant; unknown names fall back to the default."""
    return GROUND_STATE_VARIANTS.get(name, GROUND_STATE)


def _same_color(a: object, b: object) -> bool:
    hex_a = normalize_hex(a)
    return hex_a is not None and hex_a == normalize_hex(b)


def _is_animated(manifest: Manifest) -> bool:
    if manifest.motion is None:
        return False
    return (manifest.motion.type or "").strip().lower() != "none"


def is_ground_state(
    state: Manifest | Mapping[str, Any], ground: Manifest = GROUND_STATE
) -> bool:
    """Check whether a state is equivalent to the ground state.

    Compares scene, canvas, every color role, the core typography fields,
    the layout type and the absence of motion. Colors are compared after hex
    normalization and sizes/weights numerically.
    """
    manifest = Manifest.coerce(state)

    if manifest.scene != ground.scene or manifest.canvas != ground.canvas:
        return False

    if manifest.colors is None or ground.colors is None:
        return False
    for role in COLOR_ROLES:
        if not _same_color(getattr(manifest.colors, role), getattr(ground.colors, role)):
            return False

    typo, ground_typo = manifest.typography, ground.typography
    if typo is None or ground_typo is None:
        return False
    if (
        typo.font_family != ground_typo.font_family
        or typo.text_align != ground_typo.text_align
        or parse_length_px(typo.font_size) != parse_length_px(ground_typo.font_size)
        or parse_font_weight(typo.font_weight) != parse_font_weight(ground_typo.font_weight)
    ):
        return False

    layout_type = manifest.layout.type if manifest.layout else None
    ground_layout_type = ground.layout.type if ground.layout else None
    if layout_type != ground_layout_type:
        return False

    return not _is_animated(manifest)


def distance_to_ground_state(
    state: Manifest | Mapping[str, Any], ground: Manifest = GROUND_STATE
) -> float:
    """Coarse categorical distance from the ground state.

    Sums fixed mismatch scores: scene 5, each of the text, background and
    primary colors 2, font family 3, font size 1, layout type 2 and
    animated motion 1. Color and typography scores apply only when the state
    specifies those sub-records.

    Example:
        >>> distance_to_ground_state(get_ground_state())
        0.0
    """
    manifest = Manifest.coerce(state)
    total = 0.0

    if manifest.scene != ground.scene:
        total += SCENE_MISMATCH

    if manifest.colors is not None and ground.colors is not None:
        for role in ("text", "background", "primary"):
            if not _same_color(getattr(manifest.colors, role), getattr(ground.colors, role)):
                total += COLOR_MISMATCH

    if manifest.typography is not None and ground.typography is not None:
        if manifest.typography.font_family != ground.typography.font_family:
            total += FONT_FAMILY_MISMATCH
        if parse_length_px(manifest.typography.font_size) != parse_length_px(
            ground.typography.font_size
        ):
            total += FONT_SIZE_MISMATCH

    layout_type = manifest.layout.type if manifest.layout else None
    if layout_type != (ground.layout.type if ground.layout else None):
        total += LAYOUT_TYPE_MISMATCH

    if _is_animated(manifest):
        total += ANIMATED_MISMATCH

    return total


__all__ = [
    "DEFAULT_VARIANT",
    "GROUND_STATE",
    "GROUND_STATE_VARIANTS",
    "distance_to_ground_state",
    "get_ground_state",
    "get_ground_state_variant",
    "is_ground_state",
]
