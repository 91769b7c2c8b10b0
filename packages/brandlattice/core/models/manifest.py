"""Manifest models: the structured description of a visual configuration.

Every field is optional and absence means "not yet specified". Leaf values are
typed loosely (strings or numbers) because manifests come straight from a
command parser. Malformed leaf content is representable here, and
``Manifest.coerce`` sets aside fields of the wrong shape, so the validation
predicates report bad input instead of it being rejected at construction.

Models are frozen. Repairs and interpolation build new instances with
``model_copy(update=...)``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from brandlattice.core.models.brand import BrandProfile

logger = logging.getLogger(__name__)

# A manifest leaf: "48px", 48, 1.5, "50%", "#ff0000", ...
Scalar = str | int | float

COLOR_ROLES: tuple[str, ...] = ("primary", "secondary", "tertiary", "accent", "background", "text")

_RECORD_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)


class ColorSet(BaseModel):
    """Named color roles."""

    model_config = _RECORD_CONFIG

    primary: Scalar | None = None
    secondary: Scalar | None = None
    tertiary: Scalar | None = None
    accent: Scalar | None = None
    background: Scalar | None = None
    text: Scalar | None = None

    def present(self) -> dict[str, Scalar]:
        """Return the specified roles in canonical role order."""
        values = {role: getattr(self, role) for role in COLOR_ROLES}
        return {role: value for role, value in values.items() if value is not None}


class Typography(BaseModel):
    """Text styling."""

    model_config = _RECORD_CONFIG

    font_family: str | None = None
    font_size: Scalar | None = None
    font_weight: Scalar | None = None
    line_height: Scalar | None = None
    letter_spacing: Scalar | None = None
    text_align: str | None = None
    text_transform: str | None = None


class Layout(BaseModel):
    """Placement of the main content block."""

    model_config = _RECORD_CONFIG

    type: str | None = None
    x: Scalar | None = None
    y: Scalar | None = None
    anchor: str | None = None
    width: Scalar | None = None
    height: Scalar | None = None


class Motion(BaseModel):
    """Animation parameters."""

    model_config = _RECORD_CONFIG

    type: str | None = None
    duration: Scalar | None = None
    delay: Scalar | None = None
    easing: str | None = None
    loop: Scalar | None = None
    direction: str | None = None


class Effects(BaseModel):
    """Visual effect parameters (CSS-like strings)."""

    model_config = _RECORD_CONFIG

    shadow: str | None = None
    glow: str | None = None
    blur: Scalar | None = None
    opacity: Scalar | None = None


class Element(BaseModel):
    """A positioned box used for overlap checking.

    Missing width/height default to 100 and missing position to 0 when boxes
    are compared.
    """

    model_config = _RECORD_CONFIG

    id: str | None = None
    x: Scalar | None = None
    y: Scalar | None = None
    width: Scalar | None = None
    height: Scalar | None = None


class CanvasSize(BaseModel):
    """Explicit canvas: pixel size and/or aspect ratio string."""

    model_config = _RECORD_CONFIG

    width: Scalar | None = None
    height: Scalar | None = None
    aspect: str | None = None


class Manifest(BaseModel):
    """A visual configuration to validate.

    Unknown top-level keys are preserved so that content produced by newer
    parsers survives a round trip through repairs.

    Example:
        >>> m = Manifest.model_validate({"colors": {"text": "#777777"}, "canvas": "16:9"})
        >>> m.colors.text
        '#777777'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    scene: str | None = None
    text: str | None = None
    colors: ColorSet | None = None
    typography: Typography | None = None
    layout: Layout | None = None
    motion: Motion | None = Field(
        default=None,
        validation_alias=AliasChoices("motion", "animation"),
    )
    effects: Effects | None = None
    elements: tuple[Element, ...] | None = None
    profile: str | BrandProfile | None = None
    brand_colors: tuple[Scalar, ...] | None = None
    canvas: str | CanvasSize | None = None
    malformed: dict[str, str] | None = Field(
        default=None,
        description="Fields whose values had the wrong shape, by field name, with their repr",
    )

    @classmethod
    def coerce(cls, value: Manifest | Mapping[str, Any]) -> Manifest:
        """Return value as a Manifest, validating plain mappings.

        Unlike ``model_validate`` this never rejects a mapping. A field whose
        value has the wrong shape (a number where text is expected, a string
        where a record or list is expected, ...) is left unset and recorded
        under ``malformed``, where the predicates report it.
        """
        if isinstance(value, Manifest):
            return value

        data = dict(value)
        malformed: dict[str, str] = {}
        while True:
            try:
                manifest = cls.model_validate(data)
                break
            except ValidationError as e:
                bad_fields = {
                    _FIELD_BY_KEY.get(err["loc"][0], err["loc"][0])
                    for err in e.errors()
                    if err["loc"]
                }
                bad_keys = [k for k in data if _FIELD_BY_KEY.get(k, k) in bad_fields]
                for key in bad_keys or list(data):
                    malformed[_FIELD_BY_KEY.get(key, key)] = _describe(data.pop(key))

        if not malformed:
            return manifest
        logger.debug("Manifest fields left unset as malformed: %s", ", ".join(sorted(malformed)))
        merged = {**(manifest.malformed or {}), **malformed}
        return manifest.model_copy(update={"malformed": merged})

    def brand_palette(self) -> tuple[Scalar, ...]:
        """Brand colors in effect: the explicit list, else the embedded profile's palette."""
        if self.brand_colors:
            return self.brand_colors
        if isinstance(self.profile, BrandProfile):
            return self.profile.palette
        return ()


_FIELD_BY_KEY: dict[str, str] = {
    **{name: name for name in Manifest.model_fields},
    **{to_camel(name): name for name in Manifest.model_fields},
    "animation": "motion",
}

_MAX_DESCRIBED_LENGTH = 80


def _describe(value: object) -> str:
    text = repr(value)
    if len(text) > _MAX_DESCRIBED_LENGTH:
        return text[: _MAX_DESCRIBED_LENGTH - 3] + "..."
    return text


__all__ = [
    "COLOR_ROLES",
    "CanvasSize",
    "ColorSet",
    "Effects",
    "Element",
    "Layout",
    "Manifest",
    "Motion",
    "Scalar",
    "Typography",
]
