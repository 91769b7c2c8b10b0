"""Brand profile model."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BrandProfile(BaseModel):
    """Brand constraints supplied by the caller.

    The validator only reads profiles. Callers must clear validator caches
    after changing the profile a manifest refers to.

    Attributes:
        name: Profile identifier
        palette: Allowed colors, in preference order
        fonts: Allowed font families (matched case-insensitively as substrings)
        minimum_contrast: Minimum text/background contrast ratio
        layout_grid: Optional column count of the brand layout grid
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str | None = Field(default=None, description="Profile identifier")
    palette: tuple[str | int | float, ...] = Field(
        default=(),
        validation_alias=AliasChoices("palette", "colors"),
        description="Allowed colors",
    )
    fonts: tuple[str, ...] = Field(default=(), description="Allowed font families")
    minimum_contrast: float = Field(
        default=4.5,
        ge=1.0,
        le=21.0,
        validation_alias=AliasChoices("minimum_contrast", "minimumContrast", "contrastRatio"),
        description="Minimum text/background contrast ratio (WCAG AA default)",
    )
    layout_grid: int | None = Field(
        default=None,
        gt=0,
        description="Brand layout grid column count",
    )


__all__ = ["BrandProfile"]
