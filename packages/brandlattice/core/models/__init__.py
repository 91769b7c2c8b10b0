"""Manifest and brand profile models."""

from brandlattice.core.models.brand import BrandProfile
from brandlattice.core.models.manifest import (
    COLOR_ROLES,
    CanvasSize,
    ColorSet,
    Effects,
    Element,
    Layout,
    Manifest,
    Motion,
    Scalar,
    Typography,
)

__all__ = [
    "COLOR_ROLES",
    "BrandProfile",
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
