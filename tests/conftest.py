"""Shared pytest fixtures for brandlattice tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from brandlattice.core.models import BrandProfile, Manifest
from brandlattice.core.validation import LatticeValidator

# ============================================================================
# Manifest Fixtures
# ============================================================================


@pytest.fixture
def valid_manifest_data() -> dict[str, Any]:
    """A fully specified manifest that passes every predicate."""
    return {
        "scene": "quote",
        "text": "Ship it",
        "colors": {
            "primary": "#1a1a1a",
            "background": "#ffffff",
            "text": "#111111",
            "accent": "#0066cc",
        },
        "typography": {"fontFamily": "Inter, sans-serif", "fontSize": "32px", "fontWeight": 600},
        "layout": {"type": "centered", "x": "50%", "y": "50%"},
        "animation": {"type": "fade", "duration": "0.8s", "easing": "ease-out"},
        "canvas": "16:9",
    }


@pytest.fixture
def valid_manifest(valid_manifest_data: dict[str, Any]) -> Manifest:
    return Manifest.model_validate(valid_manifest_data)


@pytest.fixture
def low_contrast_manifest() -> Manifest:
    """Gray text on a slightly lighter gray background."""
    return Manifest.model_validate({"colors": {"text": "#777777", "background": "#888888"}})


@pytest.fixture
def adversarial_manifest_data() -> dict[str, Any]:
    """A manifest that violates every predicate at once."""
    return {
        "text": "   ",
        "colors": {"text": "not-a-color", "background": "#fefefe", "primary": "#ff00ff"},
        "brandColors": ["#003366"],
        "typography": {"fontSize": -12},
        "motion": {"type": "slide", "duration": float("nan"), "easing": "wobbly"},
        "elements": [{"x": 0, "y": 0}, {"x": 10, "y": 10}],
        "canvas": "0:0",
    }


# ============================================================================
# Brand Fixtures
# ============================================================================


@pytest.fixture
def brand_profile() -> BrandProfile:
    return BrandProfile(
        name="acme",
        palette=("#003366", "#ffffff", "#000000"),
        fonts=("Helvetica",),
        minimum_contrast=4.5,
    )


# ============================================================================
# Validator Fixtures
# ============================================================================


@pytest.fixture
def validator() -> LatticeValidator:
    """Fresh validator with an empty cache."""
    return LatticeValidator()


# ============================================================================
# File Fixtures
# ============================================================================


@pytest.fixture
def write_json_file(tmp_path: Path):
    """Factory writing a document to a JSON file under tmp_path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_yaml_file(tmp_path: Path):
    """Factory writing a document to a YAML file under tmp_path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write
