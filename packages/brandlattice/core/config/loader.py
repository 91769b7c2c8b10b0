"""Configuration and input loading with JSON and YAML support."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from brandlattice.core.config.models import AppConfig
from brandlattice.core.errors import ManifestLoadError
from brandlattice.core.models import BrandProfile, Manifest
from brandlattice.core.utils.json import read_json
from brandlattice.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)


_FORMATS_BY_SUFFIX = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def detect_format(file_path: Path | str) -> str:
    """Map a file extension to ``"json"`` or ``"yaml"``.

    Raises:
        ValueError: For any other extension

    Example:
        >>> detect_format("brand.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()
    fmt = _FORMATS_BY_SUFFIX.get(suffix)
    if fmt is None:
        raise ValueError(f"Unsupported config format: {suffix or '<none>'}")
    return fmt


def _read_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        document = yaml.safe_load(f)
    # An empty file decodes to None
    return {} if document is None else document


def load_config(path: str | Path) -> Any:
    """Read a JSON or YAML document from disk.

    Returns:
        The decoded document; an empty YAML file yields ``{}``

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: For an unsupported extension or undecodable content
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    if detect_format(path) == "json":
        try:
            return read_json(path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        return _read_yaml(path)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Read the app config, falling back to defaults when the file is absent.

    Args:
        path: Config file; defaults to ``brandlattice.json`` in the working directory

    Raises:
        pydantic.ValidationError: If a setting is out of range
    """
    path = Path(path) if path is not None else AppConfig.default_path()

    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return AppConfig()

    return AppConfig.model_validate(load_config(path))


def configure_logging(config: AppConfig | None = None) -> None:
    """Apply the logging section of an app config (the default config if None)."""
    config = config if config is not None else load_app_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


def _load_mapping(path: str | Path) -> dict[str, Any]:
    try:
        document = load_config(path)
    except (FileNotFoundError, ValueError) as e:
        raise ManifestLoadError(str(path), str(e)) from e

    if not isinstance(document, dict):
        raise ManifestLoadError(str(path), f"expected a mapping, got {type(document).__name__}")
    return document


def load_manifest(path: str | Path) -> Manifest:
    """Load a manifest from a JSON or YAML file.

    Fields of the wrong shape do not fail the load; they are recorded on the
    manifest (see ``Manifest.coerce``) and reported when it is validated.

    Raises:
        ManifestLoadError: If the file is missing, unreadable or not a mapping
    """
    return Manifest.coerce(_load_mapping(path))


def load_brand_profile(path: str | Path) -> BrandProfile:
    """Load a brand profile from a JSON or YAML file.

    Raises:
        ManifestLoadError: If the file is missing, unreadable or not a profile
    """
    document = _load_mapping(path)
    try:
        return BrandProfile.model_validate(document)
    except ValidationError as e:
        raise ManifestLoadError(str(path), f"invalid brand profile: {e}") from e


__all__ = [
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_brand_profile",
    "load_config",
    "load_manifest",
]
