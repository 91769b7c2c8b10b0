"""Configuration management for brandlattice."""

from brandlattice.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_brand_profile,
    load_config,
    load_manifest,
)
from brandlattice.core.config.models import AppConfig, LoggingConfig, ValidatorConfig

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "load_manifest",
    "load_brand_profile",
    "detect_format",
    "configure_logging",
    # Models
    "AppConfig",
    "LoggingConfig",
    "ValidatorConfig",
]
