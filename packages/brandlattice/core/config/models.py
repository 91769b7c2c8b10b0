"""Application configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from brandlattice.core.utils.logging import DEFAULT_FORMAT


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = DEFAULT_FORMAT
    structured: bool = Field(default=False, description="Emit one JSON object per record")
    filename: str | None = Field(default=None, description="Log file; stderr when unset")


class ValidatorConfig(BaseModel):
    """Validator settings."""

    ground_state_variant: str = Field(
        default="default",
        pattern="^(default|dark|accessible)$",
        description="Ground state that escape paths converge to",
    )
    max_concurrency: int = Field(
        default=8, ge=1, le=64, description="Concurrent validations in batch mode"
    )


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    validator: ValidatorConfig = ValidatorConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("brandlattice.json")


__all__ = [
    "AppConfig",
    "LoggingConfig",
    "ValidatorConfig",
]
