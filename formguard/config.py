"""Application settings for FormGuard: layered config from env, YAML, and defaults."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"

DEFAULT_FIELD_MAX_LENGTHS: dict[str, int] = {
    "name": 100,
    "email": 255,
    "message": 5000,
}


class Settings(BaseSettings):
    """Global settings, loadable from FG_-prefixed env vars or a YAML file."""

    model_config = SettingsConfigDict(env_prefix="FG_", env_nested_delimiter="__")

    app_name: str = "FormGuard"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    api_key: str = ""

    field_max_lengths: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_FIELD_MAX_LENGTHS),
    )

    rate_limit_max_submissions: int = Field(default=5, ge=1)
    rate_limit_window_seconds: float = Field(default=60.0, gt=0)

    names_database_enabled: bool = True

    max_request_body_bytes: int = Field(default=64 * 1024, ge=1024)
    cors_allowed_origins: list[str] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError(f"Invalid log_level: {v!r}")
        return v

    @field_validator("field_max_lengths")
    @classmethod
    def _merge_field_caps(cls, v: dict[str, int]) -> dict[str, int]:
        merged = {**DEFAULT_FIELD_MAX_LENGTHS, **{k.lower(): n for k, n in v.items()}}
        for field, cap in merged.items():
            if cap < 1:
                raise ValueError(f"field_max_lengths[{field!r}] must be positive")
        return merged

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> Settings:
        config_path = Path(path) if path else _DEFAULT_CONFIG_PATH
        overrides: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as fh:
                raw = yaml.safe_load(fh) or {}
            if not isinstance(raw, dict):
                logger.warning("YAML config at %s is not a mapping, ignoring", config_path)
                raw = {}
            overrides = raw
        else:
            logger.debug("Config file not found at %s, using defaults", config_path)
        return cls(**overrides)


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Factory: returns a Settings instance (from YAML if path given, else env+defaults)."""
    if config_path:
        return Settings.from_yaml(config_path)
    return Settings()
