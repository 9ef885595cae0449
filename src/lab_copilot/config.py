"""Configuration management for Lab Copilot."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class LabCopilotSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    log_level: str = Field(default="INFO", validation_alias="LAB_COPILOT_LOG_LEVEL")
    seed_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(Path("seeds"),), validation_alias="LAB_COPILOT_SEED_PATHS"
    )
    default_seed: str = Field(
        default="methanol-distillation", validation_alias="LAB_COPILOT_DEFAULT_SEED"
    )
    tick_interval: float = Field(default=1.0, validation_alias="LAB_COPILOT_TICK_INTERVAL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "LAB_COPILOT_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("seed_paths", mode="before")
    @classmethod
    def _parse_seed_paths(cls, value):
        if value is None or value == "":
            return (Path("seeds"),)
        if isinstance(value, (list, tuple)):
            return tuple(Path(str(item)) for item in value)
        if isinstance(value, (str, Path)):
            parts = [part.strip() for part in str(value).split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts) or (Path("seeds"),)
        raise TypeError("LAB_COPILOT_SEED_PATHS must be a list of paths or a path-separated string")

    @field_validator("default_seed")
    @classmethod
    def _normalize_default_seed(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("LAB_COPILOT_DEFAULT_SEED must not be empty")
        return normalized

    @field_validator("tick_interval")
    @classmethod
    def _validate_tick_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("LAB_COPILOT_TICK_INTERVAL must be > 0")
        return value


@lru_cache(maxsize=1)
def get_settings() -> LabCopilotSettings:
    """Return cached settings instance."""

    settings = LabCopilotSettings()
    settings.seed_paths = tuple(path.expanduser().resolve() for path in settings.seed_paths)
    return settings


__all__ = ["LabCopilotSettings", "get_settings"]
