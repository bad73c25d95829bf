"""Observability configuration for mapping views."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"})


class MappingViewSettings(BaseSettings):
    """Flags controlling logging output."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    log_level: str = Field(default="WARNING", alias="MAPPING_VIEW_LOG_LEVEL")
    json_logs: bool = Field(default=False, alias="MAPPING_VIEW_JSON_LOGS")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings() -> MappingViewSettings:
    return MappingViewSettings()


__all__ = ["MappingViewSettings", "load_settings"]
