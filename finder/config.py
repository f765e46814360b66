"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogSettings(BaseModel):
    base_url: AnyHttpUrl = Field(
        default="http://localhost:5000/api",
        description="Root of the catalog API; queries go to <base_url>/business.",
    )
    status: str = Field(default="active", min_length=1)
    limit: int = Field(default=50, ge=1, le=500)
    request_timeout_seconds: float = Field(default=10, gt=0, le=120)
    max_attempts: int = Field(default=1, ge=1, le=5)
    retry_base_delay: float = Field(default=0.3, ge=0)

    def business_url(self) -> str:
        return f"{str(self.base_url).rstrip('/')}/business"


class TimingSettings(BaseModel):
    debounce_seconds: float = Field(default=0.3, ge=0, le=5)
    min_loading_seconds: float = Field(default=0.8, ge=0, le=10)


class FinderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    timing: TimingSettings = Field(default_factory=TimingSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        if isinstance(value, str) and value.strip():
            return value.strip().upper()
        return "INFO"


@lru_cache
def get_settings() -> FinderSettings:
    """Return cached settings instance."""

    return FinderSettings()


__all__ = [
    "CatalogSettings",
    "FinderSettings",
    "TimingSettings",
    "get_settings",
]
