"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from finder.config import CatalogSettings, FinderSettings, TimingSettings, get_settings


def test_defaults_match_catalog_contract():
    settings = FinderSettings()
    assert settings.catalog.limit == 50
    assert settings.catalog.status == "active"
    assert settings.catalog.business_url() == "http://localhost:5000/api/business"
    assert settings.timing.debounce_seconds == 0.3
    assert settings.timing.min_loading_seconds == 0.8


def test_nested_env_overrides(monkeypatch):
    monkeypatch.setenv("FINDER_CATALOG__BASE_URL", "https://directory.example/api/")
    monkeypatch.setenv("FINDER_CATALOG__LIMIT", "20")
    monkeypatch.setenv("FINDER_TIMING__DEBOUNCE_SECONDS", "0.5")
    monkeypatch.setenv("FINDER_LOG_LEVEL", " debug ")

    settings = FinderSettings()
    assert settings.catalog.business_url() == "https://directory.example/api/business"
    assert settings.catalog.limit == 20
    assert settings.timing.debounce_seconds == 0.5
    assert settings.log_level == "DEBUG"


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        CatalogSettings(limit=0)
    with pytest.raises(ValidationError):
        TimingSettings(debounce_seconds=-1)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
