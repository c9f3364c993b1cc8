"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from ..config import DEFAULT_API_URL, Settings, get_settings, load_settings


def test_defaults(monkeypatch):
    for name in ("LFC_API_URL", "LFC_MAX_RETRIES", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.max_retries == 2
    assert settings.catalog_page_size == 6
    assert settings.cors_origins == ["http://localhost:5173"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LFC_API_URL", " https://lms.example.com/ ")
    monkeypatch.setenv("LFC_MAX_RETRIES", "4")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com,")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.api_url == "https://lms.example.com"
    assert settings.max_retries == 4
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.log_level == "DEBUG"


def test_invalid_values():
    with pytest.raises(ValidationError):
        Settings(api_url="  ")
    with pytest.raises(ValidationError):
        Settings(request_timeout=0)


def test_get_settings_is_cached(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("LFC_API_URL", "http://first.test")
    first = get_settings()
    monkeypatch.setenv("LFC_API_URL", "http://second.test")
    assert get_settings() is first
    get_settings.cache_clear()
