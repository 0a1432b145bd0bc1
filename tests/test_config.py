import pytest
from pydantic import ValidationError

from skinsim.config import Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.allowed_origins == ["*"]
    assert settings.jpeg_quality == 90
    assert settings.region_stride == 4
    assert settings.log_level == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv("SKINSIM_ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("SKINSIM_JPEG_QUALITY", "75")
    monkeypatch.setenv("SKINSIM_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.allowed_origins == ["https://a.example", "https://b.example"]
    assert settings.jpeg_quality == 75
    assert settings.log_level == "DEBUG"


def test_invalid_quality(monkeypatch):
    monkeypatch.setenv("SKINSIM_JPEG_QUALITY", "150")
    with pytest.raises(ValidationError):
        Settings.from_env()


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


@pytest.mark.parametrize("level", ["verbose", "trace", ""])
def test_unknown_log_level_rejected(level):
    with pytest.raises(ValidationError):
        Settings(log_level=level)


def test_unknown_log_level_from_env(monkeypatch):
    monkeypatch.setenv("SKINSIM_LOG_LEVEL", "verbose")
    with pytest.raises(ValidationError):
        Settings.from_env()


def test_log_level_is_normalised():
    assert Settings(log_level=" warning ").log_level == "WARNING"
