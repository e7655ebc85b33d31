"""Unit tests that do not require a running API or external services."""
from app.config import settings


def test_settings_load():
    """Settings load from environment (e.g. CI env vars)."""
    assert settings.API_V1_PREFIX == "/api/v1"
    assert settings.APP_NAME


def test_environment_flag():
    """Environment flags reflect ENVIRONMENT value."""
    assert settings.ENVIRONMENT.lower() in ("development", "test", "production")
    assert settings.is_development == (settings.ENVIRONMENT.lower() == "development")
    assert settings.is_production == (settings.ENVIRONMENT.lower() == "production")


def test_allowed_origins_parsed_to_list():
    assert isinstance(settings.ALLOWED_ORIGINS, list)
    assert all(origin == origin.strip() for origin in settings.ALLOWED_ORIGINS)
