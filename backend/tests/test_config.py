"""
AuthGate Backend — Settings Tests
==================================
"""

import pytest
from pydantic import ValidationError

from authgate.config import DEFAULT_JWT_SECRET, Settings

STRONG_SECRET = "x" * 40


def test_development_tolerates_default_secret():
    Settings(environment="development", jwt_secret=DEFAULT_JWT_SECRET).validate_required_for_production()


def test_production_rejects_default_secret():
    settings = Settings(environment="Production", jwt_secret=DEFAULT_JWT_SECRET)

    with pytest.raises(ValueError, match="JWT_SECRET"):
        settings.validate_required_for_production()


def test_production_rejects_short_secret_and_insecure_cookie():
    settings = Settings(environment="production", jwt_secret="short", cookie_secure=False)

    with pytest.raises(ValueError) as exc_info:
        settings.validate_required_for_production()
    assert "32 characters" in str(exc_info.value)
    assert "COOKIE_SECURE" in str(exc_info.value)


def test_production_accepts_strong_config():
    Settings(environment="production", jwt_secret=STRONG_SECRET).validate_required_for_production()


def test_log_level_is_normalized():
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(log_level="loud")


def test_cors_origins_are_split():
    settings = Settings(cors_origins="https://a.example, https://b.example,")
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
