"""Tests for shared/config.py."""

import pytest
from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "Postly API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "0.0.0.0"
        assert settings.app_version == "0.1.0"
        assert settings.frontend_url == "http://localhost:5173"
        assert settings.storage_bucket == "attachments"
        assert settings.jwt_algorithm == "HS256"
        assert settings.session_cookie_name == "token"

    def test_avatar_extensions(self):
        settings = Settings(_env_file=None)
        assert settings.avatar_extensions == ["jpg", "jpeg", "png"]

    def test_session_lasts_a_week(self):
        settings = Settings(_env_file=None)
        assert settings.access_token_expire_minutes == 7 * 24 * 60

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_secrets_from_env(self):
        """Settings should load secrets from environment variables."""
        with patch.dict(os.environ, {
            "JWT_SECRET": "test-jwt-secret",
            "STRIPE_SECRET_KEY": "sk_test_env",
        }):
            settings = Settings(_env_file=None)
            assert settings.jwt_secret == "test-jwt-secret"
            assert settings.stripe_secret_key == "sk_test_env"

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "test-service-key",
        }):
            settings = Settings(_env_file=None)
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_service_role_key == "test-service-key"

    def test_invalid_port(self):
        with patch.dict(os.environ, {"PORT": "not-a-number"}):
            with pytest.raises(ValueError):
                Settings(_env_file=None)


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
