"""Tests for shared/config.py."""

from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "AKA Platform API"
        assert settings.app_version == "0.1.0"
        assert settings.storage_backend == "supabase"
        assert settings.auth_jwt_algorithms == ["HS256"]
        assert settings.placeholder_email_domain == "example.com"
        assert settings.default_page_size == 10
        assert settings.graph_api_url == "https://graph.microsoft.com/v1.0"

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"STORAGE_BACKEND": "memory", "DEFAULT_PAGE_SIZE": "25"}):
            settings = Settings(_env_file=None)
            assert settings.storage_backend == "memory"
            assert settings.default_page_size == 25

    def test_loads_admin_emails_from_env(self):
        """List settings are read as JSON."""
        with patch.dict(os.environ, {"ADMIN_EMAILS": '["boss@example.com", "ops@example.com"]'}):
            settings = Settings(_env_file=None)
            assert settings.admin_emails == ["boss@example.com", "ops@example.com"]

    def test_loads_supabase_config_from_env(self):
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "test-service-key",
        }):
            settings = Settings(_env_file=None)
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_service_role_key == "test-service-key"

    def test_directory_configured_requires_all_azure_values(self):
        settings = Settings(_env_file=None, azure_tenant_id="t", azure_client_id="c")
        assert settings.directory_configured is False

        settings = Settings(
            _env_file=None,
            azure_tenant_id="t",
            azure_client_id="c",
            azure_client_secret="s",
        )
        assert settings.directory_configured is True


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        get_settings.cache_clear()
        assert isinstance(get_settings(), Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
