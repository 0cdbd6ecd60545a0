"""
Centralized configuration for the AKA backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced (e.g., SUPABASE_*, AZURE_*, AUTH_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "AKA Platform API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Storage: "supabase" for production, "memory" for local development
    storage_backend: str = "supabase"

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""  # direct Postgres URI, used by run_migrations.py

    # Bearer token verification
    auth_jwt_secret: str = ""
    auth_jwt_algorithms: list[str] = ["HS256"]
    auth_jwks_url: str = ""
    auth_audience: str = ""
    auth_issuer: str = ""

    # Identity
    admin_emails: list[str] = []
    placeholder_email_domain: str = "example.com"

    # Azure AD / Microsoft Graph directory
    azure_tenant_id: str = ""
    azure_client_id: str = ""
    azure_client_secret: str = ""
    graph_api_url: str = "https://graph.microsoft.com/v1.0"
    graph_timeout_seconds: float = 10.0

    # Listings
    default_page_size: int = 10

    @property
    def directory_configured(self) -> bool:
        """Whether Microsoft Graph credentials are present."""
        return bool(
            self.azure_tenant_id and self.azure_client_id and self.azure_client_secret
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
