"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
HS256 tokens, settings, in-memory stores, a fake directory client, wired
services and a TestClient whose dependencies point at all of the above.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
import jwt  # PyJWT
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import (
    ServiceContainer,
    get_analytics_service,
    get_auth_service,
    get_owner_directory,
    get_project_service,
    get_redirect_service,
    reset_container,
)
from modules.directory.exceptions import DirectoryUnavailableError
from modules.directory.models import DirectoryProfile
from shared.config import Settings, get_settings


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
ADMIN_EMAIL = "admin@example.com"


def create_test_token(
    identity_key: Optional[str] = "test-user-123",
    email: Optional[str] = "test@example.com",
    name: Optional[str] = "Test User",
    expired: bool = False,
    **extra_claims,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        identity_key: Value of the ``oid`` claim (omitted when None)
        email: Email claim (omitted when None)
        name: Display name claim (omitted when None)
        expired: If True, creates an expired token
        **extra_claims: Any additional claims

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "oid": identity_key,
        "email": email,
        "name": name,
        "exp": int(exp.timestamp()),
        "iat": int((now - timedelta(hours=2) if expired else now).timestamp()),
        **extra_claims,
    }
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def make_settings(**overrides) -> Settings:
    """Settings for tests: in-memory storage, HS256 secret, no Azure."""
    values = {
        "storage_backend": "memory",
        "auth_jwt_secret": TEST_JWT_SECRET,
        "admin_emails": [ADMIN_EMAIL],
        "placeholder_email_domain": "example.com",
        "azure_tenant_id": "",
        "azure_client_id": "",
        "azure_client_secret": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeDirectoryClient:
    """
    In-process IDirectoryClient.

    Profiles are keyed by id; find_by_id also matches user principal names
    and mail, like Graph does. Set ``fail`` to simulate an outage, or add
    keys to ``failing_ids`` to fail individual lookups.
    """

    def __init__(self, profiles: Optional[list[DirectoryProfile]] = None):
        self.profiles = {p.id: p for p in profiles or []}
        self.fail = False
        self.failing_ids: set[str] = set()
        self.lookups: list[str] = []

    def add(self, id: str, display_name: str, mail: Optional[str] = None, upn: Optional[str] = None) -> DirectoryProfile:
        profile = DirectoryProfile(
            id=id,
            display_name=display_name,
            mail=mail,
            user_principal_name=upn or mail,
        )
        self.profiles[id] = profile
        return profile

    async def find_by_query(self, text: str) -> list[DirectoryProfile]:
        if self.fail:
            raise DirectoryUnavailableError("directory down", status_code=503)
        needle = text.lower()
        return [
            p for p in self.profiles.values()
            if any((v or "").lower().startswith(needle) for v in (p.display_name, p.mail, p.user_principal_name))
        ][:20]

    async def find_by_id(self, identity_key: str) -> Optional[DirectoryProfile]:
        self.lookups.append(identity_key)
        if self.fail or identity_key in self.failing_ids:
            raise DirectoryUnavailableError("directory down", status_code=503)
        if identity_key in self.profiles:
            return self.profiles[identity_key]
        wanted = identity_key.lower()
        for profile in self.profiles.values():
            if wanted in ((profile.mail or "").lower(), (profile.user_principal_name or "").lower()):
                return profile
        return None


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def directory_client() -> FakeDirectoryClient:
    return FakeDirectoryClient()


@pytest.fixture
def container(settings, directory_client) -> ServiceContainer:
    """In-memory service container using the fake directory client."""
    container = ServiceContainer(settings)
    container._directory_client = directory_client
    return container


@pytest.fixture
def user_repository(container):
    return container.user_repository


@pytest.fixture
def project_repository(container):
    return container.project_repository


@pytest.fixture
def access_log_repository(container):
    return container.access_log_repository


@pytest.fixture
def owner_directory(container):
    return container.owner_directory


@pytest.fixture
def auth_service(container):
    return container.auth


@pytest.fixture
def project_service(container):
    return container.projects


@pytest.fixture
def redirect_service(container):
    return container.redirects


@pytest.fixture
def analytics_service(container):
    return container.analytics


@pytest.fixture
def app(container):
    """Create a fresh app wired to the in-memory container."""
    app = create_app()
    app.dependency_overrides[get_auth_service] = lambda: container.auth
    app.dependency_overrides[get_owner_directory] = lambda: container.owner_directory
    app.dependency_overrides[get_project_service] = lambda: container.projects
    app.dependency_overrides[get_redirect_service] = lambda: container.redirects
    app.dependency_overrides[get_analytics_service] = lambda: container.analytics
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization headers for a regular user."""
    return {"Authorization": f"Bearer {create_test_token()}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Authorization headers for an allow-listed admin."""
    token = create_test_token(identity_key="admin-oid", email=ADMIN_EMAIL, name="Admin User")
    return {"Authorization": f"Bearer {token}"}


def owner_headers(identity_key: str, email: str, name: str = "Owner") -> dict[str, str]:
    """Authorization headers for an arbitrary user."""
    token = create_test_token(identity_key=identity_key, email=email, name=name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_token():
    """Factory fixture wrapping create_test_token."""
    return create_test_token


@pytest.fixture
def make_headers():
    """Factory fixture wrapping owner_headers."""
    return owner_headers
