"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The storage backend (Supabase or in-memory) and the directory backend
(Microsoft Graph or the local user store) are chosen here from settings.
"""

import logging
from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.analytics.interfaces import IAnalyticsService
    from modules.auth.interfaces import IAuthService, IUserRepository
    from modules.directory.interfaces import IDirectoryClient
    from modules.directory.service import OwnerDirectoryService
    from modules.projects.interfaces import IProjectRepository, IProjectService
    from modules.redirects.interfaces import IAccessLogRepository, IRedirectService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._user_repository: "IUserRepository | None" = None
        self._project_repository: "IProjectRepository | None" = None
        self._access_log_repository: "IAccessLogRepository | None" = None
        self._directory_client: "IDirectoryClient | None" = None
        self._owner_directory: "OwnerDirectoryService | None" = None
        self._auth_service: "IAuthService | None" = None
        self._project_service: "IProjectService | None" = None
        self._redirect_service: "IRedirectService | None" = None
        self._analytics_service: "IAnalyticsService | None" = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def uses_memory_storage(self) -> bool:
        return self._settings.storage_backend == "memory"

    @property
    def user_repository(self) -> "IUserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            if self.uses_memory_storage:
                from modules.auth.repository import InMemoryUserRepository
                self._user_repository = InMemoryUserRepository()
            else:
                from modules.auth.repository import UserRepository
                from shared.database import get_supabase_client
                self._user_repository = UserRepository(get_supabase_client())
        return self._user_repository

    @property
    def project_repository(self) -> "IProjectRepository":
        """Get the project repository instance."""
        if self._project_repository is None:
            if self.uses_memory_storage:
                from modules.projects.repository import InMemoryProjectRepository
                self._project_repository = InMemoryProjectRepository()
            else:
                from modules.projects.repository import ProjectRepository
                from shared.database import get_supabase_client
                self._project_repository = ProjectRepository(get_supabase_client())
        return self._project_repository

    @property
    def access_log_repository(self) -> "IAccessLogRepository":
        """Get the access log repository instance."""
        if self._access_log_repository is None:
            if self.uses_memory_storage:
                from modules.redirects.repository import InMemoryAccessLogRepository
                self._access_log_repository = InMemoryAccessLogRepository()
            else:
                from modules.redirects.repository import AccessLogRepository
                from shared.database import get_supabase_client
                self._access_log_repository = AccessLogRepository(get_supabase_client())
        return self._access_log_repository

    @property
    def directory_client(self) -> "IDirectoryClient":
        """Get the directory client: Microsoft Graph when configured, else local users."""
        if self._directory_client is None:
            if self._settings.directory_configured:
                from modules.directory.client import GraphDirectoryClient
                self._directory_client = GraphDirectoryClient(
                    tenant_id=self._settings.azure_tenant_id,
                    client_id=self._settings.azure_client_id,
                    client_secret=self._settings.azure_client_secret,
                    base_url=self._settings.graph_api_url,
                    timeout=self._settings.graph_timeout_seconds,
                )
            else:
                from modules.directory.client import LocalDirectoryClient
                logger.info("Azure directory not configured; using local user directory")
                self._directory_client = LocalDirectoryClient(self.user_repository)
        return self._directory_client

    @property
    def owner_directory(self) -> "OwnerDirectoryService":
        """Get the owner directory service instance."""
        if self._owner_directory is None:
            from modules.directory.service import OwnerDirectoryService
            self._owner_directory = OwnerDirectoryService(
                client=self.directory_client,
                users=self.user_repository,
                placeholder_email_domain=self._settings.placeholder_email_domain,
            )
        return self._owner_directory

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                self.user_repository,
                self._settings,
                owners=self.project_repository,
            )
        return self._auth_service

    @property
    def projects(self) -> "IProjectService":
        """Get the project service instance."""
        if self._project_service is None:
            from modules.projects.service import ProjectService
            self._project_service = ProjectService(
                repository=self.project_repository,
                directory=self.owner_directory,
                users=self.user_repository,
                default_page_size=self._settings.default_page_size,
            )
        return self._project_service

    @property
    def redirects(self) -> "IRedirectService":
        """Get the redirect service instance."""
        if self._redirect_service is None:
            from modules.redirects.service import RedirectService
            self._redirect_service = RedirectService(
                projects=self.project_repository,
                access_logs=self.access_log_repository,
            )
        return self._redirect_service

    @property
    def analytics(self) -> "IAnalyticsService":
        """Get the analytics service instance."""
        if self._analytics_service is None:
            from modules.analytics.service import AnalyticsService
            self._analytics_service = AnalyticsService(
                projects=self.project_repository,
                access_logs=self.access_log_repository,
                users=self.user_repository,
                placeholder_email_domain=self._settings.placeholder_email_domain,
            )
        return self._analytics_service

    async def aclose(self) -> None:
        """Release resources held by the directory client."""
        close = getattr(self._directory_client, "aclose", None)
        if close is not None:
            await close()

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._user_repository = None
        self._project_repository = None
        self._access_log_repository = None
        self._directory_client = None
        self._owner_directory = None
        self._auth_service = None
        self._project_service = None
        self._redirect_service = None
        self._analytics_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_owner_directory() -> "OwnerDirectoryService":
    """FastAPI dependency for owner directory service."""
    return get_container().owner_directory


def get_project_service() -> "IProjectService":
    """FastAPI dependency for project service."""
    return get_container().projects


def get_redirect_service() -> "IRedirectService":
    """FastAPI dependency for redirect service."""
    return get_container().redirects


def get_analytics_service() -> "IAnalyticsService":
    """FastAPI dependency for analytics service."""
    return get_container().analytics
