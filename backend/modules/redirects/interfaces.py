"""
Redirects module interfaces.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from modules.projects.models import Project

from .models import AccessLog, VisitInfo


@runtime_checkable
class IAccessLogRepository(Protocol):
    """Append-only storage for redirect events."""

    def append(self, entry: AccessLog) -> AccessLog:
        ...

    def list_since(self, since: datetime) -> list[AccessLog]:
        """Entries with accessed_at >= since."""
        ...


@runtime_checkable
class IRedirectService(Protocol):
    """Interface for the anonymous redirect path."""

    async def resolve(self, short_name: str) -> Project:
        """
        Find the approved project behind a short name.

        Raises:
            ShortUrlNotFoundError: If missing, empty, or not approved
        """
        ...

    async def record_visit(self, project_id: str, visit: VisitInfo) -> None:
        """Increment the click count and append an access log. Never raises."""
        ...
