"""
Redirect service implementation.

The anonymous hot path: short name -> approved project -> target URL.
Visit recording runs after the redirect target is known and its failures
are logged rather than raised, so a broken counter or log table never
turns a valid short link into an error.
"""

import logging
import uuid

from modules.projects.interfaces import IProjectRepository
from modules.projects.models import Project, ProjectStatus

from .exceptions import ShortUrlNotFoundError
from .interfaces import IAccessLogRepository
from .models import AccessLog, VisitInfo

logger = logging.getLogger(__name__)


class RedirectService:
    """Implements IRedirectService."""

    def __init__(self, projects: IProjectRepository, access_logs: IAccessLogRepository):
        self._projects = projects
        self._access_logs = access_logs

    async def resolve(self, short_name: str) -> Project:
        name = (short_name or "").strip().lstrip("/")
        if not name:
            raise ShortUrlNotFoundError(short_name)

        project = self._projects.get_by_short_name(name)
        if project is None or project.status != ProjectStatus.APPROVED:
            raise ShortUrlNotFoundError(name)
        return project

    async def record_visit(self, project_id: str, visit: VisitInfo) -> None:
        try:
            self._projects.increment_clicks(project_id)
        except Exception:
            logger.warning(f"Failed to increment clicks for project {project_id}", exc_info=True)

        try:
            self._access_logs.append(
                AccessLog(
                    id=str(uuid.uuid4()),
                    project_id=project_id,
                    ip_address=visit.ip_address,
                    user_agent=visit.user_agent,
                    referrer=visit.referrer,
                )
            )
        except Exception:
            logger.warning(f"Failed to append access log for project {project_id}", exc_info=True)

    async def follow(self, short_name: str, visit: VisitInfo) -> str:
        """Resolve a short name, record the visit and return the target URL."""
        project = await self.resolve(short_name)
        await self.record_visit(project.id, visit)
        return project.target_url
