"""
Analytics service implementation.

Aggregates in Python over the rows inside the window; the stores only
filter by time.
"""

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from modules.auth.interfaces import IUserRepository
from modules.directory.models import UNKNOWN_USER_NAME
from modules.projects.interfaces import IProjectRepository
from modules.redirects.interfaces import IAccessLogRepository

from .exceptions import InvalidWindowError
from .models import TopOwner, TopShortUrl, TrendPoint

MIN_DAYS = 1
MAX_DAYS = 365
TOP_LIMIT = 10


def _daily_counts(timestamps: Iterable[datetime]) -> list[TrendPoint]:
    counts = Counter(ts.astimezone(timezone.utc).date().isoformat() for ts in timestamps)
    return [TrendPoint(date=day, count=counts[day]) for day in sorted(counts)]


class AnalyticsService:
    """Implements IAnalyticsService."""

    def __init__(
        self,
        projects: IProjectRepository,
        access_logs: IAccessLogRepository,
        users: IUserRepository,
        placeholder_email_domain: str = "example.com",
    ):
        self._projects = projects
        self._access_logs = access_logs
        self._users = users
        self._placeholder_domain = placeholder_email_domain

    async def project_trend(self, days: int = 30) -> list[TrendPoint]:
        """Projects created per UTC day, oldest day first."""
        since = self._window_start(days)
        return _daily_counts(p.stats.created_at for p in self._projects.list_created_since(since))

    async def click_trend(self, days: int = 30) -> list[TrendPoint]:
        """Redirects per UTC day, oldest day first."""
        since = self._window_start(days)
        return _daily_counts(e.accessed_at for e in self._access_logs.list_since(since))

    async def top_short_urls(self, days: int = 30) -> list[TopShortUrl]:
        """
        Most-clicked short links within the window.

        Clicks on projects that have since been deleted are not reported.
        """
        since = self._window_start(days)
        clicks = Counter(e.project_id for e in self._access_logs.list_since(since))
        projects = {p.id: p for p in self._projects.get_many(list(clicks))}

        ranked = sorted(
            (pid for pid in clicks if pid in projects),
            key=lambda pid: (-clicks[pid], projects[pid].short_name),
        )
        return [
            TopShortUrl(
                short_name=projects[pid].short_name,
                target_url=projects[pid].target_url,
                click_count=clicks[pid],
            )
            for pid in ranked[:TOP_LIMIT]
        ]

    async def top_owners(self, days: int = 30) -> list[TopOwner]:
        """
        Owners ranked by projects created within the window.

        Every owner of a project is credited once for it. Owners with no
        local user record are reported with placeholder display data.
        """
        since = self._window_start(days)
        counts = Counter(
            owner
            for project in self._projects.list_created_since(since)
            for owner in dict.fromkeys(project.owners)
        )
        ranked = sorted(counts, key=lambda key: (-counts[key], key))[:TOP_LIMIT]
        users = {u.identity_key: u for u in self._users.get_many_by_identity_keys(ranked)}

        result = []
        for key in ranked:
            user = users.get(key)
            result.append(
                TopOwner(
                    identity_key=key,
                    display_name=user.display_name if user else UNKNOWN_USER_NAME,
                    email=user.email if user else f"unknown@{self._placeholder_domain}",
                    project_count=counts[key],
                )
            )
        return result

    def _window_start(self, days: int, now: Optional[datetime] = None) -> datetime:
        if not MIN_DAYS <= days <= MAX_DAYS:
            raise InvalidWindowError(days, MIN_DAYS, MAX_DAYS)
        now = now or datetime.now(timezone.utc)
        return now - timedelta(days=days)
