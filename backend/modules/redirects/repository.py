"""
Access log repositories.

- InMemoryAccessLogRepository: process-local storage for development and tests
- AccessLogRepository: the ``access_logs`` table in Supabase
"""

from datetime import datetime
from typing import Any

from shared.repository import BaseRepository

from .models import AccessLog


class InMemoryAccessLogRepository:
    """Access log storage held in process memory."""

    def __init__(self) -> None:
        self._entries: list[AccessLog] = []

    def append(self, entry: AccessLog) -> AccessLog:
        self._entries.append(entry)
        return entry

    def list_since(self, since: datetime) -> list[AccessLog]:
        return [e for e in self._entries if e.accessed_at >= since]


class AccessLogRepository(BaseRepository[AccessLog]):
    """Repository for the ``access_logs`` table."""

    TABLE = "access_logs"

    def append(self, entry: AccessLog) -> AccessLog:
        result = self._db.table(self.TABLE).insert(self._to_row(entry)).execute()
        return self._map_to_entry(result.data[0])

    def list_since(self, since: datetime) -> list[AccessLog]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .gte("accessed_at", self._format_timestamp(since))
            .execute()
        )
        return [self._map_to_entry(row) for row in result.data]

    def _to_row(self, entry: AccessLog) -> dict[str, Any]:
        row = entry.model_dump(exclude={"accessed_at"})
        row["accessed_at"] = self._format_timestamp(entry.accessed_at)
        return row

    def _map_to_entry(self, row: dict[str, Any]) -> AccessLog:
        return AccessLog(
            id=str(row["id"]),
            project_id=str(row["project_id"]),
            ip_address=row.get("ip_address"),
            user_agent=row.get("user_agent"),
            referrer=row.get("referrer"),
            country=row.get("country"),
            region=row.get("region"),
            city=row.get("city"),
            accessed_at=self._parse_timestamp(row["accessed_at"]),
        )
