"""
Project repositories.

Two implementations of IProjectRepository:
- InMemoryProjectRepository: process-local storage for development and tests
- ProjectRepository: the ``projects`` and ``approval_records`` tables in Supabase

Mutations go through Postgres functions (see migrations/001_initial_schema.sql)
so that a project change and its approval record commit in one transaction.
"""

import logging
import threading
from datetime import datetime
from typing import Optional, Any

from postgrest.exceptions import APIError

from shared.repository import BaseRepository

from .exceptions import ProjectNotFoundError, ShortNameTakenError
from .models import (
    ApprovalAction,
    ApprovalInfo,
    ApprovalRecord,
    Project,
    ProjectStats,
    ProjectStatus,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _matches(project: Project, needle: str) -> bool:
    return any(
        needle in (value or "").lower()
        for value in (project.name, project.description, project.short_name, project.target_url)
    )


def _newest_first(projects: list[Project]) -> list[Project]:
    return sorted(projects, key=lambda p: p.stats.updated_at, reverse=True)


class InMemoryProjectRepository:
    """
    Project storage held in process memory.

    All checks run before either collection is touched, so a failed
    mutation leaves no project change and no approval record behind.
    """

    def __init__(self) -> None:
        self._projects: dict[str, Project] = {}
        self._records: list[ApprovalRecord] = []
        self._lock = threading.Lock()

    def get_by_id(self, project_id: str) -> Optional[Project]:
        project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    def get_by_short_name(self, short_name: str) -> Optional[Project]:
        wanted = short_name.lower()
        for project in self._projects.values():
            if project.short_name.lower() == wanted:
                return project.model_copy(deep=True)
        return None

    def get_many(self, project_ids: list[str]) -> list[Project]:
        return [
            self._projects[pid].model_copy(deep=True)
            for pid in dict.fromkeys(project_ids)
            if pid in self._projects
        ]

    def list_for_owner(self, identity_key: str) -> list[Project]:
        return _newest_first(
            [p.model_copy(deep=True) for p in self._projects.values() if p.is_owner(identity_key)]
        )

    def search(
        self,
        text: Optional[str],
        status: Optional[ProjectStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[Project], int]:
        needle = (text or "").strip().lower()
        matches = [
            p
            for p in self._projects.values()
            if (status is None or p.status == status) and (not needle or _matches(p, needle))
        ]
        ordered = _newest_first(matches)
        page = [p.model_copy(deep=True) for p in ordered[offset:offset + limit]]
        return page, len(matches)

    def list_all(self) -> list[Project]:
        return _newest_first([p.model_copy(deep=True) for p in self._projects.values()])

    def list_created_since(self, since: datetime) -> list[Project]:
        return [
            p.model_copy(deep=True)
            for p in self._projects.values()
            if p.stats.created_at >= since
        ]

    def create(self, project: Project, record: ApprovalRecord) -> Project:
        with self._lock:
            self._check_short_name(project)
            self._projects[project.id] = project.model_copy(deep=True)
            self._records.append(record)
        return project.model_copy(deep=True)

    def save(self, project: Project, record: ApprovalRecord) -> Project:
        with self._lock:
            stored = self._projects.get(project.id)
            if stored is None:
                raise ProjectNotFoundError(project.id)
            self._check_short_name(project)
            updated = project.model_copy(deep=True)
            updated.stats.click_count = stored.stats.click_count
            self._projects[project.id] = updated
            self._records.append(record)
        return updated.model_copy(deep=True)

    def delete(self, project_id: str, record: ApprovalRecord) -> None:
        with self._lock:
            if project_id not in self._projects:
                raise ProjectNotFoundError(project_id)
            del self._projects[project_id]
            self._records.append(record)

    def increment_clicks(self, project_id: str) -> int:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                raise ProjectNotFoundError(project_id)
            project.stats.click_count += 1
            return project.stats.click_count

    def replace_owner(self, old_owner: str, new_owner: str) -> int:
        wanted = old_owner.lower()
        changed = 0
        with self._lock:
            for project in self._projects.values():
                if any(owner.lower() == wanted for owner in project.owners):
                    project.owners = [
                        new_owner if owner.lower() == wanted else owner
                        for owner in project.owners
                    ]
                    changed += 1
        return changed

    def list_records(self, project_id: str) -> list[ApprovalRecord]:
        return sorted(
            (r for r in self._records if r.project_id == project_id),
            key=lambda r: r.created_at,
        )

    def _check_short_name(self, project: Project) -> None:
        wanted = project.short_name.lower()
        for other in self._projects.values():
            if other.id != project.id and other.short_name.lower() == wanted:
                raise ShortNameTakenError(project.short_name)


class ProjectRepository(BaseRepository[Project]):
    """
    Repository for the ``projects`` and ``approval_records`` tables.

    Reads use the table API; writes call transactional Postgres functions.
    Short-name uniqueness is enforced by a unique index on lower(short_name).
    """

    TABLE = "projects"
    RECORDS_TABLE = "approval_records"

    def get_by_id(self, project_id: str) -> Optional[Project]:
        result = self._db.table(self.TABLE).select("*").eq("id", project_id).execute()
        return self._map_to_project(result.data[0]) if result.data else None

    def get_by_short_name(self, short_name: str) -> Optional[Project]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .eq("short_name", short_name.lower())
            .execute()
        )
        return self._map_to_project(result.data[0]) if result.data else None

    def get_many(self, project_ids: list[str]) -> list[Project]:
        if not project_ids:
            return []
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .in_("id", list(dict.fromkeys(project_ids)))
            .execute()
        )
        return [self._map_to_project(row) for row in result.data]

    def list_for_owner(self, identity_key: str) -> list[Project]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .contains("owners", [identity_key])
            .order("updated_at", desc=True)
            .execute()
        )
        return [self._map_to_project(row) for row in result.data]

    def search(
        self,
        text: Optional[str],
        status: Optional[ProjectStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[Project], int]:
        query = self._db.table(self.TABLE).select("*", count="exact")
        if text and text.strip():
            query = query.or_(
                self._or_ilike(["name", "description", "short_name", "target_url"], text)
            )
        if status is not None:
            query = query.eq("status", status.value)

        result = (
            query.order("updated_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        projects = [self._map_to_project(row) for row in result.data]
        return projects, result.count or 0

    def list_all(self) -> list[Project]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .order("updated_at", desc=True)
            .execute()
        )
        return [self._map_to_project(row) for row in result.data]

    def list_created_since(self, since: datetime) -> list[Project]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .gte("created_at", self._format_timestamp(since))
            .execute()
        )
        return [self._map_to_project(row) for row in result.data]

    def create(self, project: Project, record: ApprovalRecord) -> Project:
        rows = self._call_mutation(
            "create_project_with_record",
            {"p_project": self._to_row(project), "p_record": self._record_to_row(record)},
            project,
        )
        return self._map_to_project(rows[0])

    def save(self, project: Project, record: ApprovalRecord) -> Project:
        rows = self._call_mutation(
            "save_project_with_record",
            {"p_project": self._to_row(project), "p_record": self._record_to_row(record)},
            project,
        )
        if not rows:
            raise ProjectNotFoundError(project.id)
        return self._map_to_project(rows[0])

    def delete(self, project_id: str, record: ApprovalRecord) -> None:
        result = self._db.rpc(
            "delete_project_with_record",
            {"p_project_id": project_id, "p_record": self._record_to_row(record)},
        ).execute()
        if not result.data:
            raise ProjectNotFoundError(project_id)

    def increment_clicks(self, project_id: str) -> int:
        result = self._db.rpc(
            "increment_project_clicks", {"p_project_id": project_id}
        ).execute()
        if result.data is None:
            raise ProjectNotFoundError(project_id)
        return int(result.data)

    def replace_owner(self, old_owner: str, new_owner: str) -> int:
        result = self._db.rpc(
            "replace_project_owner",
            {"p_old_owner": old_owner, "p_new_owner": new_owner},
        ).execute()
        return int(result.data or 0)

    def list_records(self, project_id: str) -> list[ApprovalRecord]:
        result = (
            self._db.table(self.RECORDS_TABLE)
            .select("*")
            .eq("project_id", project_id)
            .order("created_at")
            .execute()
        )
        return [self._map_to_record(row) for row in result.data]

    def _call_mutation(self, function: str, params: dict[str, Any], project: Project) -> list[dict]:
        try:
            result = self._db.rpc(function, params).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ShortNameTakenError(project.short_name) from e
            logger.error(f"{function} failed for project {project.id}: {e.message}")
            raise
        return result.data or []

    def _to_row(self, project: Project) -> dict[str, Any]:
        info = project.approval_info
        return {
            "id": project.id,
            "name": project.name,
            "description": project.description,
            "owners": project.owners,
            "short_name": project.short_name.lower(),
            "target_url": project.target_url,
            "status": project.status.value,
            "approved_by": info.approver if info else None,
            "approved_at": self._format_timestamp(info.approved_at) if info else None,
            "approval_comments": info.comments if info else None,
            "click_count": project.stats.click_count,
            "created_at": self._format_timestamp(project.created_at),
            "updated_at": self._format_timestamp(project.updated_at),
        }

    def _record_to_row(self, record: ApprovalRecord) -> dict[str, Any]:
        return {
            "id": record.id,
            "project_id": record.project_id,
            "action": record.action.value,
            "operator": record.operator,
            "previous_status": record.previous_status.value if record.previous_status else None,
            "new_status": record.new_status.value if record.new_status else None,
            "comments": record.comments,
            "created_at": self._format_timestamp(record.created_at),
        }

    def _map_to_project(self, row: dict[str, Any]) -> Project:
        created_at = self._parse_timestamp(row["created_at"])
        updated_at = self._parse_timestamp(row["updated_at"])
        approval_info = None
        if row.get("approved_by"):
            approval_info = ApprovalInfo(
                approver=row["approved_by"],
                approved_at=self._parse_timestamp(row["approved_at"]),
                comments=row.get("approval_comments"),
            )
        return Project(
            id=str(row["id"]),
            name=row["name"],
            description=row.get("description"),
            owners=list(row.get("owners") or []),
            short_name=row["short_name"],
            target_url=row["target_url"],
            status=ProjectStatus(row["status"]),
            approval_info=approval_info,
            stats=ProjectStats(
                click_count=row.get("click_count") or 0,
                created_at=created_at,
                updated_at=updated_at,
            ),
            created_at=created_at,
            updated_at=updated_at,
        )

    def _map_to_record(self, row: dict[str, Any]) -> ApprovalRecord:
        return ApprovalRecord(
            id=str(row["id"]),
            project_id=str(row["project_id"]),
            action=ApprovalAction(row["action"]),
            operator=row["operator"],
            previous_status=ProjectStatus(row["previous_status"]) if row.get("previous_status") else None,
            new_status=ProjectStatus(row["new_status"]) if row.get("new_status") else None,
            comments=row.get("comments"),
            created_at=self._parse_timestamp(row["created_at"]),
        )
