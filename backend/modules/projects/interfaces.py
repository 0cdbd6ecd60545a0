"""
Projects module interfaces.

The redirect and analytics modules depend on IProjectRepository for
reads and click counting; routes depend on IProjectService.
"""

from datetime import datetime
from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    ApprovalRecord,
    Project,
    ProjectExportRow,
    ProjectListResponse,
    ProjectRequest,
    ProjectResponse,
    ProjectStatus,
)


@runtime_checkable
class IProjectRepository(Protocol):
    """
    Storage contract for projects and their approval records.

    Every mutation takes the ApprovalRecord describing it and must persist
    both or neither. Short names are unique case-insensitively; a clash
    raises ShortNameTakenError.
    """

    def get_by_id(self, project_id: str) -> Optional[Project]:
        ...

    def get_by_short_name(self, short_name: str) -> Optional[Project]:
        """Case-insensitive lookup."""
        ...

    def get_many(self, project_ids: list[str]) -> list[Project]:
        ...

    def list_for_owner(self, identity_key: str) -> list[Project]:
        """Projects listing ``identity_key`` as owner, newest update first."""
        ...

    def search(
        self,
        text: Optional[str],
        status: Optional[ProjectStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[Project], int]:
        """
        Filtered page of all projects, newest update first.

        Returns:
            (page of projects, total matching count)
        """
        ...

    def list_all(self) -> list[Project]:
        ...

    def list_created_since(self, since: datetime) -> list[Project]:
        ...

    def create(self, project: Project, record: ApprovalRecord) -> Project:
        ...

    def save(self, project: Project, record: ApprovalRecord) -> Project:
        """Replace a stored project. The stored click count is kept."""
        ...

    def delete(self, project_id: str, record: ApprovalRecord) -> None:
        ...

    def increment_clicks(self, project_id: str) -> int:
        """Atomically add one click; returns the new count."""
        ...

    def replace_owner(self, old_owner: str, new_owner: str) -> int:
        """
        Rewrite owner entries equal to ``old_owner`` (case-insensitive) to
        ``new_owner`` across all projects. Status, timestamps and approval
        records are untouched.

        Returns:
            Number of projects changed
        """
        ...

    def list_records(self, project_id: str) -> list[ApprovalRecord]:
        """Approval records for a project, oldest first."""
        ...


@runtime_checkable
class IProjectService(Protocol):
    """Project lifecycle operations exposed to the API layer."""

    async def create_project(
        self, request: ProjectRequest, actor: AuthenticatedUser
    ) -> ProjectResponse:
        ...

    async def update_project(
        self, project_id: str, request: ProjectRequest, actor: AuthenticatedUser
    ) -> ProjectResponse:
        ...

    async def delete_project(self, project_id: str, actor: AuthenticatedUser) -> None:
        ...

    async def get_project(self, project_id: str, actor: AuthenticatedUser) -> ProjectResponse:
        ...

    async def list_projects_for_owner(self, actor: AuthenticatedUser) -> list[ProjectResponse]:
        ...

    async def list_projects_for_admin(
        self,
        search: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> ProjectListResponse:
        ...

    async def decide(
        self,
        project_id: str,
        decision: str,
        comments: Optional[str],
        approver: AuthenticatedUser,
    ) -> ProjectResponse:
        ...

    async def get_history(self, project_id: str) -> list[ApprovalRecord]:
        ...

    async def export_rows(self) -> list[ProjectExportRow]:
        ...
