"""
Project service implementation.

Owns the project lifecycle: validation, ownership checks, the approval
state machine and owner resolution for every response. Each mutation is
persisted together with its approval record in one repository call.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from modules.auth.interfaces import IUserRepository
from modules.directory.service import OwnerDirectoryService
from shared.models import AuthenticatedUser

from .approval import apply_action, parse_decision
from .exceptions import (
    NotProjectOwnerError,
    ProjectAccessDeniedError,
    ProjectNotFoundError,
    ShortNameTakenError,
)
from .interfaces import IProjectRepository
from .models import (
    ApprovalAction,
    ApprovalRecord,
    Project,
    ProjectExportRow,
    ProjectListResponse,
    ProjectRequest,
    ProjectResponse,
    ProjectStats,
    ProjectStatus,
)
from .validation import (
    normalize_short_name,
    validate_name,
    validate_owner_count,
    validate_target_url,
)

logger = logging.getLogger(__name__)


class ProjectService:
    """
    Service for managing short-link projects.

    Implements IProjectService. Admin-only operations (decide, admin
    listing, history, export) rely on the route layer to enforce the role.
    """

    MAX_PAGE_SIZE = 100

    def __init__(
        self,
        repository: IProjectRepository,
        directory: OwnerDirectoryService,
        users: IUserRepository,
        default_page_size: int = 10,
    ):
        self._repository = repository
        self._directory = directory
        self._users = users
        self._default_page_size = default_page_size

    async def create_project(
        self, request: ProjectRequest, actor: AuthenticatedUser
    ) -> ProjectResponse:
        """
        Create a project in pending status.

        Raises:
            ValidationError: On a bad name, short name, URL or owner list
            ShortNameTakenError: If the short name is in use
        """
        name, short_name, target_url, owners = await self._validate_request(request)
        self._ensure_short_name_free(short_name)

        now = datetime.now(timezone.utc)
        project = Project(
            id=str(uuid.uuid4()),
            name=name,
            description=request.description,
            owners=owners,
            short_name=short_name,
            target_url=target_url,
            stats=ProjectStats(created_at=now, updated_at=now),
            created_at=now,
            updated_at=now,
        )
        record = apply_action(project, ApprovalAction.CREATE, actor.identity_key, now=now)
        created = self._repository.create(project, record)

        logger.info(f"Project {created.id} ({created.short_name}) created by {actor.identity_key}")
        return await self._to_response(created)

    async def update_project(
        self, project_id: str, request: ProjectRequest, actor: AuthenticatedUser
    ) -> ProjectResponse:
        """
        Replace a project's editable fields and send it back for approval.

        Raises:
            ProjectNotFoundError: If the project does not exist
            NotProjectOwnerError: If the actor is not a current owner
            ValidationError: On a bad field
            ShortNameTakenError: If another project uses the short name
        """
        project = self._get_or_raise(project_id)
        if not project.is_owner(actor.identity_key):
            raise NotProjectOwnerError(project_id)

        name, short_name, target_url, owners = await self._validate_request(request)
        self._ensure_short_name_free(short_name, exclude_id=project.id)

        project.name = name
        project.description = request.description
        project.owners = owners
        project.short_name = short_name
        project.target_url = target_url

        record = apply_action(project, ApprovalAction.UPDATE, actor.identity_key)
        saved = self._repository.save(project, record)

        logger.info(
            f"Project {project_id} updated by {actor.identity_key}: "
            f"{record.previous_status.value} -> {record.new_status.value}"
        )
        return await self._to_response(saved)

    async def delete_project(self, project_id: str, actor: AuthenticatedUser) -> None:
        """
        Delete a project. Allowed for owners and admins.

        Raises:
            ProjectNotFoundError: If the project does not exist
            ProjectAccessDeniedError: If the actor is neither owner nor admin
        """
        project = self._get_or_raise(project_id)
        if not (actor.is_admin or project.is_owner(actor.identity_key)):
            raise ProjectAccessDeniedError(
                project_id, "You are not authorized to delete this project"
            )

        record = apply_action(project, ApprovalAction.DELETE, actor.identity_key)
        self._repository.delete(project_id, record)
        logger.info(f"Project {project_id} ({project.short_name}) deleted by {actor.identity_key}")

    async def get_project(self, project_id: str, actor: AuthenticatedUser) -> ProjectResponse:
        project = self._get_or_raise(project_id)
        if not (actor.is_admin or project.is_owner(actor.identity_key)):
            raise ProjectAccessDeniedError(project_id)
        return await self._to_response(project)

    async def list_projects_for_owner(self, actor: AuthenticatedUser) -> list[ProjectResponse]:
        projects = self._repository.list_for_owner(actor.identity_key)
        return [await self._to_response(p) for p in projects]

    async def list_projects_for_admin(
        self,
        search: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ProjectListResponse:
        """
        List all projects with optional text search and status filter.

        Pages are 1-indexed, most recently updated first.
        """
        page = max(page, 1)
        page_size = min(max(page_size or self._default_page_size, 1), self.MAX_PAGE_SIZE)
        offset = (page - 1) * page_size

        projects, total = self._repository.search(search, status, offset, page_size)
        return ProjectListResponse(
            projects=[await self._to_response(p) for p in projects],
            total=total,
            page=page,
            page_size=page_size,
            has_more=offset + len(projects) < total,
        )

    async def decide(
        self,
        project_id: str,
        decision: str,
        comments: Optional[str],
        approver: AuthenticatedUser,
    ) -> ProjectResponse:
        """
        Approve or reject a project.

        Raises:
            InvalidDecisionError: If decision is not 'approved' or 'rejected'
            ProjectNotFoundError: If the project does not exist
        """
        action = parse_decision(decision)
        project = self._get_or_raise(project_id)

        record = apply_action(project, action, approver.identity_key, comments=comments)
        saved = self._repository.save(project, record)

        logger.info(
            f"Project {project_id} {project.status.value} by {approver.identity_key} "
            f"(was {record.previous_status.value})"
        )
        return await self._to_response(saved)

    async def get_history(self, project_id: str) -> list[ApprovalRecord]:
        """
        Approval records for a project, oldest first.

        Records outlive their project, so a deleted project still has history.
        """
        records = self._repository.list_records(project_id)
        if not records and self._repository.get_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)
        return records

    async def export_rows(self) -> list[ProjectExportRow]:
        """Flatten every project into CSV export rows."""
        projects = self._repository.list_all()

        approver_keys = [p.approval_info.approver for p in projects if p.approval_info]
        approver_names = {
            user.identity_key: user.display_name
            for user in self._users.get_many_by_identity_keys(list(set(approver_keys)))
        }

        rows = []
        for project in projects:
            owners = await self._directory.resolve_owners(project.owners)
            info = project.approval_info
            rows.append(
                ProjectExportRow(
                    name=project.name,
                    description=project.description or "",
                    short_name=project.short_name,
                    target_url=project.target_url,
                    status=project.status.value,
                    owners=", ".join(f"{o.display_name} ({o.email})" for o in owners),
                    created_at=project.created_at.isoformat(),
                    updated_at=project.updated_at.isoformat(),
                    approver=approver_names.get(info.approver, info.approver) if info else "",
                    approved_at=info.approved_at.isoformat() if info else "",
                    click_count=project.stats.click_count,
                )
            )
        return rows

    async def _validate_request(self, request: ProjectRequest) -> tuple[str, str, str, list[str]]:
        """Validate the request fields and normalise the owner list."""
        name = validate_name(request.name)
        short_name = normalize_short_name(request.short_name)
        target_url = validate_target_url(request.target_url)

        # Cheap count check first; normalisation may collapse further
        validate_owner_count(list(dict.fromkeys(o.strip() for o in request.owners if o and o.strip())))
        owners = await self._directory.normalize_owners(request.owners)
        validate_owner_count(owners)

        return name, short_name, target_url, owners

    def _ensure_short_name_free(self, short_name: str, exclude_id: Optional[str] = None) -> None:
        existing = self._repository.get_by_short_name(short_name)
        if existing is not None and existing.id != exclude_id:
            raise ShortNameTakenError(short_name)

    def _get_or_raise(self, project_id: str) -> Project:
        project = self._repository.get_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def _to_response(self, project: Project) -> ProjectResponse:
        owners = await self._directory.resolve_owners(project.owners)
        return ProjectResponse.from_project(project, owners)
