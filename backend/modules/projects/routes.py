"""
Project API endpoints.

Two routers:
- router: owner-facing CRUD, mounted at /api/projects
- admin_router: approval, listing, history and export, mounted at /api/admin

Domain errors propagate to the application's exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from api.dependencies import get_project_service
from api.middleware.auth import get_current_user, require_admin
from shared.models import AuthenticatedUser

from .export import export_filename, render_csv
from .interfaces import IProjectService
from .models import (
    ApprovalRecord,
    DecisionRequest,
    ProjectListResponse,
    ProjectRequest,
    ProjectResponse,
    ProjectStatus,
)

router = APIRouter()
admin_router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    request: ProjectRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """
    Create a new project.

    The project starts in 'pending' status and needs admin approval
    before its short link redirects.
    """
    return await service.create_project(request, user)


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectService = Depends(get_project_service),
) -> list[ProjectResponse]:
    """List projects the current user owns, most recently updated first."""
    return await service.list_projects_for_owner(user)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.get_project(project_id, user)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    request: ProjectRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """
    Replace a project's fields. Owners only.

    Any successful edit returns the project to 'pending'.
    """
    return await service.update_project(project_id, request, user)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProjectService = Depends(get_project_service),
) -> dict:
    await service.delete_project(project_id, user)
    return {"message": "Project deleted successfully"}


@admin_router.put("/approve/{project_id}", response_model=ProjectResponse)
async def decide_project(
    project_id: str,
    request: DecisionRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """Approve or reject a project."""
    return await service.decide(project_id, request.status, request.comments, admin)


@admin_router.get("/projects", response_model=ProjectListResponse)
async def list_all_projects(
    search: Optional[str] = Query(default=None, description="Substring over name, description, short name, URL"),
    status: Optional[ProjectStatus] = Query(default=None, description="Filter by status"),
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    page_size: Optional[int] = Query(default=None, ge=1, le=100, description="Items per page"),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    return await service.list_projects_for_admin(search, status, page, page_size)


@admin_router.get("/projects/{project_id}/history", response_model=list[ApprovalRecord])
async def get_project_history(
    project_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IProjectService = Depends(get_project_service),
) -> list[ApprovalRecord]:
    """Approval audit trail of a project, oldest first."""
    return await service.get_history(project_id)


@admin_router.get("/export/csv")
async def export_projects_csv(
    admin: AuthenticatedUser = Depends(require_admin),
    service: IProjectService = Depends(get_project_service),
) -> Response:
    """Download every project as CSV."""
    rows = await service.export_rows()
    return Response(
        content=render_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )
