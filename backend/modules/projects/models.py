"""
Projects module data models.

A project maps a short name to a target URL. It is owned by at least two
identities and only redirects once an administrator has approved it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from modules.directory.models import OwnerInfo


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectStatus(str, Enum):
    """Approval status of a project."""

    PENDING = "pending"      # Awaiting an admin decision
    APPROVED = "approved"    # Redirect is live
    REJECTED = "rejected"    # Turned down; an owner edit resubmits it


class ApprovalAction(str, Enum):
    """Kind of state-changing operation recorded in the audit trail."""

    CREATE = "create"
    UPDATE = "update"
    APPROVE = "approve"
    REJECT = "reject"
    DELETE = "delete"


class ApprovalInfo(BaseModel):
    """Metadata of the last admin decision. Absent while pending."""

    approver: str = Field(..., description="Approver identity key")
    approved_at: datetime = Field(..., description="Decision time")
    comments: Optional[str] = Field(None, description="Decision comments")


class ProjectStats(BaseModel):
    """Usage counters owned by the project."""

    click_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Project(BaseModel):
    """
    Stored project.

    Owners are stored as external identity keys only; display data is
    resolved on every read.
    """

    id: str
    name: str
    description: Optional[str] = None
    owners: list[str] = Field(default_factory=list)
    short_name: str
    target_url: str
    status: ProjectStatus = ProjectStatus.PENDING
    approval_info: Optional[ApprovalInfo] = None
    stats: ProjectStats = Field(default_factory=ProjectStats)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def is_owner(self, identity_key: str) -> bool:
        return identity_key in self.owners


class ApprovalRecord(BaseModel):
    """Immutable audit entry for one project state transition."""

    id: str
    project_id: str
    action: ApprovalAction
    operator: str = Field(..., description="Identity key of the acting user")
    previous_status: Optional[ProjectStatus] = None
    new_status: Optional[ProjectStatus] = None
    comments: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)

    model_config = {"frozen": True}


class ProjectRequest(BaseModel):
    """Body of project create and update requests (full replace)."""

    name: str = Field(..., max_length=200, description="Project name")
    description: Optional[str] = Field(None, max_length=2000)
    owners: list[str] = Field(
        default_factory=list,
        description="Owner emails or directory IDs (at least two)",
    )
    short_name: str = Field(..., description="Short link path segment")
    target_url: str = Field(..., description="HTTPS redirect target")


class DecisionRequest(BaseModel):
    """Body of the admin approval endpoint."""

    status: str = Field(..., description="'approved' or 'rejected'")
    comments: Optional[str] = Field(None, max_length=2000)


class ProjectResponse(BaseModel):
    """Project as returned by the API, with owners resolved."""

    id: str
    name: str
    description: Optional[str] = None
    owners: list[OwnerInfo]
    short_name: str
    target_url: str
    status: ProjectStatus
    approval_info: Optional[ApprovalInfo] = None
    stats: ProjectStats
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_project(cls, project: Project, owners: list[OwnerInfo]) -> "ProjectResponse":
        return cls(
            **project.model_dump(exclude={"owners"}),
            owners=owners,
        )


class ProjectListResponse(BaseModel):
    """Paginated admin listing."""

    projects: list[ProjectResponse]
    total: int
    page: int
    page_size: int
    has_more: bool


class ProjectExportRow(BaseModel):
    """One line of the CSV export."""

    name: str
    description: str = ""
    short_name: str
    target_url: str
    status: str
    owners: str
    created_at: str
    updated_at: str
    approver: str = ""
    approved_at: str = ""
    click_count: int = 0
