"""
Projects module.

Short-link projects, their approval workflow and audit trail.

Public API:
- IProjectRepository, IProjectService: Interfaces
- ProjectService: Lifecycle operations
- InMemoryProjectRepository, ProjectRepository: Storage backends
- Project, ProjectStatus, ApprovalRecord, ...: Models
"""

from .interfaces import IProjectRepository, IProjectService
from .models import (
    ApprovalAction,
    ApprovalInfo,
    ApprovalRecord,
    DecisionRequest,
    Project,
    ProjectExportRow,
    ProjectListResponse,
    ProjectRequest,
    ProjectResponse,
    ProjectStats,
    ProjectStatus,
)
from .exceptions import (
    InsufficientOwnersError,
    InvalidDecisionError,
    InvalidProjectNameError,
    InvalidShortNameError,
    InvalidTargetUrlError,
    NotProjectOwnerError,
    ProjectAccessDeniedError,
    ProjectNotFoundError,
    ShortNameTakenError,
)
from .approval import apply_action, parse_decision
from .repository import InMemoryProjectRepository, ProjectRepository
from .service import ProjectService

__all__ = [
    # Interfaces
    "IProjectRepository",
    "IProjectService",
    # Models
    "ApprovalAction",
    "ApprovalInfo",
    "ApprovalRecord",
    "DecisionRequest",
    "Project",
    "ProjectExportRow",
    "ProjectListResponse",
    "ProjectRequest",
    "ProjectResponse",
    "ProjectStats",
    "ProjectStatus",
    # Exceptions
    "InsufficientOwnersError",
    "InvalidDecisionError",
    "InvalidProjectNameError",
    "InvalidShortNameError",
    "InvalidTargetUrlError",
    "NotProjectOwnerError",
    "ProjectAccessDeniedError",
    "ProjectNotFoundError",
    "ShortNameTakenError",
    # State machine
    "apply_action",
    "parse_decision",
    # Implementations
    "InMemoryProjectRepository",
    "ProjectRepository",
    "ProjectService",
]
