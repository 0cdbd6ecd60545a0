"""
Projects module exceptions.
"""

from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class ProjectNotFoundError(NotFoundError):
    """Raised when a project is not found."""

    def __init__(self, project_id: str):
        super().__init__(
            "Project not found",
            code="PROJECT_NOT_FOUND",
            details={"project_id": project_id},
        )


class ProjectAccessDeniedError(AuthorizationError):
    """Raised when the caller is neither an owner nor an admin."""

    def __init__(self, project_id: str, message: str = "You are not authorized to access this project"):
        super().__init__(
            message,
            code="PROJECT_ACCESS_DENIED",
            details={"project_id": project_id},
        )


class NotProjectOwnerError(AuthorizationError):
    """Raised when a non-owner tries to edit a project."""

    def __init__(self, project_id: str):
        super().__init__(
            "You are not an owner of this project",
            code="NOT_PROJECT_OWNER",
            details={"project_id": project_id},
        )


class ShortNameTakenError(ConflictError):
    """Raised when another project already uses the short name."""

    def __init__(self, short_name: str):
        super().__init__(
            f"Short name is already in use: {short_name}",
            code="SHORT_NAME_TAKEN",
            details={"short_name": short_name},
        )


class InsufficientOwnersError(ValidationError):
    """Raised when a project would have fewer than the minimum owners."""

    def __init__(self, count: int, minimum: int):
        super().__init__(
            f"Project must have at least {minimum} owners",
            code="INSUFFICIENT_OWNERS",
            details={"owner_count": count, "minimum": minimum},
        )


class InvalidTargetUrlError(ValidationError):
    """Raised when the target URL is not an https URL with a valid host."""

    def __init__(self, target_url: str):
        super().__init__(
            "Target URL must start with https:// followed by a valid host",
            code="INVALID_TARGET_URL",
            details={"target_url": target_url},
        )


class InvalidShortNameError(ValidationError):
    """Raised when the short name is malformed or reserved."""

    def __init__(self, short_name: str, reason: str):
        super().__init__(
            f"Invalid short name: {reason}",
            code="INVALID_SHORT_NAME",
            details={"short_name": short_name},
        )


class InvalidProjectNameError(ValidationError):
    """Raised when the project name is blank."""

    def __init__(self):
        super().__init__("Project name is required", code="INVALID_PROJECT_NAME")


class InvalidDecisionError(ValidationError):
    """Raised when an approval decision is not 'approved' or 'rejected'."""

    def __init__(self, decision: str):
        super().__init__(
            "Status must be either approved or rejected",
            code="INVALID_DECISION",
            details={"status": decision},
        )
