"""
Directory module exceptions.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError


class DirectoryUnavailableError(ExternalServiceError):
    """
    Raised when the directory capability cannot answer.

    Callers always recover from this locally (fallback search or an
    "Unknown User" record); it is never rendered to a client.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            f"Directory lookup failed: {message}",
            service="microsoft_graph",
            code="DIRECTORY_UNAVAILABLE",
            details={"status_code": status_code},
        )
