"""API models package."""

from .errors import ErrorResponse, RedirectErrorResponse

__all__ = [
    "ErrorResponse",
    "RedirectErrorResponse",
]
