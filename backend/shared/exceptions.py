"""
Base exception classes for the AKA backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to one HTTP status code, so picking the
right base is what decides how an error reaches the client.
"""

from typing import Optional, Any


class AkaError(Exception):
    """
    Base exception for all AKA errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(AkaError):
    """Resource not found."""

    pass


class ValidationError(AkaError):
    """Input validation failed."""

    pass


class ConflictError(AkaError):
    """Resource collides with an existing one."""

    pass


class AuthenticationError(AkaError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(AkaError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(AkaError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
