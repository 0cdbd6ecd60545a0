"""
Analytics module exceptions.
"""

from shared.exceptions import ValidationError


class InvalidWindowError(ValidationError):
    """Raised when the trailing window is outside the supported range."""

    def __init__(self, days: int, minimum: int, maximum: int):
        super().__init__(
            f"days must be between {minimum} and {maximum}",
            code="INVALID_WINDOW",
            details={"days": days},
        )
