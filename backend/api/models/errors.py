"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format (mirrors AkaError.to_dict)."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class RedirectErrorResponse(BaseModel):
    """Body of a failed short link redirect."""

    message: str
