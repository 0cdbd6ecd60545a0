"""
Redirects module data models.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field


class AccessLog(BaseModel):
    """
    One successful redirect through an approved project.

    Append-only. The project reference is kept after the project is
    deleted; analytics drops such rows.
    """

    id: str
    project_id: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    accessed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}


class VisitInfo(BaseModel):
    """Request metadata captured for an access log entry."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
