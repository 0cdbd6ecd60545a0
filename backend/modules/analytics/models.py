"""
Analytics module data models.
"""

from pydantic import BaseModel, Field


class TrendPoint(BaseModel):
    """Count of events on one UTC calendar day."""

    date: str = Field(..., description="UTC date, YYYY-MM-DD")
    count: int


class TopShortUrl(BaseModel):
    short_name: str
    target_url: str
    click_count: int


class TopOwner(BaseModel):
    identity_key: str
    display_name: str
    email: str
    project_count: int
