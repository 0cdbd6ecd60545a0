"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is built from the local user record that the identity
    resolver returns for the caller's bearer token, and made available
    to route handlers via dependency injection.
    """

    id: str = Field(..., description="Local user record ID")
    identity_key: str = Field(..., description="External identity key (directory object ID)")
    email: str = Field(..., description="User's email address")
    display_name: str = Field(..., description="Display name")
    role: str = Field(default="user", description="User role: 'user' or 'admin'")
    last_login_at: Optional[datetime] = Field(None, description="Last authentication time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
