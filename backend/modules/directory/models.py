"""
Directory module data models.
"""

from typing import Optional
from pydantic import BaseModel, Field


UNKNOWN_USER_NAME = "Unknown User"


class DirectoryProfile(BaseModel):
    """
    A user profile as returned by the directory capability.

    Field names follow the Microsoft Graph ``user`` resource; the aliases
    let Graph JSON validate directly into this model.
    """

    id: str = Field(..., description="Directory object ID (the identity key)")
    display_name: Optional[str] = Field(None, alias="displayName")
    mail: Optional[str] = Field(None, description="Primary SMTP address")
    user_principal_name: Optional[str] = Field(None, alias="userPrincipalName")
    given_name: Optional[str] = Field(None, alias="givenName")
    surname: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class OwnerInfo(BaseModel):
    """Display record for one project owner."""

    identity_key: str = Field(..., description="Owner identity key as stored on the project")
    display_name: str
    email: str


class UserSummary(BaseModel):
    """User entry returned by the owner-picker search."""

    id: str = Field(..., description="Identity key")
    display_name: str
    email: Optional[str] = None
    given_name: Optional[str] = None
    surname: Optional[str] = None
    role: str = "user"
