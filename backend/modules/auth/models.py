"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from shared.models import AuthenticatedUser


class UserRole(str, Enum):
    """System role of a local user."""

    USER = "user"
    ADMIN = "admin"


class JWTPayload(BaseModel):
    """
    Decoded bearer token payload.

    Mirrors the claims an Azure AD access/ID token carries. Only the
    claims the identity resolver consumes are declared.
    """

    sub: Optional[str] = Field(None, description="Subject")
    oid: Optional[str] = Field(None, description="Directory object ID")
    email: Optional[str] = Field(None, description="Email claim")
    upn: Optional[str] = Field(None, description="User principal name")
    preferred_username: Optional[str] = Field(None, description="Preferred username")
    name: Optional[str] = Field(None, description="Display name")
    given_name: Optional[str] = Field(None, description="Given name")
    family_name: Optional[str] = Field(None, description="Family name")
    exp: Optional[int] = Field(None, description="Expiration timestamp")
    iat: Optional[int] = Field(None, description="Issued at timestamp")

    model_config = {"extra": "ignore"}

    def to_claims(self) -> "IdentityClaims":
        """Extract the identity claims, preferring directory-specific claims."""
        return IdentityClaims(
            identity_key=self.oid or self.sub,
            email=self.email or self.upn or self.preferred_username,
            display_name=self.name or self.preferred_username,
            given_name=self.given_name,
            family_name=self.family_name,
        )


class IdentityClaims(BaseModel):
    """Verified identity claims handed to the identity resolver."""

    identity_key: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None

    model_config = {"frozen": True}


class User(BaseModel):
    """
    A principal known to the system.

    Created lazily on first authentication. The identity key is the join
    key between bearer tokens, project owner lists and directory profiles.
    """

    id: str = Field(..., description="Local record ID")
    identity_key: str = Field(..., description="External identity key")
    display_name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address (stored lower-case)")
    given_name: Optional[str] = Field(None, description="Given name")
    surname: Optional[str] = Field(None, description="Family name")
    role: UserRole = Field(default=UserRole.USER, description="System role")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_login_at: Optional[datetime] = Field(None, description="Last authentication time")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_principal(self) -> AuthenticatedUser:
        """Build the request-scoped principal for route handlers."""
        return AuthenticatedUser(
            id=self.id,
            identity_key=self.identity_key,
            email=self.email,
            display_name=self.display_name,
            role=self.role.value,
            last_login_at=self.last_login_at,
        )

