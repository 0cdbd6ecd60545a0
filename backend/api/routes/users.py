"""
User-related endpoints, mounted at /api/auth.

Provides the current user's profile and the owner-picker user search.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from modules.directory.models import UserSummary
from modules.directory.service import OwnerDirectoryService
from shared.models import AuthenticatedUser

from ..dependencies import get_owner_directory
from ..middleware.auth import get_current_user

router = APIRouter()


class UserProfileResponse(BaseModel):
    """User profile response model."""

    id: str
    identity_key: str
    email: str
    display_name: str
    role: str


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
) -> UserProfileResponse:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return UserProfileResponse(
        id=user.id,
        identity_key=user.identity_key,
        email=user.email,
        display_name=user.display_name,
        role=user.role,
    )


@router.get("/users", response_model=list[UserSummary])
async def search_users(
    search: Optional[str] = Query(default=None, description="Name or email prefix"),
    user: AuthenticatedUser = Depends(get_current_user),
    directory: OwnerDirectoryService = Depends(get_owner_directory),
) -> list[UserSummary]:
    """
    Search people to add as project owners.

    Queries the organizational directory, falling back to local users when
    it is unavailable. An empty search returns no results.
    """
    return await directory.search_users(search or "")
