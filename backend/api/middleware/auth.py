"""
Bearer token authentication dependencies.

Extracts the bearer token and hands it to the auth service, which verifies
it and resolves the local user record. Failures are AuthenticationError /
AuthorizationError and are rendered as 401 / 403 by the exception handlers.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import InsufficientPermissionsError, MissingTokenError
from modules.auth.interfaces import IAuthService
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Every call resolves the caller's local user record, creating it on first
    sign-in and refreshing profile data and last login otherwise.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None:
        raise MissingTokenError()
    return await auth.validate_token(credentials.credentials)


async def require_admin(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Dependency that requires an authenticated admin."""
    if not user.is_admin:
        raise InsufficientPermissionsError(required_role="admin", user_role=user.role)
    return user
