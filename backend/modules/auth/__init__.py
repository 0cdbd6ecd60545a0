"""
Authentication module.

Handles bearer token verification and maps verified identities onto
local user records (the identity resolver).

Public API:
- IAuthService: Interface for auth operations
- IUserRepository: Storage contract for users
- IOwnerReconciler: Moves project owner entries onto a newly known identity
- User, UserRole, IdentityClaims: Identity models
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService, IOwnerReconciler, IUserRepository
from .models import IdentityClaims, JWTPayload, User, UserRole
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    MissingIdentityError,
    AuthNotConfiguredError,
    InsufficientPermissionsError,
)
from .repository import InMemoryUserRepository, UserRepository
from .service import AuthService

__all__ = [
    # Interfaces
    "IAuthService",
    "IUserRepository",
    "IOwnerReconciler",
    # Models
    "IdentityClaims",
    "JWTPayload",
    "User",
    "UserRole",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "MissingIdentityError",
    "AuthNotConfiguredError",
    "InsufficientPermissionsError",
    # Implementations
    "InMemoryUserRepository",
    "UserRepository",
    "AuthService",
]
