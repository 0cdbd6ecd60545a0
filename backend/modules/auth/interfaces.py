"""
Authentication module interface.

Other modules should depend on IAuthService and IUserRepository, not the
concrete implementations. This enables testing with in-memory stores.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import IdentityClaims, User


@runtime_checkable
class IUserRepository(Protocol):
    """
    Storage contract for local user records.

    Emails are stored and looked up lower-case. Implementations must
    reject a second record with the same identity key or email.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_by_identity_key(self, identity_key: str) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_many_by_identity_keys(self, identity_keys: list[str]) -> list[User]:
        ...

    def search(self, text: str, limit: int = 20) -> list[User]:
        """Case-insensitive substring match over display name and email."""
        ...

    def create(self, user: User) -> User:
        ...

    def update(self, user: User) -> User:
        ...


@runtime_checkable
class IOwnerReconciler(Protocol):
    """
    Rewrites stored project owner entries when an identity becomes known.

    Owners entered as an email that nothing could resolve are stored as
    entered; once that person signs in, their entries are moved onto the
    identity key.
    """

    def replace_owner(self, old_owner: str, new_owner: str) -> int:
        """
        Replace ``old_owner`` (case-insensitive) with ``new_owner`` in every
        project owner list.

        Returns:
            Number of projects changed
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a bearer token and return the resolved local user.

        Args:
            token: Bearer token from the Authorization header

        Returns:
            AuthenticatedUser for the local record behind the token

        Raises:
            AuthenticationError: If token is invalid, expired or has no identity
        """
        ...

    async def resolve_identity(self, claims: IdentityClaims) -> User:
        """
        Find, create or refresh the local user for verified claims.

        Args:
            claims: Identity claims extracted from a verified token

        Returns:
            The persisted User

        Raises:
            MissingIdentityError: If the claims carry no identity key
        """
        ...

    async def get_user_by_identity_key(self, identity_key: str) -> Optional[User]:
        """
        Get a local user by external identity key.

        Returns:
            User if found, None otherwise
        """
        ...
