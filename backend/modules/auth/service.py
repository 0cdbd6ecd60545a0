"""
Authentication service implementation.

Verifies bearer tokens and maps the verified identity onto a local user
record, creating or refreshing it on every authentication.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import jwt

from shared.config import Settings
from shared.models import AuthenticatedUser

from .interfaces import IOwnerReconciler, IUserRepository
from .models import IdentityClaims, JWTPayload, User, UserRole
from .exceptions import (
    AuthNotConfiguredError,
    ExpiredTokenError,
    InvalidTokenError,
    MissingIdentityError,
    MissingTokenError,
)

logger = logging.getLogger(__name__)


class AuthService:
    """
    Implementation of the authentication service.

    Tokens are verified with a shared HS256 secret, or against the identity
    provider's signing keys when AUTH_JWKS_URL is configured. Users are
    persisted through the injected IUserRepository. When an owner
    reconciler is given, project owner entries recorded under a user's
    email or former identity key are moved onto the verified identity key.
    """

    def __init__(
        self,
        users: IUserRepository,
        settings: Settings,
        owners: Optional[IOwnerReconciler] = None,
    ):
        self._users = users
        self._settings = settings
        self._owners = owners
        self._admin_emails = {e.strip().lower() for e in settings.admin_emails if e.strip()}
        self._jwks_client: Optional[jwt.PyJWKClient] = (
            jwt.PyJWKClient(settings.auth_jwks_url) if settings.auth_jwks_url else None
        )

    def decode_token(self, token: str) -> JWTPayload:
        """
        Verify a bearer token and return its payload.

        Raises:
            MissingTokenError: If the token is empty
            AuthNotConfiguredError: If no verification key is configured
            ExpiredTokenError: If the token has expired
            InvalidTokenError: For any other verification failure
        """
        if not token:
            raise MissingTokenError()

        settings = self._settings
        if self._jwks_client is None and not settings.auth_jwt_secret:
            raise AuthNotConfiguredError()

        try:
            if self._jwks_client is not None:
                key = self._jwks_client.get_signing_key_from_jwt(token).key
            else:
                key = settings.auth_jwt_secret

            payload = jwt.decode(
                token,
                key,
                algorithms=settings.auth_jwt_algorithms,
                audience=settings.auth_audience or None,
                issuer=settings.auth_issuer or None,
                options={"verify_aud": bool(settings.auth_audience)},
            )
            return JWTPayload(**payload)

        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """Validate a bearer token and return the resolved local user."""
        payload = self.decode_token(token)
        user = await self.resolve_identity(payload.to_claims())
        return user.to_principal()

    async def resolve_identity(self, claims: IdentityClaims) -> User:
        """
        Find, create or refresh the local user for verified claims.

        Lookup order is identity key, then email (backfilling the identity
        key on the matched record), then creation of a new record.
        """
        if not claims.identity_key:
            raise MissingIdentityError()

        email = claims.email.strip().lower() if claims.email else None

        user = self._users.get_by_identity_key(claims.identity_key)

        if user is None and email:
            user = self._users.get_by_email(email)
            if user is not None:
                logger.info(f"Linking user {user.id} to identity key {claims.identity_key}")
                self._reconcile_owners(user.identity_key, claims.identity_key)
                user.identity_key = claims.identity_key
                user.updated_at = datetime.now(timezone.utc)

        if user is None:
            # Owner entries move before the user exists, so a failure here
            # is retried on the next sign-in
            if email:
                self._reconcile_owners(email, claims.identity_key)
            return self._create_user(claims, email)

        return self._refresh_user(user, claims, email)

    async def get_user_by_identity_key(self, identity_key: str) -> Optional[User]:
        """Get a local user by external identity key."""
        return self._users.get_by_identity_key(identity_key)

    def is_admin_email(self, email: Optional[str]) -> bool:
        """Whether an email is on the configured administrator allow-list."""
        return bool(email) and email.lower() in self._admin_emails

    def _create_user(self, claims: IdentityClaims, email: Optional[str]) -> User:
        now = datetime.now(timezone.utc)
        final_email = email or self._placeholder_email(claims.identity_key)
        role = UserRole.ADMIN if self.is_admin_email(final_email) else UserRole.USER

        user = User(
            id=str(uuid.uuid4()),
            identity_key=claims.identity_key,
            display_name=claims.display_name or final_email.split("@")[0],
            email=final_email,
            given_name=claims.given_name,
            surname=claims.family_name,
            role=role,
            created_at=now,
            updated_at=now,
            last_login_at=now,
        )
        created = self._users.create(user)
        logger.info(f"Created user {created.id} with role {created.role.value}")
        return created

    def _refresh_user(
        self,
        user: User,
        claims: IdentityClaims,
        email: Optional[str],
    ) -> User:
        now = datetime.now(timezone.utc)
        before = user.model_dump(exclude={"last_login_at", "updated_at"})

        if claims.display_name:
            user.display_name = claims.display_name
        user.given_name = claims.given_name
        user.surname = claims.family_name
        # A missing email claim never clears a known email
        if email and email != user.email:
            holder = self._users.get_by_email(email)
            if holder is not None and holder.id != user.id:
                logger.warning(
                    f"Email claim of user {user.id} belongs to user {holder.id}; "
                    "keeping the stored email"
                )
            else:
                self._reconcile_owners(email, user.identity_key)
                user.email = email

        if self.is_admin_email(user.email) and user.role != UserRole.ADMIN:
            user.role = UserRole.ADMIN
            logger.info(f"Escalated user {user.id} to admin")

        if user.model_dump(exclude={"last_login_at", "updated_at"}) != before:
            user.updated_at = now
        user.last_login_at = now

        return self._users.update(user)

    def _reconcile_owners(self, old_owner: str, identity_key: str) -> None:
        if self._owners is None or old_owner == identity_key:
            return
        changed = self._owners.replace_owner(old_owner, identity_key)
        if changed:
            logger.info(f"Moved owner entries of {changed} project(s) onto identity key {identity_key}")

    def _placeholder_email(self, identity_key: str) -> str:
        return f"{identity_key}@{self._settings.placeholder_email_domain}".lower()
