"""
Owner directory service.

Bridges project owner lists and the directory capability:
- resolve_owners: identity keys -> display records, one per input, in order
- normalize_owners: human-entered emails/IDs -> identity keys for storage
- search_users: owner-picker search with a local fallback

Directory failures never propagate out of this service; each lookup
degrades on its own.
"""

import asyncio
import logging
from typing import Optional

from modules.auth.interfaces import IUserRepository

from .exceptions import DirectoryUnavailableError
from .interfaces import IDirectoryClient
from .models import DirectoryProfile, OwnerInfo, UserSummary, UNKNOWN_USER_NAME

logger = logging.getLogger(__name__)


class OwnerDirectoryService:
    """
    Resolves owner identities through an injected directory client.

    Nothing is cached between calls: directory data may change, so every
    read path asks again.
    """

    SEARCH_LIMIT = 20

    def __init__(
        self,
        client: IDirectoryClient,
        users: IUserRepository,
        placeholder_email_domain: str = "example.com",
    ):
        self._client = client
        self._users = users
        self._placeholder_domain = placeholder_email_domain

    async def resolve_owners(self, identity_keys: list[str]) -> list[OwnerInfo]:
        """
        Resolve stored owner identity keys to display records.

        Lookups run concurrently; gather() keeps the input order, and a
        failed lookup yields an "Unknown User" entry instead of being dropped.
        """
        return list(await asyncio.gather(*(self._resolve_one(k) for k in identity_keys)))

    async def normalize_owners(self, tokens: list[str]) -> list[str]:
        """
        Map human-entered owner tokens (emails or directory IDs) to identity keys.

        Blank tokens are dropped and duplicates collapsed, keeping the first
        occurrence. A token that resolves nowhere is kept as entered.
        """
        cleaned = [t.strip() for t in tokens if t and t.strip()]
        keys = await asyncio.gather(*(self._normalize_one(t) for t in cleaned))
        return list(dict.fromkeys(keys))

    async def search_users(self, text: str) -> list[UserSummary]:
        """
        Search people for the owner picker.

        Uses the directory first; if it is unavailable, falls back to a
        substring search over local users.
        """
        if not text or not text.strip():
            return []

        try:
            profiles = await self._client.find_by_query(text.strip())
            return [self._profile_to_summary(p) for p in profiles[: self.SEARCH_LIMIT]]
        except DirectoryUnavailableError as e:
            logger.warning(f"{e.message}; falling back to local user search")

        return [
            UserSummary(
                id=user.identity_key,
                display_name=user.display_name,
                email=user.email,
                given_name=user.given_name,
                surname=user.surname,
                role=user.role.value,
            )
            for user in self._users.search(text, self.SEARCH_LIMIT)
        ]

    async def _resolve_one(self, identity_key: str) -> OwnerInfo:
        try:
            profile = await self._client.find_by_id(identity_key)
        except DirectoryUnavailableError as e:
            logger.warning(f"{e.message}; owner {identity_key} shown as unknown")
            profile = None

        if profile is None:
            return OwnerInfo(
                identity_key=identity_key,
                display_name=UNKNOWN_USER_NAME,
                email=f"unknown@{self._placeholder_domain}",
            )

        return OwnerInfo(
            identity_key=profile.id,
            display_name=profile.display_name or UNKNOWN_USER_NAME,
            email=self._profile_email(profile),
        )

    async def _normalize_one(self, token: str) -> str:
        profile: Optional[DirectoryProfile] = None
        try:
            profile = await self._client.find_by_id(token)
        except DirectoryUnavailableError as e:
            logger.warning(f"{e.message}; resolving owner {token} locally")

        if profile is not None:
            return profile.id

        if "@" in token:
            user = self._users.get_by_email(token)
            if user is not None:
                return user.identity_key

        return token

    def _profile_email(self, profile: DirectoryProfile) -> str:
        return (
            profile.mail
            or profile.user_principal_name
            or f"{profile.id}@{self._placeholder_domain}"
        )

    def _profile_to_summary(self, profile: DirectoryProfile) -> UserSummary:
        return UserSummary(
            id=profile.id,
            display_name=profile.display_name or self._profile_email(profile),
            email=profile.mail or profile.user_principal_name,
            given_name=profile.given_name,
            surname=profile.surname,
        )
