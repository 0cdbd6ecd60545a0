"""
Directory clients.

Implementations of IDirectoryClient:
- GraphDirectoryClient: Microsoft Graph, authenticated with an app token
  from the OAuth2 client-credentials flow
- LocalDirectoryClient: answers from the local user store, used when no
  Azure AD application is configured
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote

import httpx

from modules.auth.interfaces import IUserRepository

from .exceptions import DirectoryUnavailableError
from .models import DirectoryProfile

logger = logging.getLogger(__name__)

# Undecodable JSON and pydantic.ValidationError are both ValueErrors; the
# others come from a body of the wrong shape
MALFORMED_BODY_ERRORS = (ValueError, TypeError, AttributeError)


class GraphDirectoryClient:
    """
    Directory lookups against Microsoft Graph.

    One instance is created by the composition root and shared by every
    request. The app token is cached until shortly before it expires.
    """

    TOKEN_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
    SCOPE = "https://graph.microsoft.com/.default"
    SELECT_FIELDS = "id,displayName,mail,givenName,surname,userPrincipalName"
    SEARCH_LIMIT = 20
    TOKEN_REFRESH_MARGIN = timedelta(minutes=5)

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        base_url: str = "https://graph.microsoft.com/v1.0",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the Graph client.

        Args:
            tenant_id: Azure AD tenant ID
            client_id: Application (client) ID
            client_secret: Application secret
            base_url: Graph API root
            timeout: Per-request timeout in seconds
            http_client: Optional preconfigured httpx client (tests inject
                         one built on httpx.MockTransport)
        """
        self._tenant_id = tenant_id
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._access_token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._token_lock = asyncio.Lock()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def find_by_query(self, text: str) -> list[DirectoryProfile]:
        """Prefix search over displayName, mail and userPrincipalName."""
        # OData string literals escape a quote by doubling it
        literal = text.replace("'", "''")
        params = {
            "$filter": (
                f"startswith(displayName,'{literal}') or "
                f"startswith(mail,'{literal}') or "
                f"startswith(userPrincipalName,'{literal}')"
            ),
            "$select": self.SELECT_FIELDS,
            "$top": str(self.SEARCH_LIMIT),
        }
        response = await self._get("/users", params)
        if response.status_code != 200:
            raise DirectoryUnavailableError(
                f"search returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            users = response.json().get("value", [])
            return [DirectoryProfile.model_validate(u) for u in users[: self.SEARCH_LIMIT]]
        except MALFORMED_BODY_ERRORS as e:
            raise DirectoryUnavailableError(f"unreadable search response: {e}")

    async def find_by_id(self, identity_key: str) -> Optional[DirectoryProfile]:
        """Look up a user by object ID or user principal name."""
        path = f"/users/{quote(identity_key, safe='@')}"
        response = await self._get(path, {"$select": self.SELECT_FIELDS})

        # Graph answers 400 for keys that are neither a GUID nor a UPN
        if response.status_code in (400, 404):
            return None
        if response.status_code != 200:
            raise DirectoryUnavailableError(
                f"lookup returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return DirectoryProfile.model_validate(response.json())
        except MALFORMED_BODY_ERRORS as e:
            raise DirectoryUnavailableError(f"unreadable profile response: {e}")

    async def _get(self, path: str, params: dict[str, str]) -> httpx.Response:
        token = await self._get_access_token()
        try:
            return await self._http.get(
                f"{self._base_url}{path}",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise DirectoryUnavailableError(str(e) or e.__class__.__name__)

    async def _get_access_token(self) -> str:
        async with self._token_lock:
            now = datetime.now(timezone.utc)
            if (
                self._access_token
                and self._token_expires_at
                and now < self._token_expires_at - self.TOKEN_REFRESH_MARGIN
            ):
                return self._access_token

            try:
                response = await self._http.post(
                    self.TOKEN_URL.format(tenant_id=self._tenant_id),
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "scope": self.SCOPE,
                    },
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise DirectoryUnavailableError(f"token acquisition failed: {e}")

            try:
                body = response.json()
                access_token = body["access_token"]
                expires_in = int(body.get("expires_in", 3600))
            except (KeyError, *MALFORMED_BODY_ERRORS) as e:
                raise DirectoryUnavailableError(f"unreadable token response: {e!r}")

            self._access_token = access_token
            self._token_expires_at = now + timedelta(seconds=expires_in)
            logger.debug("Acquired Microsoft Graph access token")
            return self._access_token


class LocalDirectoryClient:
    """
    Directory lookups served from the local user store.

    Every user who has signed in at least once has a local record, so this
    gives a usable directory in development without an Azure AD app.
    """

    SEARCH_LIMIT = 20

    def __init__(self, users: IUserRepository):
        self._users = users

    async def find_by_query(self, text: str) -> list[DirectoryProfile]:
        return [
            DirectoryProfile(
                id=user.identity_key,
                display_name=user.display_name,
                mail=user.email,
                given_name=user.given_name,
                surname=user.surname,
            )
            for user in self._users.search(text, self.SEARCH_LIMIT)
        ]

    async def find_by_id(self, identity_key: str) -> Optional[DirectoryProfile]:
        user = self._users.get_by_identity_key(identity_key)
        if user is None and "@" in identity_key:
            user = self._users.get_by_email(identity_key)
        if user is None:
            return None
        return DirectoryProfile(
            id=user.identity_key,
            display_name=user.display_name,
            mail=user.email,
            given_name=user.given_name,
            surname=user.surname,
        )
