"""
Base repository class for database access.

Provides a common abstraction layer for the Supabase-backed repositories,
encapsulating client access and the row conversion helpers they share.
"""

import re
from datetime import datetime
from typing import TypeVar, Generic, Optional, Any

from dateutil.parser import isoparse
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all Supabase repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - Timestamp conversion between PostgREST strings and datetimes

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class UserRepository(BaseRepository[User]):
            def get_by_identity_key(self, key: str) -> Optional[User]:
                result = self._db.table("users").select("*").eq("identity_key", key).execute()
                if not result.data:
                    return None
                return self._map_to_user(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        """Parse a PostgREST timestamp (ISO 8601 string) into a datetime."""
        if value is None or isinstance(value, datetime):
            return value
        return isoparse(value)

    @staticmethod
    def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
        """Format a datetime for a PostgREST payload."""
        return value.isoformat() if value is not None else None

    @staticmethod
    def _or_ilike(columns: list[str], text: str) -> str:
        """
        Build a PostgREST ``or`` filter matching ``text`` in any column.

        Characters that are reserved in the filter syntax are replaced by the
        single-character LIKE wildcard, so they still match themselves.
        """
        safe = re.sub(r'[,()"\\*%:]', "_", text.strip())
        return ",".join(f"{column}.ilike.*{safe}*" for column in columns)
