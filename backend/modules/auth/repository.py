"""
User repositories.

Two implementations of IUserRepository:
- InMemoryUserRepository: process-local storage for development and tests
- UserRepository: the ``users`` table in Supabase
"""

from typing import Optional, Any

from shared.exceptions import ConflictError
from shared.repository import BaseRepository

from .models import User, UserRole


class InMemoryUserRepository:
    """
    User storage held in process memory.

    Enforces the same uniqueness rules as the database (identity key and
    email). Returned models are copies, so callers cannot mutate the store
    without going through update().
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def get_by_id(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def get_by_identity_key(self, identity_key: str) -> Optional[User]:
        for user in self._users.values():
            if user.identity_key == identity_key:
                return user.model_copy(deep=True)
        return None

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        for user in self._users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    def get_many_by_identity_keys(self, identity_keys: list[str]) -> list[User]:
        wanted = set(identity_keys)
        return [
            user.model_copy(deep=True)
            for user in self._users.values()
            if user.identity_key in wanted
        ]

    def search(self, text: str, limit: int = 20) -> list[User]:
        needle = text.strip().lower()
        matches = [
            user.model_copy(deep=True)
            for user in self._users.values()
            if needle in user.display_name.lower() or needle in user.email.lower()
        ]
        return matches[:limit]

    def create(self, user: User) -> User:
        self._check_unique(user)
        self._users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    def update(self, user: User) -> User:
        self._check_unique(user)
        self._users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    def _check_unique(self, user: User) -> None:
        for other in self._users.values():
            if other.id == user.id:
                continue
            if other.identity_key == user.identity_key:
                raise ConflictError(
                    "A user with this identity key already exists",
                    code="USER_IDENTITY_TAKEN",
                    details={"identity_key": user.identity_key},
                )
            if other.email == user.email:
                raise ConflictError(
                    "A user with this email already exists",
                    code="USER_EMAIL_TAKEN",
                    details={"email": user.email},
                )


class UserRepository(BaseRepository[User]):
    """
    Repository for the ``users`` table.

    Uniqueness of identity_key and email is enforced by table constraints.
    """

    TABLE = "users"

    def get_by_id(self, user_id: str) -> Optional[User]:
        result = self._db.table(self.TABLE).select("*").eq("id", user_id).execute()
        return self._map_to_user(result.data[0]) if result.data else None

    def get_by_identity_key(self, identity_key: str) -> Optional[User]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .eq("identity_key", identity_key)
            .execute()
        )
        return self._map_to_user(result.data[0]) if result.data else None

    def get_by_email(self, email: str) -> Optional[User]:
        result = self._db.table(self.TABLE).select("*").eq("email", email.lower()).execute()
        return self._map_to_user(result.data[0]) if result.data else None

    def get_many_by_identity_keys(self, identity_keys: list[str]) -> list[User]:
        if not identity_keys:
            return []
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .in_("identity_key", identity_keys)
            .execute()
        )
        return [self._map_to_user(row) for row in result.data]

    def search(self, text: str, limit: int = 20) -> list[User]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .or_(self._or_ilike(["display_name", "email"], text))
            .limit(limit)
            .execute()
        )
        return [self._map_to_user(row) for row in result.data]

    def create(self, user: User) -> User:
        result = self._db.table(self.TABLE).insert(self._to_row(user)).execute()
        return self._map_to_user(result.data[0])

    def update(self, user: User) -> User:
        row = self._to_row(user)
        row.pop("id")
        row.pop("created_at")
        result = self._db.table(self.TABLE).update(row).eq("id", user.id).execute()
        return self._map_to_user(result.data[0])

    def _to_row(self, user: User) -> dict[str, Any]:
        return {
            "id": user.id,
            "identity_key": user.identity_key,
            "display_name": user.display_name,
            "email": user.email,
            "given_name": user.given_name,
            "surname": user.surname,
            "role": user.role.value,
            "created_at": self._format_timestamp(user.created_at),
            "updated_at": self._format_timestamp(user.updated_at),
            "last_login_at": self._format_timestamp(user.last_login_at),
        }

    def _map_to_user(self, row: dict[str, Any]) -> User:
        return User(
            id=str(row["id"]),
            identity_key=row["identity_key"],
            display_name=row["display_name"],
            email=row["email"],
            given_name=row.get("given_name"),
            surname=row.get("surname"),
            role=UserRole(row.get("role") or UserRole.USER.value),
            created_at=self._parse_timestamp(row["created_at"]),
            updated_at=self._parse_timestamp(row["updated_at"]),
            last_login_at=self._parse_timestamp(row.get("last_login_at")),
        )
