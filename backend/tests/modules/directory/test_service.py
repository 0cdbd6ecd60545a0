import pytest
from datetime import datetime, timezone

from modules.auth.models import User
from modules.directory.models import UNKNOWN_USER_NAME


def add_local_user(user_repository, identity_key, email, display_name):
    now = datetime.now(timezone.utc)
    user_repository.create(
        User(
            id=f"local-{identity_key}",
            identity_key=identity_key,
            display_name=display_name,
            email=email,
            created_at=now,
            updated_at=now,
        )
    )


class TestResolveOwners:
    @pytest.mark.asyncio
    async def test_keeps_input_order(self, owner_directory, directory_client):
        directory_client.add("oid-a", "Ann", "ann@x.com")
        directory_client.add("oid-b", "Bob", "bob@x.com")

        owners = await owner_directory.resolve_owners(["oid-b", "oid-a"])

        assert [o.identity_key for o in owners] == ["oid-b", "oid-a"]
        assert owners[0].email == "bob@x.com"

    @pytest.mark.asyncio
    async def test_unknown_owner_is_kept(self, owner_directory, directory_client):
        directory_client.add("oid-a", "Ann", "ann@x.com")

        owners = await owner_directory.resolve_owners(["oid-a", "gone"])

        assert len(owners) == 2
        assert owners[1].identity_key == "gone"
        assert owners[1].display_name == UNKNOWN_USER_NAME
        assert owners[1].email == "unknown@example.com"

    @pytest.mark.asyncio
    async def test_failed_lookup_degrades_per_owner(self, owner_directory, directory_client):
        directory_client.add("oid-a", "Ann", "ann@x.com")
        directory_client.add("oid-b", "Bob", "bob@x.com")
        directory_client.failing_ids.add("oid-b")

        owners = await owner_directory.resolve_owners(["oid-a", "oid-b"])

        assert owners[0].display_name == "Ann"
        assert owners[1].display_name == UNKNOWN_USER_NAME

    @pytest.mark.asyncio
    async def test_email_falls_back_to_principal_name(self, owner_directory, directory_client):
        directory_client.add("oid-a", "Ann", mail=None, upn="ann@corp.example.com")

        owners = await owner_directory.resolve_owners(["oid-a"])

        assert owners[0].email == "ann@corp.example.com"


class TestNormalizeOwners:
    @pytest.mark.asyncio
    async def test_maps_emails_to_directory_ids(self, owner_directory, directory_client):
        directory_client.add("oid-a", "Ann", "ann@x.com")

        keys = await owner_directory.normalize_owners(["ANN@x.com", "oid-a", " ", "other@x.com"])

        assert keys == ["oid-a", "other@x.com"]

    @pytest.mark.asyncio
    async def test_falls_back_to_local_users(self, owner_directory, directory_client, user_repository):
        directory_client.fail = True
        add_local_user(user_repository, "oid-c", "cat@x.com", "Cat")

        keys = await owner_directory.normalize_owners(["cat@x.com", "dan@x.com"])

        assert keys == ["oid-c", "dan@x.com"]


class TestSearchUsers:
    @pytest.mark.asyncio
    async def test_blank_query_returns_nothing(self, owner_directory, directory_client):
        assert await owner_directory.search_users("  ") == []
        assert directory_client.lookups == []

    @pytest.mark.asyncio
    async def test_uses_directory(self, owner_directory, directory_client):
        directory_client.add("oid-a", "Ann", "ann@x.com")

        results = await owner_directory.search_users("an")

        assert [(r.id, r.email) for r in results] == [("oid-a", "ann@x.com")]

    @pytest.mark.asyncio
    async def test_falls_back_to_local_search(self, owner_directory, directory_client, user_repository):
        directory_client.fail = True
        add_local_user(user_repository, "oid-c", "cat@x.com", "Cat Example")

        results = await owner_directory.search_users("example")

        assert [r.id for r in results] == ["oid-c"]
        assert results[0].role == "user"
