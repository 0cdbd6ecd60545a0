"""Tests for shared/repository.py."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from shared.repository import BaseRepository


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_db_client(self):
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_subclass_can_access_db(self):
        """Subclass should be able to access _db and use it."""
        mock_db = MagicMock()
        mock_db.table.return_value.select.return_value.execute.return_value.data = [
            {"id": "123", "name": "test"}
        ]

        class TestRepository(BaseRepository[dict]):
            def get_all(self) -> list[dict]:
                return self._db.table("test").select("*").execute().data

        assert TestRepository(mock_db).get_all() == [{"id": "123", "name": "test"}]
        mock_db.table.assert_called_once_with("test")


class TestTimestampHelpers:
    def test_parse_iso_string(self):
        parsed = BaseRepository._parse_timestamp("2024-03-01T12:30:00+00:00")
        assert parsed == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)

    def test_parse_passes_through_none_and_datetime(self):
        now = datetime.now(timezone.utc)
        assert BaseRepository._parse_timestamp(None) is None
        assert BaseRepository._parse_timestamp(now) is now

    def test_format(self):
        value = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
        assert BaseRepository._format_timestamp(value) == "2024-03-01T12:30:00+00:00"
        assert BaseRepository._format_timestamp(None) is None


class TestOrIlike:
    def test_builds_filter_for_each_column(self):
        result = BaseRepository._or_ilike(["name", "email"], "ann")
        assert result == "name.ilike.*ann*,email.ilike.*ann*"

    def test_replaces_reserved_characters(self):
        result = BaseRepository._or_ilike(["name"], ' a,b(c)"d*e%f:g ')
        assert result == "name.ilike.*a_b_c__d_e_f_g*"
