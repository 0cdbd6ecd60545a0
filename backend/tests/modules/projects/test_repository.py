import pytest
from unittest.mock import MagicMock
from datetime import datetime, timedelta, timezone

from postgrest.exceptions import APIError

from modules.projects.approval import apply_action
from modules.projects.exceptions import ProjectNotFoundError, ShortNameTakenError
from modules.projects.models import ApprovalAction, Project, ProjectStats, ProjectStatus
from modules.projects.repository import InMemoryProjectRepository, ProjectRepository

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_project(id="p1", short_name="promo", name="Promo", at=T0, **kwargs) -> Project:
    return Project(
        id=id,
        name=name,
        owners=kwargs.pop("owners", ["oid-a", "oid-b"]),
        short_name=short_name,
        target_url=kwargs.pop("target_url", "https://example.com"),
        stats=ProjectStats(created_at=at, updated_at=at),
        created_at=at,
        updated_at=at,
        **kwargs,
    )


def created(repo, project):
    record = apply_action(project, ApprovalAction.CREATE, "oid-a", now=project.created_at)
    return repo.create(project, record)


class TestInMemoryProjectRepository:
    @pytest.fixture
    def repo(self):
        return InMemoryProjectRepository()

    def test_create_stores_project_and_record(self, repo):
        created(repo, make_project())

        assert repo.get_by_id("p1").short_name == "promo"
        assert repo.get_by_short_name("PROMO").id == "p1"
        assert [r.action for r in repo.list_records("p1")] == [ApprovalAction.CREATE]

    def test_duplicate_short_name_writes_nothing(self, repo):
        created(repo, make_project())

        with pytest.raises(ShortNameTakenError):
            created(repo, make_project(id="p2", short_name="Promo"))

        assert repo.get_by_id("p2") is None
        assert repo.list_records("p2") == []

    def test_save_keeps_stored_click_count(self, repo):
        project = created(repo, make_project())
        repo.increment_clicks("p1")
        repo.increment_clicks("p1")

        # project still carries the stale count of 0
        record = apply_action(project, ApprovalAction.APPROVE, "admin")
        saved = repo.save(project, record)

        assert saved.stats.click_count == 2
        assert saved.status == ProjectStatus.APPROVED

    def test_save_conflicting_short_name(self, repo):
        created(repo, make_project())
        other = created(repo, make_project(id="p2", short_name="other"))
        other.short_name = "promo"

        with pytest.raises(ShortNameTakenError):
            repo.save(other, apply_action(other, ApprovalAction.UPDATE, "oid-a"))

        assert repo.get_by_id("p2").short_name == "other"
        assert len(repo.list_records("p2")) == 1

    def test_save_missing_project(self, repo):
        project = make_project()
        with pytest.raises(ProjectNotFoundError):
            repo.save(project, apply_action(project, ApprovalAction.UPDATE, "oid-a"))

    def test_delete_keeps_history(self, repo):
        project = created(repo, make_project())

        repo.delete("p1", apply_action(project, ApprovalAction.DELETE, "oid-a"))

        assert repo.get_by_id("p1") is None
        assert [r.action for r in repo.list_records("p1")] == [
            ApprovalAction.CREATE,
            ApprovalAction.DELETE,
        ]

    def test_replace_owner(self, repo):
        created(repo, make_project(owners=["oid-a", "Bob@X.com"]))
        created(repo, make_project(id="p2", short_name="other", owners=["oid-a", "oid-c"]))

        assert repo.replace_owner("bob@x.com", "oid-b") == 1

        assert repo.get_by_id("p1").owners == ["oid-a", "oid-b"]
        assert repo.get_by_id("p2").owners == ["oid-a", "oid-c"]
        assert repo.get_by_id("p1").updated_at == T0
        assert len(repo.list_records("p1")) == 1

    def test_increment_missing(self, repo):
        with pytest.raises(ProjectNotFoundError):
            repo.increment_clicks("missing")

    def test_list_for_owner_newest_first(self, repo):
        created(repo, make_project(id="old", short_name="old", at=T0))
        created(repo, make_project(id="new", short_name="new", at=T0 + timedelta(days=1)))
        created(repo, make_project(id="other", short_name="x", owners=["oid-x", "oid-y"]))

        assert [p.id for p in repo.list_for_owner("oid-a")] == ["new", "old"]

    def test_search_text_status_and_paging(self, repo):
        for i in range(5):
            created(repo, make_project(id=f"p{i}", short_name=f"promo-{i}", at=T0 + timedelta(hours=i)))
        created(repo, make_project(id="docs", short_name="docs", name="Docs", target_url="https://docs.example.com"))

        page, total = repo.search("PROMO", None, 1, 2)
        assert total == 5
        assert [p.id for p in page] == ["p3", "p2"]

        page, total = repo.search(None, ProjectStatus.APPROVED, 0, 10)
        assert (page, total) == ([], 0)

    def test_list_created_since_and_get_many(self, repo):
        created(repo, make_project(id="old", short_name="old", at=T0))
        created(repo, make_project(id="new", short_name="new", at=T0 + timedelta(days=3)))

        assert [p.id for p in repo.list_created_since(T0 + timedelta(days=1))] == ["new"]
        assert [p.id for p in repo.get_many(["new", "new", "gone"])] == ["new"]


class TestProjectRepository:
    @pytest.fixture
    def db(self):
        return MagicMock()

    @pytest.fixture
    def repo(self, db):
        return ProjectRepository(db)

    @pytest.fixture
    def row(self):
        return {
            "id": "p1",
            "name": "Promo",
            "description": None,
            "owners": ["oid-a", "oid-b"],
            "short_name": "promo",
            "target_url": "https://example.com",
            "status": "approved",
            "approved_by": "admin",
            "approved_at": "2024-01-02T00:00:00+00:00",
            "approval_comments": "ok",
            "click_count": 4,
            "created_at": "2024-01-01T00:00:00+00:00",
            "updated_at": "2024-01-02T00:00:00+00:00",
        }

    def test_map_row(self, repo, db, row):
        db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [row]

        project = repo.get_by_id("p1")

        assert project.status == ProjectStatus.APPROVED
        assert project.approval_info.approver == "admin"
        assert project.stats.click_count == 4
        assert project.stats.updated_at == datetime(2024, 1, 2, tzinfo=timezone.utc)

    def test_create_calls_transactional_function(self, repo, db, row):
        db.rpc.return_value.execute.return_value.data = [row]
        project = make_project(short_name="Promo")
        record = apply_action(project, ApprovalAction.CREATE, "oid-a")

        repo.create(project, record)

        name, params = db.rpc.call_args[0]
        assert name == "create_project_with_record"
        assert params["p_project"]["short_name"] == "promo"
        assert params["p_project"]["approved_by"] is None
        assert params["p_record"]["action"] == "create"
        assert params["p_record"]["previous_status"] is None

    def test_unique_violation_becomes_conflict(self, repo, db):
        db.rpc.return_value.execute.side_effect = APIError(
            {"message": "duplicate key value", "code": "23505", "hint": None, "details": None}
        )
        project = make_project()

        with pytest.raises(ShortNameTakenError):
            repo.create(project, apply_action(project, ApprovalAction.CREATE, "oid-a"))

    def test_other_api_errors_propagate(self, repo, db):
        db.rpc.return_value.execute.side_effect = APIError(
            {"message": "boom", "code": "XX000", "hint": None, "details": None}
        )
        project = make_project()

        with pytest.raises(APIError):
            repo.create(project, apply_action(project, ApprovalAction.CREATE, "oid-a"))

    def test_save_of_missing_project(self, repo, db):
        db.rpc.return_value.execute.return_value.data = []
        project = make_project()

        with pytest.raises(ProjectNotFoundError):
            repo.save(project, apply_action(project, ApprovalAction.UPDATE, "oid-a"))

    def test_delete_of_missing_project(self, repo, db):
        db.rpc.return_value.execute.return_value.data = []
        project = make_project()

        with pytest.raises(ProjectNotFoundError):
            repo.delete("p1", apply_action(project, ApprovalAction.DELETE, "oid-a"))

    def test_increment_clicks(self, repo, db):
        db.rpc.return_value.execute.return_value.data = 5

        assert repo.increment_clicks("p1") == 5
        db.rpc.assert_called_with("increment_project_clicks", {"p_project_id": "p1"})

    def test_increment_clicks_missing(self, repo, db):
        db.rpc.return_value.execute.return_value.data = None

        with pytest.raises(ProjectNotFoundError):
            repo.increment_clicks("p1")

    def test_search_builds_filters(self, repo, db, row):
        query = db.table.return_value.select.return_value
        query.or_.return_value = query
        query.eq.return_value = query
        query.order.return_value = query
        query.range.return_value = query
        query.execute.return_value.data = [row]
        query.execute.return_value.count = 12

        projects, total = repo.search("promo", ProjectStatus.APPROVED, 10, 10)

        db.table.return_value.select.assert_called_with("*", count="exact")
        assert "short_name.ilike.*promo*" in query.or_.call_args[0][0]
        query.eq.assert_called_with("status", "approved")
        query.range.assert_called_with(10, 19)
        assert total == 12
        assert len(projects) == 1

    def test_replace_owner_calls_function(self, repo, db):
        db.rpc.return_value.execute.return_value.data = 2

        assert repo.replace_owner("bob@x.com", "oid-b") == 2
        db.rpc.assert_called_with(
            "replace_project_owner", {"p_old_owner": "bob@x.com", "p_new_owner": "oid-b"}
        )
