"""Tests for the catch-all short link redirect."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_redirect_service
from modules.projects.approval import apply_action
from modules.projects.models import ApprovalAction, Project


def add_project(repository, short_name, approved=True, target="https://example.com/t"):
    project = Project(
        id=f"p-{short_name}",
        name=short_name,
        owners=["oid-a", "oid-b"],
        short_name=short_name,
        target_url=target,
    )
    repository.create(project, apply_action(project, ApprovalAction.CREATE, "oid-a"))
    if approved:
        repository.save(project, apply_action(project, ApprovalAction.APPROVE, "admin-oid"))
    return project


class TestRedirect:
    def test_approved_link_redirects(self, client, project_repository):
        add_project(project_repository, "docs", target="https://docs.example.com/start")

        response = client.get("/docs")

        assert response.status_code == 302
        assert response.headers["location"] == "https://docs.example.com/start"

    def test_lookup_is_case_insensitive(self, client, project_repository):
        add_project(project_repository, "docs")
        assert client.get("/DOCS").status_code == 302

    def test_records_visit_metadata(self, client, project_repository, access_log_repository):
        project = add_project(project_repository, "docs")

        client.get(
            "/docs",
            headers={"User-Agent": "pytest-agent", "Referer": "https://intranet.example.com"},
        )

        logs = access_log_repository.list_since(project.created_at)
        assert len(logs) == 1
        assert logs[0].user_agent == "pytest-agent"
        assert logs[0].referrer == "https://intranet.example.com"

    def test_forwarded_for_is_used_as_ip(self, client, project_repository, access_log_repository):
        project = add_project(project_repository, "docs")
        client.get("/docs", headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert access_log_repository.list_since(project.created_at)[0].ip_address == "203.0.113.7"

    @pytest.mark.parametrize("short_name,approved", [("missing", None), ("pending", False)])
    def test_missing_and_unapproved_look_the_same(self, client, project_repository, short_name, approved):
        if approved is not None:
            add_project(project_repository, short_name, approved=approved)

        response = client.get(f"/{short_name}")

        assert response.status_code == 404
        assert response.json() == {"message": "Short URL not found"}

    def test_unapproved_link_is_not_counted(self, client, project_repository):
        project = add_project(project_repository, "pending", approved=False)
        client.get("/pending")
        assert project_repository.get_by_id(project.id).stats.click_count == 0

    def test_storage_fault_is_opaque_500(self, app):
        class BrokenRedirects:
            async def resolve(self, short_name):
                raise RuntimeError("connection refused by db-7")

        app.dependency_overrides[get_redirect_service] = lambda: BrokenRedirects()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/docs")

        assert response.status_code == 500
        assert response.json() == {"message": "Server error"}

    def test_api_routes_take_precedence(self, client):
        assert client.get("/api/projects").status_code == 401
