"""Tests for the admin statistics endpoints."""

import pytest

PROMO = {
    "name": "Promo",
    "owners": ["a@x.com", "b@x.com"],
    "short_name": "promo",
    "target_url": "https://example.com/landing",
}

ENDPOINTS = [
    "/api/stats/trends/projects",
    "/api/stats/trends/clicks",
    "/api/stats/top/short-urls",
    "/api/stats/top/users",
]


class TestStatsEndpoints:
    @pytest.mark.parametrize("path", ENDPOINTS)
    def test_requires_admin(self, client, auth_headers, path):
        assert client.get(path, headers=auth_headers).status_code == 403

    @pytest.mark.parametrize("days", [0, 366])
    def test_days_out_of_range(self, client, admin_headers, days):
        response = client.get("/api/stats/trends/projects", params={"days": days}, headers=admin_headers)
        assert response.status_code == 400

    def test_trends_and_top_links(self, client, auth_headers, admin_headers):
        project = client.post("/api/projects", json=PROMO, headers=auth_headers).json()
        client.put(f"/api/admin/approve/{project['id']}", json={"status": "approved"}, headers=admin_headers)
        client.get("/promo")
        client.get("/promo")

        projects = client.get("/api/stats/trends/projects", headers=admin_headers).json()
        clicks = client.get("/api/stats/trends/clicks", headers=admin_headers).json()
        top = client.get("/api/stats/top/short-urls", params={"days": 7}, headers=admin_headers).json()

        assert sum(p["count"] for p in projects) == 1
        assert sum(p["count"] for p in clicks) == 2
        assert top == [
            {"short_name": "promo", "target_url": "https://example.com/landing", "click_count": 2}
        ]

    def test_top_users_reports_unknown_owners(self, client, auth_headers, admin_headers):
        client.post("/api/projects", json=PROMO, headers=auth_headers)

        top = client.get("/api/stats/top/users", headers=admin_headers).json()

        assert {t["identity_key"] for t in top} == {"a@x.com", "b@x.com"}
        assert all(t["display_name"] == "Unknown User" for t in top)
        assert all(t["email"] == "unknown@example.com" for t in top)
        assert all(t["project_count"] == 1 for t in top)
