"""Tests for the submission API."""

import pytest
from conftest import sample_record, write_record
from fastapi.testclient import TestClient

from maginhawa.errors import GitHubError
from maginhawa.guardrails import CSRF_TOKEN_HEADER, RateLimiter
from maginhawa.models.submission import ProposalResult
from maginhawa.server import create_app


class FakeGitHub:
    """Accepts every proposal, or fails them all when error is set."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.proposals: list[str] = []

    def is_configured(self) -> bool:
        return self.error is None

    def _result(self, slug: str, branch: str) -> ProposalResult:
        if self.error:
            raise self.error
        self.proposals.append(slug)
        return ProposalResult(
            pr_url=f"https://github.test/pull/{len(self.proposals)}",
            pr_number=len(self.proposals),
            branch=branch,
        )

    def propose_file(self, slug, content, **kwargs):
        return self._result(slug, kwargs["branch"])

    def propose_deletion(self, slug, **kwargs):
        return self._result(slug, kwargs["branch"])


def create_body(**overrides) -> dict:
    body = sample_record(contributorName="Juan")
    for key in ("id", "slug", "createdAt", "updatedAt"):
        del body[key]
    body.update(overrides)
    return body


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def client(config, github):
    app = create_app(config, github=github, rate_limiter=RateLimiter(limit=3, window_seconds=3600))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def csrf(client):
    """Fetch a CSRF token; the client keeps the matching cookie."""
    response = client.get("/api/csrf")
    return {CSRF_TOKEN_HEADER: response.json()["csrfToken"]}


class TestBasics:
    """Tests for the unprotected endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "maginhawa-api"}

    def test_csrf_sets_cookie(self, client):
        response = client.get("/api/csrf")

        token = response.json()["csrfToken"]
        assert len(token) == 64
        assert client.cookies.get("csrf-secret") == token
        cookie_header = response.headers["set-cookie"].lower()
        assert "httponly" in cookie_header
        assert "samesite=strict" in cookie_header

    def test_csrf_secret_is_stable(self, client):
        first = client.get("/api/csrf").json()["csrfToken"]
        second = client.get("/api/csrf").json()["csrfToken"]
        assert first == second


class TestGuards:
    """CSRF and rate limiting on the submission endpoints."""

    @pytest.mark.parametrize(
        "path", ["/api/places/create-pr", "/api/places/update-pr", "/api/places/delete-pr"]
    )
    def test_missing_csrf_token(self, client, path):
        response = client.post(path, json={})
        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Invalid or missing CSRF token"}

    def test_wrong_csrf_token(self, client, csrf):
        response = client.post(
            "/api/places/create-pr", json=create_body(), headers={CSRF_TOKEN_HEADER: "0" * 64}
        )
        assert response.status_code == 403

    def test_rate_limit(self, client, csrf):
        statuses = [
            client.post("/api/places/create-pr", json={}, headers=csrf).status_code
            for _ in range(4)
        ]
        assert statuses == [400, 400, 400, 429]

    def test_rate_limit_per_forwarded_ip(self, client, csrf):
        for _ in range(3):
            client.post(
                "/api/places/create-pr", json={}, headers={**csrf, "x-forwarded-for": "1.1.1.1"}
            )

        blocked = client.post(
            "/api/places/create-pr", json={}, headers={**csrf, "x-forwarded-for": "1.1.1.1, 10.0.0.1"}
        )
        other = client.post(
            "/api/places/create-pr", json={}, headers={**csrf, "x-forwarded-for": "2.2.2.2"}
        )

        assert blocked.status_code == 429
        assert "Maximum 3 submissions" in blocked.json()["error"]
        assert other.status_code == 400


class TestCreatePlace:
    """Tests for POST /api/places/create-pr."""

    def test_success(self, client, csrf, github):
        response = client.post("/api/places/create-pr", json=create_body(), headers=csrf)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["prNumber"] == 1
        assert data["prUrl"] == "https://github.test/pull/1"
        assert github.proposals == ["rodics-diner"]

    def test_invalid_json(self, client, csrf):
        response = client.post(
            "/api/places/create-pr",
            content=b"{not json",
            headers={**csrf, "content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON in request body"

    def test_missing_fields(self, client, csrf):
        body = create_body()
        del body["name"]

        response = client.post("/api/places/create-pr", json=body, headers=csrf)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation failed"
        assert {"path": "name", "message": "Field required", "code": "missing"} in data["details"]

    def test_schema_violation(self, client, csrf, github):
        response = client.post(
            "/api/places/create-pr", json=create_body(priceRange="cheap"), headers=csrf
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["path"] == "priceRange"
        assert github.proposals == []

    def test_duplicate_slug(self, client, csrf, config):
        write_record(config.places_dir, sample_record())

        response = client.post("/api/places/create-pr", json=create_body(), headers=csrf)

        assert response.status_code == 409

    def test_github_failure(self, config):
        app = create_app(config, github=FakeGitHub(error=GitHubError("boom", 502)))
        with TestClient(app) as client:
            token = client.get("/api/csrf").json()["csrfToken"]
            response = client.post(
                "/api/places/create-pr",
                json=create_body(),
                headers={CSRF_TOKEN_HEADER: token},
            )

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to create PR: boom"

    def test_github_not_configured(self, config):
        app = create_app(config, github=FakeGitHub(error=ValueError("GitHub is not configured")))
        with TestClient(app) as client:
            token = client.get("/api/csrf").json()["csrfToken"]
            response = client.post(
                "/api/places/create-pr",
                json=create_body(),
                headers={CSRF_TOKEN_HEADER: token},
            )

        assert response.status_code == 500
        assert "not configured" in response.json()["error"]


class TestUpdateAndDelete:
    """Tests for the update and closure report endpoints."""

    def test_update(self, client, csrf, config, github):
        stored = sample_record()
        write_record(config.places_dir, stored)
        body = create_body(id=stored["id"], slug=stored["slug"], name="Rodic's Diner")

        response = client.post("/api/places/update-pr", json=body, headers=csrf)

        assert response.status_code == 200
        assert github.proposals == ["rodics-diner"]

    def test_update_unknown_place(self, client, csrf):
        body = create_body(id="550e8400-e29b-41d4-a716-446655440000", slug="nowhere")

        response = client.post("/api/places/update-pr", json=body, headers=csrf)

        assert response.status_code == 404

    def test_delete(self, client, csrf, config, github):
        write_record(config.places_dir, sample_record())

        response = client.post(
            "/api/places/delete-pr",
            json={"slug": "rodics-diner", "name": "Rodic's Diner", "reason": "Closed"},
            headers=csrf,
        )

        assert response.status_code == 200
        assert response.json()["prNumber"] == 1

    def test_delete_unknown_place(self, client, csrf):
        response = client.post(
            "/api/places/delete-pr",
            json={"slug": "nowhere", "name": "Nowhere"},
            headers=csrf,
        )
        assert response.status_code == 404
