"""
HTTP API Tests

Exercises the FastAPI app end to end with an in-memory repository and a
fresh demo identity provider per test.
"""

import pytest
from fastapi.testclient import TestClient

from api_server import app
from assessment_engine.dependencies import get_identity_provider, get_repository
from assessment_engine.identity import DemoIdentityProvider
from assessment_engine.repository import AssessmentRepository, TokenIdGenerator


@pytest.fixture
def repo() -> AssessmentRepository:
    repository = AssessmentRepository()
    repository.seed_templates()
    return repository


@pytest.fixture
def client(repo):
    identity = DemoIdentityProvider()
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_identity_provider] = lambda: identity
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, email, password):
    r = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return {"X-Session-Token": r.json()["token"]}


@pytest.fixture
def admin_headers(client):
    return login(client, "admin@test.com", "admin123")


@pytest.fixture
def user_headers(client):
    return login(client, "user@test.com", "user123")


NEW_SCHEMA = {
    "title": "Age Check",
    "description": "Single question",
    "category": "Demo",
    "fields": [
        {"id": "age", "label": "Age", "kind": "number", "required": True, "bounds": {"min": 1, "max": 120}},
    ],
}


# ============================================================
# AUTH AND HEALTH
# ============================================================

class TestAuth:

    def test_bad_login(self, client):
        r = client.post("/api/v1/auth/login", json={"email": "admin@test.com", "password": "x"})
        assert r.status_code == 401

    def test_me(self, client, admin_headers):
        r = client.get("/api/v1/auth/me", headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["role"] == "admin"

    def test_missing_session(self, client):
        assert client.get("/api/v1/assessments").status_code == 401

    def test_invalid_session(self, client):
        r = client.get("/api/v1/assessments", headers={"X-Session-Token": "bogus"})
        assert r.status_code == 401

    def test_register_then_duplicate(self, client):
        payload = {"email": "new@test.com", "password": "pw", "name": "New"}
        assert client.post("/api/v1/auth/register", json=payload).status_code == 200
        assert client.post("/api/v1/auth/register", json=payload).status_code == 409

    def test_logout(self, client, user_headers):
        assert client.post("/api/v1/auth/logout", headers=user_headers).json()["closed"] is True
        assert client.get("/api/v1/auth/me", headers=user_headers).status_code == 401


class TestHealth:

    def test_health(self, client):
        r = client.get("/api/v1/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["schemas"] == 2
        assert body["insight_rules"] == ["bmi", "blood_pressure"]


# ============================================================
# ASSESSMENT SCHEMAS
# ============================================================

class TestAssessmentEndpoints:

    def test_list_and_filter(self, client, user_headers):
        r = client.get("/api/v1/assessments", headers=user_headers)
        assert r.json()["count"] == 2
        r = client.get("/api/v1/assessments", params={"category": "Medical"}, headers=user_headers)
        assert [a["id"] for a in r.json()["assessments"]] == ["as_card_01"]
        r = client.get("/api/v1/assessments", params={"category": "all", "search": "fitness"},
                       headers=user_headers)
        assert [a["id"] for a in r.json()["assessments"]] == ["as_hr_02"]

    def test_categories(self, client, user_headers):
        r = client.get("/api/v1/assessments/categories", headers=user_headers)
        assert r.json() == {"categories": ["Health", "Medical"]}

    def test_detail_includes_widgets_and_hints(self, client, user_headers):
        r = client.get("/api/v1/assessments/as_hr_02", headers=user_headers)
        assert r.status_code == 200
        views = {v["field"]["id"]: v for v in r.json()["fields"]}
        assert views["age"]["widget"] == "number_input"
        assert views["age"]["hint"] == "Value should be between 1 and 120"
        assert views["gender"]["widget"] == "radio_group"

    def test_unknown_schema_404(self, client, user_headers):
        r = client.get("/api/v1/assessments/as_missing", headers=user_headers)
        assert r.status_code == 404
        assert r.json()["detail"]["error"] == "SCHEMA_NOT_FOUND"

    def test_user_cannot_create(self, client, user_headers):
        r = client.post("/api/v1/assessments", json=NEW_SCHEMA, headers=user_headers)
        assert r.status_code == 403
        assert r.json()["detail"]["error"] == "FORBIDDEN"

    def test_admin_lifecycle(self, client, admin_headers):
        r = client.post("/api/v1/assessments", json=NEW_SCHEMA, headers=admin_headers)
        assert r.status_code == 201
        schema_id = r.json()["assessment_schema"]["id"]

        r = client.patch(f"/api/v1/assessments/{schema_id}", json={"title": "Age"}, headers=admin_headers)
        assert r.json()["assessment_schema"]["title"] == "Age"

        r = client.post(f"/api/v1/assessments/{schema_id}/fields",
                        json={"field": {"id": "city", "label": "City"}, "position": 0},
                        headers=admin_headers)
        assert r.status_code == 201
        assert [v["field"]["id"] for v in r.json()["fields"]] == ["city", "age"]

        r = client.patch(f"/api/v1/assessments/{schema_id}/fields/city",
                         json={"required": True}, headers=admin_headers)
        assert r.json()["fields"][0]["field"]["required"] is True

        r = client.delete(f"/api/v1/assessments/{schema_id}/fields/city", headers=admin_headers)
        assert [v["field"]["id"] for v in r.json()["fields"]] == ["age"]

        r = client.delete(f"/api/v1/assessments/{schema_id}/fields/age", headers=admin_headers)
        assert r.status_code == 422

        r = client.delete(f"/api/v1/assessments/{schema_id}", headers=admin_headers)
        assert r.json() == {"status": "deleted", "schema_id": schema_id, "responses_deleted": 0}

    def test_create_without_fields_422(self, client, admin_headers):
        r = client.post("/api/v1/assessments", json={**NEW_SCHEMA, "fields": []}, headers=admin_headers)
        assert r.status_code == 422

    def test_unknown_field_404(self, client, admin_headers):
        r = client.patch("/api/v1/assessments/as_hr_02/fields/nope", json={"label": "x"}, headers=admin_headers)
        assert r.status_code == 404
        assert r.json()["detail"]["error"] == "FIELD_NOT_FOUND"


# ============================================================
# RESPONSES
# ============================================================

class TestResponseEndpoints:

    @pytest.fixture
    def age_schema_id(self, client, admin_headers):
        r = client.post("/api/v1/assessments", json=NEW_SCHEMA, headers=admin_headers)
        return r.json()["assessment_schema"]["id"]

    def test_validate_field(self, client, user_headers, age_schema_id):
        url = f"/api/v1/assessments/{age_schema_id}/validate-field"
        r = client.post(url, json={"field_id": "age", "value": "130"}, headers=user_headers)
        assert r.json() == {"ok": False, "reason": "AboveMax", "message": "Value must be at most 120"}
        r = client.post(url, json={"field_id": "age", "value": "45"}, headers=user_headers)
        assert r.json()["ok"] is True
        r = client.post(url, json={"field_id": "nope", "value": "1"}, headers=user_headers)
        assert r.status_code == 404

    def test_rejected_submission(self, client, repo, user_headers, age_schema_id):
        r = client.post(f"/api/v1/assessments/{age_schema_id}/responses",
                        json={"answers": {"age": 130}}, headers=user_headers)
        assert r.status_code == 422
        detail = r.json()["detail"]
        assert detail["error"] == "SUBMISSION_REJECTED"
        assert detail["field_errors"][0]["reason"] == "AboveMax"
        assert repo.response_count() == 0

    def test_submit_and_view_results(self, client, user_headers, age_schema_id):
        r = client.post(f"/api/v1/assessments/{age_schema_id}/responses",
                        json={"answers": {"age": 45}}, headers=user_headers)
        assert r.status_code == 201
        body = r.json()
        assert body["score"] == 100
        assert body["next_step"] == "results"

        r = client.get(f"/api/v1/responses/{body['response_id']}/results", headers=user_headers)
        results = r.json()
        assert results["answers"][0]["display"] == "45"
        assert results["insights"][0]["title"] == "Excellent Completion"

    def test_other_users_response_forbidden(self, client, repo, admin_headers, age_schema_id):
        r = client.post("/api/v1/auth/register", json={"email": "a@b.c", "password": "pw", "name": "A"})
        other = {"X-Session-Token": r.json()["token"]}
        user = login(client, "user@test.com", "user123")
        response_id = client.post(f"/api/v1/assessments/{age_schema_id}/responses",
                                  json={"answers": {"age": 45}}, headers=user).json()["response_id"]

        assert client.get(f"/api/v1/responses/{response_id}", headers=other).status_code == 403
        assert client.get(f"/api/v1/responses/{response_id}/results", headers=other).status_code == 403
        assert client.get(f"/api/v1/responses/{response_id}", headers=admin_headers).status_code == 200

    def test_my_responses_and_dashboard(self, client, user_headers, age_schema_id):
        client.post(f"/api/v1/assessments/{age_schema_id}/responses",
                    json={"answers": {"age": 45}}, headers=user_headers)
        mine = client.get("/api/v1/responses/me", headers=user_headers).json()
        assert len(mine) == 1

        dash = client.get("/api/v1/dashboard", headers=user_headers).json()
        assert dash["total_assessments"] == 3
        assert dash["completed"] == 1
        assert dash["pending"] == 2
        assert dash["success_rate"] == 33

    def test_stats_and_cascade(self, client, admin_headers, user_headers, age_schema_id):
        for age in (45, 60):
            client.post(f"/api/v1/assessments/{age_schema_id}/responses",
                        json={"answers": {"age": age}}, headers=user_headers)
        stats = client.get(f"/api/v1/assessments/{age_schema_id}/stats", headers=user_headers).json()
        assert stats == {"schema_id": age_schema_id, "total_responses": 2, "average_score": 100}

        r = client.delete(f"/api/v1/assessments/{age_schema_id}", headers=admin_headers)
        assert r.json()["responses_deleted"] == 2
        assert client.get("/api/v1/responses/me", headers=user_headers).json() == []


class TestDuplicateIdentifier:

    def test_collision_is_500(self, admin_headers):
        collide = AssessmentRepository(id_generator=lambda prefix: f"{prefix}_same")
        app.dependency_overrides[get_repository] = lambda: collide
        client = TestClient(app)
        assert client.post("/api/v1/assessments", json=NEW_SCHEMA, headers=admin_headers).status_code == 201
        r = client.post("/api/v1/assessments", json=NEW_SCHEMA, headers=admin_headers)
        assert r.status_code == 500
        assert r.json()["detail"]["error"] == "DUPLICATE_IDENTIFIER"

    def test_token_generator_prefix(self):
        assert TokenIdGenerator()("resp").startswith("resp_")
