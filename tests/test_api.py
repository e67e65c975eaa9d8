"""
Tests for the v1 HTTP API: session auth, projects, costs, allocations,
reports and receipt upload.
"""
import pytest
from fastapi.testclient import TestClient

from crewcost.api.v1.receipts import get_receipt_store
from crewcost.infrastructure.receipt_storage import LocalReceiptStore
from tests.conftest import register_and_login


@pytest.fixture
def owner(client):
    """Client signed in as the project owner."""
    register_and_login(client, "Olivia Owner", "olivia@example.com")
    return client


@pytest.fixture
def member_client(app):
    c = TestClient(app)
    register_and_login(c, "Max Member", "max@example.com")
    return c


@pytest.fixture
def stranger_client(app):
    c = TestClient(app)
    register_and_login(c, "Sam Stranger", "sam@example.com")
    return c


@pytest.fixture
def project_id(owner, member_client):
    response = owner.post("/api/v1/projects", json={
        "name": "Festival", "currency": "USD", "budget": "1000.00"
    })
    assert response.status_code == 201, response.text
    pid = response.json()["id"]
    response = owner.post(f"/api/v1/projects/{pid}/members", json={"email": "max@example.com"})
    assert response.status_code == 201, response.text
    return pid


def user_id(client):
    return client.get("/api/v1/auth/me").json()["id"]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestAuth:

    def test_register_login_me_logout(self, client):
        me = register_and_login(client, "Dana", "Dana@Example.com")
        assert me["email"] == "dana@example.com"

        assert client.get("/api/v1/auth/me").status_code == 200
        assert client.post("/api/v1/auth/logout").status_code == 204
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_duplicate_registration(self, client):
        register_and_login(client, "Dana", "dana@example.com")
        response = client.post("/api/v1/auth/register", json={
            "name": "Dana", "email": "dana@example.com", "password": "secret123"
        })
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "EMAIL_IN_USE"

    def test_bad_credentials(self, client):
        register_and_login(client, "Dana", "dana@example.com")
        response = client.post("/api/v1/auth/login", json={
            "email": "dana@example.com", "password": "wrong-one"
        })
        assert response.status_code == 401

    def test_protected_routes_need_session(self, client):
        assert client.get("/api/v1/projects").status_code == 401
        assert client.post("/api/v1/projects", json={"name": "X"}).status_code == 401


class TestProjects:

    def test_create_and_list(self, owner, project_id):
        projects = owner.get("/api/v1/projects").json()
        assert [p["id"] for p in projects] == [project_id]
        assert projects[0]["budget"]["cents"] == 100000
        assert projects[0]["budget"]["display"] == "$1,000.00"

    def test_default_currency(self, owner):
        response = owner.post("/api/v1/projects", json={"name": "Defaults"})
        assert response.status_code == 201
        assert response.json()["currency"] == "USD"
        assert response.json()["budget"] is None

    def test_members(self, owner, project_id):
        members = owner.get(f"/api/v1/projects/{project_id}/members").json()
        assert [(m["email"], m["role"]) for m in members] == [
            ("olivia@example.com", "owner"), ("max@example.com", "member")
        ]

    def test_invite_unknown_user(self, owner, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/members", json={"email": "ghost@example.com"})
        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "User not found. They must sign up first."

    def test_invite_existing_member(self, owner, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/members", json={"email": "max@example.com"})
        assert response.status_code == 409

    def test_member_cannot_change_budget(self, member_client, project_id):
        response = member_client.put(f"/api/v1/projects/{project_id}/budget", json={"budget": "5"})
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "OWNER_REQUIRED"

    def test_owner_clears_budget(self, owner, project_id):
        response = owner.put(f"/api/v1/projects/{project_id}/budget", json={"budget": None})
        assert response.status_code == 200
        assert response.json()["budget"] is None

    def test_stranger_is_forbidden(self, stranger_client, project_id):
        response = stranger_client.get(f"/api/v1/projects/{project_id}")
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "NOT_PROJECT_MEMBER"

    def test_missing_project(self, owner):
        assert owner.get("/api/v1/projects/9999").status_code == 404


class TestCosts:

    def test_equal_split(self, owner, member_client, project_id):
        ids = [user_id(owner), user_id(member_client)]
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "100.01",
            "category": "Food",
            "cost_date": "2026-03-14",
            "split": {"mode": "equal", "participants": ids},
        })
        assert response.status_code == 201, response.text
        cost = response.json()
        assert cost["amount"]["cents"] == 10001
        assert cost["status"] == "final"
        assert [s["amount"]["cents"] for s in cost["splits"]] == [5000, 5001]

    def test_exact_split_mismatch(self, owner, member_client, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "50.00",
            "category": "Fuel",
            "cost_date": "2026-03-14",
            "split": {"mode": "exact", "shares": [
                {"user_id": user_id(owner), "amount": "20.00"},
                {"user_id": user_id(member_client), "amount": "20.00"},
            ]},
        })
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "SPLIT_MISMATCH"
        assert owner.get(f"/api/v1/projects/{project_id}/costs").json() == []

    def test_percentage_split(self, owner, member_client, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "80.00",
            "category": "Venue",
            "cost_date": "2026-03-14",
            "split": {"mode": "percentage", "shares": [
                {"user_id": user_id(owner), "percentage": "75"},
                {"user_id": user_id(member_client), "percentage": "25"},
            ]},
        })
        assert response.status_code == 201, response.text
        assert [s["amount"]["cents"] for s in response.json()["splits"]] == [6000, 2000]

    def test_unknown_split_mode(self, owner, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "1.00", "category": "X", "cost_date": "2026-03-14",
            "split": {"mode": "shares", "participants": []},
        })
        assert response.status_code == 422

    def test_non_positive_amount(self, owner, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "0", "category": "X", "cost_date": "2026-03-14",
            "split": {"mode": "equal", "participants": [user_id(owner)]},
        })
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_AMOUNT"

    def test_amount_out_of_range(self, owner, member_client, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "100000000000000000000", "category": "X", "cost_date": "2026-03-14",
            "split": {"mode": "equal", "participants": [user_id(owner)]},
        })
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_AMOUNT"

        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "10.00", "category": "X", "cost_date": "2026-03-14",
            "split": {"mode": "exact", "shares": [
                {"user_id": user_id(owner), "amount": "1e30"},
                {"user_id": user_id(member_client), "amount": "-1e30"},
            ]},
        })
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_AMOUNT"
        assert owner.get(f"/api/v1/projects/{project_id}/costs").json() == []

    def test_participant_outside_project(self, owner, stranger_client, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "10.00", "category": "X", "cost_date": "2026-03-14",
            "split": {"mode": "equal", "participants": [user_id(owner), user_id(stranger_client)]},
        })
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

    def test_finalize_flow(self, owner, member_client, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "10.00", "category": "Props", "cost_date": "2026-03-14",
            "status": "tentative",
            "split": {"mode": "equal", "participants": [user_id(owner)]},
        })
        cost_id = response.json()["id"]

        tentative = owner.get(f"/api/v1/projects/{project_id}/costs", params={"status": "tentative"}).json()
        assert [c["id"] for c in tentative] == [cost_id]

        response = member_client.post(f"/api/v1/costs/{cost_id}/finalize")
        assert response.status_code == 200
        assert response.json()["status"] == "final"

        response = owner.post(f"/api/v1/costs/{cost_id}/finalize")
        assert response.status_code == 409

    def test_stranger_cannot_read_cost(self, owner, stranger_client, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/costs", json={
            "amount": "10.00", "category": "Props", "cost_date": "2026-03-14",
            "split": {"mode": "equal", "participants": [user_id(owner)]},
        })
        cost_id = response.json()["id"]
        assert stranger_client.get(f"/api/v1/costs/{cost_id}").status_code == 403
        assert owner.get(f"/api/v1/costs/{cost_id}").status_code == 200
        assert owner.get("/api/v1/costs/9999").status_code == 404


class TestAllocationsAndReport:

    def test_budget_variance_in_report(self, owner, member_client, project_id):
        for name, amount in [("Stage", "400.00"), ("Sound", "300.00")]:
            response = member_client.post(f"/api/v1/projects/{project_id}/allocations", json={
                "name": name, "amount": amount
            })
            assert response.status_code == 201, response.text

        report = owner.get(f"/api/v1/projects/{project_id}/report").json()
        assert report["variance"]["remaining"]["cents"] == 30000
        assert report["variance"]["over_budget"] is False

        owner.post(f"/api/v1/projects/{project_id}/allocations", json={"name": "Lights", "amount": "400.00"})
        report = owner.get(f"/api/v1/projects/{project_id}/report").json()
        assert report["variance"]["remaining"]["cents"] == -10000
        assert report["variance"]["over_budget"] is True
        assert len(owner.get(f"/api/v1/projects/{project_id}/allocations").json()) == 3

    def test_report_totals(self, owner, project_id):
        me = user_id(owner)
        for amount, category, day, status in [
            ("30.00", "Food", "2026-03-01", "final"),
            ("20.00", "Food", "2026-03-02", "tentative"),
            ("50.00", "Travel", "2026-03-02", "final"),
        ]:
            owner.post(f"/api/v1/projects/{project_id}/costs", json={
                "amount": amount, "category": category, "cost_date": day, "status": status,
                "split": {"mode": "equal", "participants": [me]},
            })

        report = owner.get(f"/api/v1/projects/{project_id}/report", params={"window": 7, "top": 5}).json()
        assert report["cost_count"] == 3
        assert report["total_final"]["cents"] == 8000
        assert report["total_tentative"]["cents"] == 2000
        assert [c["category"] for c in report["categories"]] == ["Travel", "Food"]
        assert [d["day"] for d in report["daily"]] == ["2026-03-01", "2026-03-02"]
        assert report["summary"]["top_category"] == "Travel"

    def test_allocation_must_be_positive(self, owner, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/allocations", json={"name": "X", "amount": "-1"})
        assert response.status_code == 422

    def test_oversized_allocation_and_budget(self, owner, project_id):
        response = owner.post(f"/api/v1/projects/{project_id}/allocations", json={
            "name": "X", "amount": "1e20"
        })
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_AMOUNT"

        response = owner.put(f"/api/v1/projects/{project_id}/budget", json={"budget": "1e20"})
        assert response.status_code == 422
        assert owner.get(f"/api/v1/projects/{project_id}").json()["budget"]["cents"] == 100000


class TestReceipts:

    def test_upload(self, owner):
        response = owner.post(
            "/api/v1/receipts",
            files={"file": ("taxi.png", b"\x89PNG data", "image/png")},
        )
        assert response.status_code == 201, response.text
        assert response.json()["url"].startswith("/receipts/")

    def test_rejects_type(self, owner):
        response = owner.post(
            "/api/v1/receipts",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 422

    def test_requires_login(self, client):
        response = client.post(
            "/api/v1/receipts",
            files={"file": ("taxi.png", b"\x89PNG data", "image/png")},
        )
        assert response.status_code == 401

    def test_rejects_oversized_upload(self, app, owner, tmp_path):
        small = tmp_path / "small"
        app.dependency_overrides[get_receipt_store] = lambda: LocalReceiptStore(directory=small, max_bytes=8)
        response = owner.post(
            "/api/v1/receipts",
            files={"file": ("big.png", b"x" * 64, "image/png")},
        )
        assert response.status_code == 422
        assert "exceeds 8 bytes" in response.json()["detail"]["message"]
        assert not small.exists()
