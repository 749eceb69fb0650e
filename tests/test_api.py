"""
End-to-end checks of the JSON API through FastAPI's TestClient.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from animalsos.app import create_app
from animalsos.repositories.document_storage import DocumentStorage
from animalsos.repositories.memory_storage import MemoryStorage


@pytest.fixture()
def app(settings):
    return create_app(settings, storage=MemoryStorage(admin_password="admin123"))


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def _register(client: TestClient, username: str = "ana") -> dict:
    resp = client.post(
        "/api/register",
        json={
            "username": username,
            "password": "secret1",
            "email": f"{username}@example.com",
            "name": username.title(),
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _login_admin(app) -> TestClient:
    admin = TestClient(app)
    resp = admin.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200, resp.text
    return admin


def test_health_reports_backend(client):
    assert client.get("/api/health").json() == {"ok": True, "storage": "memory"}


def test_public_listing_uses_camel_case(client):
    reports = client.get("/api/reports").json()

    assert len(reports) == 2
    assert {"id", "userId", "animalType", "createdAt", "updatedAt", "status"} <= set(reports[0])
    assert client.get("/api/reports", params={"limit": 1}).json()[0]["id"] == reports[0]["id"]
    assert len(client.get("/api/reports", params={"status": "pending"}).json()) == 2
    assert client.get("/api/reports", params={"status": "closed"}).json() == []


def test_missing_report_is_404(client):
    resp = client.get("/api/reports/9999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Report not found"


def test_register_login_logout(client):
    body = _register(client)
    assert "password" not in body
    assert body["role"] == "user"
    assert client.get("/api/user").json()["username"] == "ana"

    assert client.post("/api/logout").json() == {"ok": True}
    assert client.get("/api/user").status_code == 401

    bad = client.post("/api/login", json={"username": "ana", "password": "nope"})
    assert bad.status_code == 401
    good = client.post("/api/login", json={"username": "ana", "password": "secret1"})
    assert good.status_code == 200
    assert client.get("/api/user").status_code == 200


def test_duplicate_registration_conflicts(client):
    _register(client)
    resp = client.post(
        "/api/register",
        json={"username": "ana", "password": "secret1", "email": "x@example.com", "name": "X"},
    )
    assert resp.status_code == 409


def test_report_creation_requires_login(client):
    payload = {"animalType": "dog", "description": "injured leg", "location": "Main St", "urgency": "urgent"}
    assert client.post("/api/reports", json=payload).status_code == 401

    user = _register(client)
    resp = client.post("/api/reports", json={**payload, "status": "closed"})

    assert resp.status_code == 201
    report = resp.json()
    assert report["userId"] == user["id"]
    assert report["status"] == "pending"
    assert report["createdAt"] == report["updatedAt"]
    assert [r["id"] for r in client.get("/api/reports/mine").json()] == [report["id"]]


def test_status_change_requires_staff_and_valid_step(app, client):
    _register(client)
    assert client.patch("/api/reports/1/status", json={"status": "assigned"}).status_code == 403

    admin = _login_admin(app)
    resp = admin.patch("/api/reports/1/status", json={"status": "assigned"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "assigned"

    assert admin.patch("/api/reports/2/status", json={"status": "rescued"}).status_code == 409
    assert admin.patch("/api/reports/999/status", json={"status": "assigned"}).status_code == 404
    assert admin.patch("/api/reports/1/status", json={"status": "lost"}).status_code == 422


def test_contribution_flow(client):
    assert client.post("/api/donations/1/contribute", json={"amount": 100}).status_code == 401

    _register(client)
    resp = client.post("/api/donations/1/contribute", json={"amount": 100})
    assert resp.status_code == 200
    assert resp.json()["raisedAmount"] == 2600
    assert client.get("/api/donations/1").json()["raisedAmount"] == 2600

    assert client.post("/api/donations/1/contribute", json={"amount": 0}).status_code == 400
    assert client.post("/api/donations/1/contribute", json={"amount": -10}).status_code == 400
    assert client.post("/api/donations/1/contribute", json={"amount": "ten"}).status_code == 422
    assert client.post("/api/donations/77/contribute", json={"amount": 5}).status_code == 404


def test_staff_only_catalogue_changes(app, client):
    _register(client)
    vet = {"name": "New Clinic", "address": "9 Elm", "phone": "555-0101", "rating": 5}
    assert client.post("/api/vets", json=vet).status_code == 403

    admin = _login_admin(app)
    created = admin.post("/api/vets", json=vet)
    assert created.status_code == 201
    vet_id = created.json()["id"]
    assert admin.patch(f"/api/vets/{vet_id}", json={"isOpen": True}).json()["isOpen"] is True
    assert len(client.get("/api/vets").json()) == 3

    adoption = {"name": "Rex", "type": "dog", "age": "1 year", "gender": "male", "description": "playful"}
    made = admin.post("/api/adoptions", json=adoption).json()
    assert made["status"] == "available"
    names = [a["name"] for a in client.get("/api/adoptions", params={"type": "dog"}).json()]
    assert names == ["Rex", "Max"]
    admin.patch(f"/api/adoptions/{made['id']}", json={"status": "adopted"})
    available = client.get("/api/adoptions", params={"type": "dog", "status": "available"}).json()
    assert [a["name"] for a in available] == ["Max"]

    campaign = admin.post("/api/donations", json={"title": "Beds", "description": "New beds", "goalAmount": 300})
    assert campaign.status_code == 201
    assert campaign.json()["raisedAmount"] == 0


def test_admin_user_management(app, client):
    user = _register(client)
    assert client.get("/api/users").status_code == 403

    admin = _login_admin(app)
    assert [u["username"] for u in admin.get("/api/users").json()] == ["admin", "ana"]
    promoted = admin.patch(f"/api/users/{user['id']}", json={"role": "ngo"})
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "ngo"
    assert "password" not in promoted.json()
    assert admin.patch("/api/users/999", json={"name": "x"}).status_code == 404
    assert admin.patch(f"/api/users/{user['id']}", json={"username": "admin"}).status_code == 409


def test_posts(client):
    assert client.post("/api/posts", json={"title": "Hi", "content": "Hello"}).status_code == 401
    user = _register(client)

    post = client.post("/api/posts", json={"title": "Found a cat", "content": "Near the park"}).json()
    assert post["userId"] == user["id"]
    assert client.get(f"/api/posts/{post['id']}").json() == post
    assert [p["id"] for p in client.get(f"/api/users/{user['id']}/posts").json()] == [post["id"]]
    assert client.get("/api/posts/999").status_code == 404


def test_document_backend_serves_the_same_api(settings, tmp_path):
    storage = DocumentStorage.connect(f"sqlite:///{tmp_path / 'api.db'}")
    storage.seed_vets()
    with TestClient(create_app(settings, storage=storage)) as client:
        assert client.get("/api/health").json()["storage"] == "document"
        assert len(client.get("/api/vets").json()) == 3
        _register(client)
        created = client.post(
            "/api/reports",
            json={"animalType": "cat", "description": "stuck in tree", "location": "Oak St"},
        )
        assert created.status_code == 201
        assert client.get(f"/api/reports/{created.json()['id']}").json() == created.json()


def test_null_on_required_fields_is_rejected(app, client):
    user = _register(client)
    admin = _login_admin(app)
    vet_id = admin.get("/api/vets").json()[0]["id"]
    adoption_id = admin.get("/api/adoptions").json()[0]["id"]

    assert admin.patch(f"/api/vets/{vet_id}", json={"name": None}).status_code == 422
    assert admin.patch(f"/api/users/{user['id']}", json={"email": None}).status_code == 422
    assert admin.patch(f"/api/adoptions/{adoption_id}", json={"name": None}).status_code == 422
    assert admin.patch(f"/api/adoptions/{adoption_id}", json={"status": None}).status_code == 422

    cleared = admin.patch(f"/api/vets/{vet_id}", json={"rating": None, "email": None})
    assert cleared.status_code == 200
    assert cleared.json()["rating"] is None
    assert cleared.json()["name"]
    assert admin.patch(f"/api/users/{user['id']}", json={"phone": None}).status_code == 200
