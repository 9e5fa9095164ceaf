"""Patient registration and the doctor approval workflow."""

from fastapi.testclient import TestClient

from app.config import settings
from app.database import MemoryStore, get_store
from app.features.auth.dependencies import get_identity_provider
from app.main import app


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, uid="u1", name="Asha", email="a@b.com"):
    return client.post("/api/users/register", json={"uid": uid, "name": name, "email": email})


def test_register_creates_pending_record(client):
    response = register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["email"] == "a@b.com"
    assert body["approvedAt"] is None

    assert client.get("/api/users/status/u1").json() == {"uid": "u1", "status": "pending"}


def test_register_stores_lowercase_email(client):
    response = register(client, email="Asha@B.com")
    assert response.json()["email"] == "asha@b.com"


def test_register_rejects_invalid_email(client):
    response = register(client, email="not-an-email")
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "email"


def test_pending_list_is_doctor_only(client, doctor_headers):
    register(client, uid="u1")
    register(client, uid="u2", email="c@d.com")

    assert client.get("/api/users/pending").status_code == 401

    listing = client.get("/api/users/pending", headers=doctor_headers).json()
    assert listing["total"] == 2
    assert {u["uid"] for u in listing["users"]} == {"u1", "u2"}


def test_approval_grants_patient_access(client, identity, doctor_headers, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_APPROVAL", True)
    identity.add_user("fb-u1", "u1", "a@b.com")
    register(client)

    assert client.get("/api/me/bookings", headers=bearer("fb-u1")).status_code == 403

    approved = client.post("/api/users/approve", json={"uid": "u1", "approve": True}, headers=doctor_headers)
    assert approved.status_code == 200
    body = approved.json()
    assert body["claimsUpdated"] is True
    assert body["user"]["status"] == "approved"
    assert body["user"]["approvedBy"] == "doctor@clinic.test"
    assert identity.claims_set == [("u1", {"role": "patient", "approved": True})]

    assert client.get("/api/me/bookings", headers=bearer("fb-u1")).status_code == 200
    assert client.get("/api/users/pending", headers=doctor_headers).json()["total"] == 0


def test_approved_record_alone_grants_access(client, identity, store, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_APPROVAL", True)
    identity.add_user("fb-u1", "u1", "a@b.com", role="patient")
    register(client)
    store._collections["users"]["u1"]["status"] = "approved"

    assert client.get("/api/me/bookings", headers=bearer("fb-u1")).status_code == 200


def test_rejection_blocks_access(client, identity, doctor_headers, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_APPROVAL", True)
    identity.add_user("fb-u1", "u1", "a@b.com")
    register(client)

    rejected = client.post("/api/users/approve", json={"uid": "u1", "approve": False}, headers=doctor_headers)
    assert rejected.json()["user"]["status"] == "rejected"

    response = client.get("/api/me/bookings", headers=bearer("fb-u1"))
    assert response.status_code == 403
    assert response.json()["error"] == "Your account has not been approved"


def test_pending_user_sees_pending_message(client, identity, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_APPROVAL", True)
    identity.add_user("fb-u1", "u1", "a@b.com")
    register(client)

    response = client.get("/api/me/bookings", headers=bearer("fb-u1"))
    assert response.status_code == 403
    assert response.json()["error"] == "Your account is pending approval by the doctor"


def test_status_never_reverts_to_pending(client, doctor_headers):
    register(client)
    client.post("/api/users/approve", json={"uid": "u1"}, headers=doctor_headers)

    again = register(client, name="Asha again")
    assert again.status_code == 200
    assert again.json()["status"] == "approved"
    assert again.json()["name"] == "Asha"


def test_approve_requires_doctor(client, identity):
    identity.add_user("fb-u1", "u1", "a@b.com", role="patient", approved=True)
    register(client)

    assert client.post("/api/users/approve", json={"uid": "u1"}).status_code == 401
    assert client.post("/api/users/approve", json={"uid": "u1"}, headers=bearer("fb-u1")).status_code == 401
    assert client.get("/api/users/status/u1").json()["status"] == "pending"


def test_unknown_registration(client, doctor_headers):
    assert client.post("/api/users/approve", json={"uid": "ghost"}, headers=doctor_headers).status_code == 404

    response = client.get("/api/users/status/ghost")
    assert response.status_code == 404
    assert response.json() == {"error": "Registration not found"}


def test_registration_needs_durable_store(identity):
    app.dependency_overrides[get_store] = lambda: MemoryStore()
    app.dependency_overrides[get_identity_provider] = lambda: identity
    try:
        response = register(TestClient(app))
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json() == {"error": "Persistence is not configured on the server"}
