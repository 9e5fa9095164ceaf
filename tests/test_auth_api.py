"""Login, token validation, identity resolution and the access guards."""

from datetime import datetime, timedelta

from app.config import settings
from app.core.security import create_doctor_token


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ==================== Login / validate ====================

def test_login_issues_token_accepted_everywhere(client):
    response = client.post("/api/auth/login", json={"email": "doctor@clinic.test", "password": "s3cret-pass"})
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "doctor"
    assert body["tokenType"] == "bearer"
    assert body["email"] == "doctor@clinic.test"
    assert "expiresAt" in body
    assert datetime.fromisoformat(body["expiresAt"].replace("Z", "+00:00")).utcoffset() == timedelta(0)

    headers = bearer(body["token"])
    validate = client.get("/api/auth/validate", headers=headers)
    assert validate.status_code == 200
    assert validate.json()["valid"] is True
    assert validate.json()["email"] == "doctor@clinic.test"

    assert client.get("/api/users/pending", headers=headers).status_code == 200


def test_login_failures_are_indistinguishable(client):
    wrong_password = client.post("/api/auth/login", json={"email": "doctor@clinic.test", "password": "nope"})
    wrong_email = client.post("/api/auth/login", json={"email": "who@clinic.test", "password": "s3cret-pass"})

    assert wrong_password.status_code == wrong_email.status_code == 401
    assert wrong_password.json() == wrong_email.json() == {"error": "Invalid email or password"}


def test_login_without_configured_credentials_is_a_server_error(client, monkeypatch):
    monkeypatch.setattr(settings, "DOCTOR_EMAIL", None)

    response = client.post("/api/auth/login", json={"email": "doctor@clinic.test", "password": "s3cret-pass"})
    assert response.status_code == 500
    assert response.json()["error"] == "Doctor credentials are not configured on the server"


def test_expired_token_rejected_by_validate_and_guards(client):
    token, _ = create_doctor_token("doctor@clinic.test", expires_delta=timedelta(seconds=-1))

    assert client.get("/api/auth/validate", headers=bearer(token)).status_code == 401
    assert client.get("/api/users/pending", headers=bearer(token)).status_code == 401
    assert client.get("/api/bookings/anything", headers=bearer(token)).status_code == 401


def test_validate_requires_a_token(client):
    response = client.get("/api/auth/validate")
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token"}


def test_validate_does_not_accept_firebase_tokens(client, identity):
    identity.add_user("fb-doctor", "uid-doc", "doc@clinic.test", role="doctor")
    assert client.get("/api/auth/validate", headers=bearer("fb-doctor")).status_code == 401


# ==================== Guards ====================

def test_firebase_doctor_equivalent_to_token_doctor(client, identity, doctor_headers):
    identity.add_user("fb-doctor", "uid-doc", "doc@clinic.test", role="doctor")

    for headers in (doctor_headers, bearer("fb-doctor")):
        assert client.get("/api/users/pending", headers=headers).status_code == 200
        assert client.get("/api/patients", headers=headers).status_code == 200
        assert client.get("/api/bookings/missing", headers=headers).status_code == 404


def test_patient_cannot_use_doctor_endpoints(client, identity):
    identity.add_user("fb-patient", "uid-p", "p@example.com", role="patient", approved=True)

    response = client.get("/api/patients", headers=bearer("fb-patient"))
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_unknown_role_is_anonymous(client, identity):
    identity.add_user("fb-admin", "uid-a", "a@example.com", role="admin")

    assert client.get("/api/me/bookings", headers=bearer("fb-admin")).status_code == 401
    assert client.get("/api/patients", headers=bearer("fb-admin")).status_code == 401


def test_doctor_is_forbidden_on_patient_endpoints(client, doctor_headers):
    assert client.get("/api/me/bookings", headers=doctor_headers).status_code == 403


def test_patient_without_claims_allowed_when_approval_off(client, identity):
    identity.add_user("fb-new", "uid-new", "new@example.com")

    assert client.get("/api/me/bookings", headers=bearer("fb-new")).status_code == 200


def test_patient_with_approved_false_is_forbidden(client, identity):
    identity.add_user("fb-rejected", "uid-r", "r@example.com", role="patient", approved=False)

    response = client.get("/api/me/bookings", headers=bearer("fb-rejected"))
    assert response.status_code == 403
    assert response.json() == {"error": "Your account has not been approved"}


def test_patient_without_claims_rejected_when_approval_on(client, identity, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_APPROVAL", True)
    identity.add_user("fb-new", "uid-new", "new@example.com")

    response = client.get("/api/me/bookings", headers=bearer("fb-new"))
    assert response.status_code == 403
    assert response.json()["error"] == "Your account is pending approval by the doctor"


def test_approval_lookup_failure_fails_closed(client, identity, store, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_APPROVAL", True)
    identity.add_user("fb-new", "uid-new", "new@example.com")

    async def broken_get(collection, doc_id):
        raise RuntimeError("store offline")

    monkeypatch.setattr(store, "get", broken_get)

    response = client.get("/api/me/bookings", headers=bearer("fb-new"))
    assert response.status_code == 403
    assert response.json() == {"error": "Unable to verify account approval"}


# ==================== Claims administration ====================

def test_set_doctor_claims(client, identity, doctor_headers):
    identity.add_user("fb-user", "uid-2", "dr2@clinic.test")

    response = client.post("/api/auth/set-doctor-claims", json={"uid": "uid-2"}, headers=doctor_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "uid": "uid-2", "claims": {"role": "doctor"}}

    # New ID tokens for that user now resolve to a doctor
    assert client.get("/api/patients", headers=bearer("fb-user")).status_code == 200


def test_set_doctor_claims_requires_doctor(client):
    response = client.post("/api/auth/set-doctor-claims", json={"uid": "uid-2"})
    assert response.status_code == 401


def test_set_doctor_claims_without_firebase(client, identity, doctor_headers):
    identity.available = False

    response = client.post("/api/auth/set-doctor-claims", json={"uid": "uid-2"}, headers=doctor_headers)
    assert response.status_code == 503
