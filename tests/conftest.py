"""Shared fixtures: in-memory store and a fake Firebase identity provider."""

import os

# Settings are read at import time
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["DOCTOR_EMAIL"] = "doctor@clinic.test"
os.environ["DOCTOR_PASSWORD"] = "s3cret-pass"
os.environ["REQUIRE_APPROVAL"] = "false"
for var in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS", "DOCTOR_PASSWORD_HASH", "VITE_REQUIRE_APPROVAL"):
    os.environ.pop(var, None)

import pytest
from fastapi.testclient import TestClient

from app.core.email import MailState
from app.core.security import create_doctor_token
from app.database import MemoryStore, get_store
from app.features.auth.dependencies import get_identity_provider
from app.main import app


class FakeIdentityProvider:
    """Stands in for Firebase Authentication: token -> uid, uid -> custom claims."""

    def __init__(self):
        self.available = True
        self.tokens = {}
        self.emails = {}
        self.claims = {}
        self.claims_set = []

    def add_user(self, token, uid, email, **claims):
        self.tokens[token] = uid
        self.emails[uid] = email
        self.claims[uid] = dict(claims)

    async def verify_id_token(self, id_token):
        uid = self.tokens.get(id_token)
        if uid is None:
            return None
        return {"uid": uid, "sub": uid, "email": self.emails[uid], **self.claims[uid]}

    async def set_custom_claims(self, uid, claims):
        self.claims_set.append((uid, dict(claims)))
        self.claims[uid] = dict(claims)


@pytest.fixture
def store():
    return MemoryStore(durable=True)


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture(autouse=True)
def mail_disabled(monkeypatch):
    monkeypatch.setattr(MailState, "ready", False)


@pytest.fixture
def client(store, identity):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity_provider] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def doctor_headers():
    token, _ = create_doctor_token("doctor@clinic.test")
    return {"Authorization": f"Bearer {token}"}