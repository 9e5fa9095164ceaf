"""Doctor token issuing/verification and credential checks."""

import calendar
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.config import settings
from app.core.security import (
    create_doctor_token,
    decode_doctor_token,
    get_password_hash,
    verify_doctor_credentials,
)
from app.shared.exceptions import ConfigurationException


def test_token_payload_round_trip():
    token, expires_at = create_doctor_token("doctor@clinic.test")
    payload = decode_doctor_token(token)

    assert payload["sub"] == "doctor"
    assert payload["role"] == "doctor"
    assert payload["email"] == "doctor@clinic.test"
    assert payload["exp"] - payload["iat"] == 8 * 3600
    assert payload["exp"] == calendar.timegm(expires_at.utctimetuple())
    assert expires_at.utcoffset() == timedelta(0)


def test_expired_token_is_rejected():
    token, _ = create_doctor_token("doctor@clinic.test", expires_delta=timedelta(seconds=-5))
    assert decode_doctor_token(token) is None


def test_token_signed_with_other_secret_is_rejected():
    """A forged token fails even with a far-future expiry."""
    forged = jwt.encode(
        {"sub": "doctor", "role": "doctor", "email": "x@y.z", "exp": datetime.now(timezone.utc) + timedelta(days=365)},
        "not-the-secret",
        algorithm="HS256",
    )
    assert decode_doctor_token(forged) is None


def test_swapped_payload_is_rejected():
    token, _ = create_doctor_token("doctor@clinic.test")
    other, _ = create_doctor_token("intruder@evil.test")
    header, _, signature = token.split(".")
    _, other_payload, _ = other.split(".")

    assert decode_doctor_token(f"{header}.{other_payload}.{signature}") is None


def test_wrong_role_is_rejected():
    token = jwt.encode(
        {"sub": "someone", "role": "patient", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    assert decode_doctor_token(token) is None


@pytest.mark.parametrize("garbage", ["", "abc", "a.b", "a.b.c", "Bearer x"])
def test_malformed_tokens_never_raise(garbage):
    assert decode_doctor_token(garbage) is None


def test_doctor_credentials():
    assert verify_doctor_credentials("doctor@clinic.test", "s3cret-pass")
    assert verify_doctor_credentials("  Doctor@Clinic.TEST ", "s3cret-pass")
    assert not verify_doctor_credentials("doctor@clinic.test", "wrong")
    assert not verify_doctor_credentials("other@clinic.test", "s3cret-pass")


def test_hashed_doctor_password(monkeypatch):
    monkeypatch.setattr(settings, "DOCTOR_PASSWORD", None)
    monkeypatch.setattr(settings, "DOCTOR_PASSWORD_HASH", get_password_hash("hashed-pass"))

    assert verify_doctor_credentials("doctor@clinic.test", "hashed-pass")
    assert not verify_doctor_credentials("doctor@clinic.test", "s3cret-pass")


def test_unconfigured_credentials_raise_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "DOCTOR_PASSWORD", None)

    with pytest.raises(ConfigurationException):
        verify_doctor_credentials("doctor@clinic.test", "s3cret-pass")
