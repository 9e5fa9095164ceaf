from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings
from app.shared.exceptions import ConfigurationException
import hmac
import secrets


# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DOCTOR_ROLE = "doctor"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_doctor_credentials(email: str, password: str) -> bool:
    """
    Check an email/password pair against the configured administrator.

    Raises:
        ConfigurationException: If no doctor credential is configured
    """
    if not settings.doctor_configured:
        raise ConfigurationException("Doctor credentials are not configured on the server")

    email_ok = hmac.compare_digest(
        (email or "").strip().lower().encode(),
        settings.DOCTOR_EMAIL.strip().lower().encode(),
    )

    if settings.DOCTOR_PASSWORD_HASH:
        password_ok = verify_password(password or "", settings.DOCTOR_PASSWORD_HASH)
    else:
        password_ok = hmac.compare_digest((password or "").encode(), settings.DOCTOR_PASSWORD.encode())

    return email_ok and password_ok


def create_doctor_token(email: str, expires_delta: Optional[timedelta] = None) -> tuple[str, datetime]:
    """
    Create a signed doctor access token.

    Returns:
        tuple: (token, expires_at)
    """
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.DOCTOR_TOKEN_EXPIRE_HOURS)
    expire = issued_at + expires_delta

    to_encode = {
        "sub": DOCTOR_ROLE,
        "role": DOCTOR_ROLE,
        "email": email,
        "iat": issued_at,
        "exp": expire,
        "jti": secrets.token_hex(8),
    }
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    return encoded_jwt, expire


def decode_doctor_token(token: str) -> Optional[dict]:
    """Decode a doctor token; None unless signature, expiry and role all check out."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

    if payload.get("role") != DOCTOR_ROLE:
        return None
    return payload
