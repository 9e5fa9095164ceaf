# Auth Feature - Identity resolution

from dataclasses import dataclass
from typing import Optional, Union

from app.core.firebase import FirebaseGateway
from app.core.security import DOCTOR_ROLE, decode_doctor_token


PATIENT_ROLE = "patient"


@dataclass(frozen=True)
class Anonymous:
    """No usable credential was presented."""


@dataclass(frozen=True)
class Doctor:
    email: Optional[str]
    source: str  # "token" (signed doctor token) or "firebase" (custom claim)


@dataclass(frozen=True)
class Patient:
    uid: str
    email: Optional[str]
    approved: Optional[bool]  # None when the claim is absent


Identity = Union[Anonymous, Doctor, Patient]

ANONYMOUS = Anonymous()


async def resolve_identity(token: Optional[str], identity_provider: FirebaseGateway) -> Identity:
    """
    Resolve a bearer token to exactly one identity.

    The signed doctor token is tried first, then the Firebase ID token. A
    Firebase identity whose role claim is neither absent, "patient" nor
    "doctor" resolves to Anonymous.
    """
    if not token:
        return ANONYMOUS

    payload = decode_doctor_token(token)
    if payload is not None:
        return Doctor(email=payload.get("email"), source="token")

    claims = await identity_provider.verify_id_token(token)
    if not claims:
        return ANONYMOUS

    role = claims.get("role")
    if role == DOCTOR_ROLE:
        return Doctor(email=claims.get("email"), source="firebase")
    if role in (None, PATIENT_ROLE):
        approved = claims.get("approved")
        return Patient(
            uid=claims.get("uid") or claims.get("sub"),
            email=claims.get("email"),
            approved=approved if isinstance(approved, bool) else None,
        )
    return ANONYMOUS
