from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from app.config import settings
from app.core.firebase import FirebaseGateway, firebase
from app.core.logging import logger
from app.database import DocumentStore, get_store
from app.features.auth.identity import Doctor, Identity, Patient, resolve_identity
from app.features.users.service import UserService
from app.shared.exceptions import (
    CredentialsException,
    ForbiddenException,
    ServiceUnavailableException,
)


# HTTP Bearer security scheme; guards decide how to treat a missing header
security = HTTPBearer(auto_error=False)


def get_identity_provider() -> FirebaseGateway:
    """Dependency for the Firebase identity provider."""
    return firebase


async def require_durable_store(store: DocumentStore = Depends(get_store)) -> DocumentStore:
    """Persistence features are disabled when only the in-memory fallback is available."""
    if not store.durable:
        raise ServiceUnavailableException("Persistence is not configured on the server")
    return store


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity_provider: FirebaseGateway = Depends(get_identity_provider),
) -> Identity:
    """
    Resolve the bearer token of the request into one identity.

    Args:
        credentials: Optional HTTP Bearer credentials

    Returns:
        Identity: Anonymous, Doctor or Patient
    """
    token = credentials.credentials if credentials else None
    return await resolve_identity(token, identity_provider)


async def require_doctor(identity: Identity = Depends(get_identity)) -> Doctor:
    """
    Dependency accepting a signed doctor token or a Firebase doctor claim.

    Raises:
        CredentialsException: If the caller is not a doctor
    """
    if not isinstance(identity, Doctor):
        logger.warning("Doctor-only endpoint called without doctor credentials")
        raise CredentialsException("Unauthorized")
    return identity


async def optional_doctor(identity: Identity = Depends(get_identity)) -> Optional[Doctor]:
    """Doctor identity if present, None otherwise. Never rejects."""
    return identity if isinstance(identity, Doctor) else None


async def require_patient(
    identity: Identity = Depends(get_identity),
    store: DocumentStore = Depends(get_store),
) -> Patient:
    """
    Dependency accepting only an approved (or approval-exempt) Firebase patient.

    Raises:
        CredentialsException: If no Firebase identity was presented
        ForbiddenException: If the identity is not a patient or is not approved
    """
    if isinstance(identity, Doctor):
        raise ForbiddenException("Patient access only")
    if not isinstance(identity, Patient):
        raise CredentialsException("Unauthorized")

    if identity.approved is False:
        raise ForbiddenException("Your account has not been approved")

    if not settings.REQUIRE_APPROVAL or identity.approved is True:
        return identity

    # Claims carry no approval yet; the registration record decides
    try:
        record = await UserService.get_registration(store, identity.uid)
    except Exception as e:
        logger.error(f"Approval lookup failed for {identity.uid}: {type(e).__name__}: {e}")
        raise ForbiddenException("Unable to verify account approval")

    status = record.get("status") if record else None
    if status == "approved":
        return identity
    if status == "rejected":
        raise ForbiddenException("Your registration was rejected. Please contact the clinic.")
    raise ForbiddenException("Your account is pending approval by the doctor")
