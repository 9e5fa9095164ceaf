from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from typing import Optional
from app.core.firebase import FirebaseGateway
from app.core.security import decode_doctor_token
from app.features.auth.schemas import (
    LoginRequest,
    LoginResponse,
    ValidateResponse,
    SetDoctorClaimsRequest,
    SetDoctorClaimsResponse,
)
from app.features.auth.service import AuthService
from app.features.auth.dependencies import get_identity_provider, require_doctor, security
from app.features.auth.identity import Doctor
from app.shared.exceptions import CredentialsException


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(login_data: LoginRequest):
    """
    Authenticate the clinic doctor and return a signed token.

    - **email**: Doctor email
    - **password**: Doctor password
    """
    token, email, expires_at = AuthService.login_doctor(login_data.email, login_data.password)

    return LoginResponse(token=token, email=email, expires_at=expires_at)


@router.get("/validate", response_model=ValidateResponse)
async def validate(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)):
    """
    Check a doctor token.

    Only the signed doctor token is accepted here; Firebase ID tokens are not.
    """
    payload = decode_doctor_token(credentials.credentials) if credentials else None
    if payload is None:
        raise CredentialsException("Invalid or expired token")

    return ValidateResponse(
        role=payload["role"],
        email=payload.get("email") or "",
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


@router.post("/set-doctor-claims", response_model=SetDoctorClaimsResponse)
async def set_doctor_claims(
    request: SetDoctorClaimsRequest,
    doctor: Doctor = Depends(require_doctor),
    identity_provider: FirebaseGateway = Depends(get_identity_provider),
):
    """
    Give a Firebase user the doctor role.

    Requires doctor authentication.

    - **uid**: Firebase user UID
    """
    claims = await AuthService.set_doctor_claims(identity_provider, request.uid)

    return SetDoctorClaimsResponse(uid=request.uid, claims=claims)
