from typing import Dict, Any
from datetime import datetime
from pydantic import ConfigDict, Field
from app.shared.models import CamelModel


class LoginRequest(CamelModel):
    """Doctor login request."""
    email: str = Field(..., min_length=1, max_length=254)
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "doctor@clinic.example",
                "password": "secret",
            }
        }
    )


class LoginResponse(CamelModel):
    """Doctor login response."""
    token: str
    token_type: str = "bearer"
    role: str = "doctor"
    email: str
    expires_at: datetime


class ValidateResponse(CamelModel):
    valid: bool = True
    role: str
    email: str
    expires_at: datetime


class SetDoctorClaimsRequest(CamelModel):
    uid: str = Field(..., min_length=1, max_length=128)


class SetDoctorClaimsResponse(CamelModel):
    success: bool = True
    uid: str
    claims: Dict[str, Any]
