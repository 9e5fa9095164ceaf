# Users Feature - Schemas

from typing import List, Literal, Optional
from pydantic import EmailStr, Field
from app.shared.models import CamelModel


RegistrationStatus = Literal["pending", "approved", "rejected"]


class RegisterRequest(CamelModel):
    """Registration submitted right after Firebase signup."""
    uid: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class ApproveRequest(CamelModel):
    """Doctor decision on a pending registration."""
    uid: str = Field(..., min_length=1, max_length=128)
    approve: bool = True


class RegistrationResponse(CamelModel):
    uid: str
    name: str
    email: str
    status: RegistrationStatus
    created_at: str
    approved_at: Optional[str] = None
    approved_by: Optional[str] = None


class PendingListResponse(CamelModel):
    users: List[RegistrationResponse]
    total: int


class ApproveResponse(CamelModel):
    user: RegistrationResponse
    claims_updated: bool


class StatusResponse(CamelModel):
    uid: str
    status: RegistrationStatus
