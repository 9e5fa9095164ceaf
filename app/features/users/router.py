# Users Feature - Router

from fastapi import APIRouter, Depends, Response, status
from app.core.firebase import FirebaseGateway
from app.database import DocumentStore
from app.features.auth.dependencies import get_identity_provider, require_doctor, require_durable_store
from app.features.auth.identity import Doctor
from app.features.users.schemas import (
    RegisterRequest,
    ApproveRequest,
    RegistrationResponse,
    PendingListResponse,
    ApproveResponse,
    StatusResponse,
)
from app.features.users.service import UserService
from app.shared.exceptions import NotFoundException


router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    response: Response,
    store: DocumentStore = Depends(require_durable_store),
):
    """
    Record a new patient signup as pending approval.

    Calling it again for the same UID returns the existing record unchanged.
    """
    record, created = await UserService.register(store, request)
    if not created:
        response.status_code = status.HTTP_200_OK
    return RegistrationResponse.model_validate(record)


@router.get("/pending", response_model=PendingListResponse)
async def list_pending(
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    """List registrations waiting for a decision. Requires doctor authentication."""
    records = await UserService.list_pending(store)
    return PendingListResponse(
        users=[RegistrationResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.post("/approve", response_model=ApproveResponse)
async def approve(
    request: ApproveRequest,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
    identity_provider: FirebaseGateway = Depends(get_identity_provider),
):
    """
    Approve or reject a registration.

    Requires doctor authentication.

    - **uid**: Firebase UID of the registration
    - **approve**: true to approve, false to reject
    """
    record, claims_updated = await UserService.set_approval(
        store, identity_provider, request.uid, request.approve, doctor.email
    )
    return ApproveResponse(
        user=RegistrationResponse.model_validate(record),
        claims_updated=claims_updated,
    )


@router.get("/status/{uid}", response_model=StatusResponse)
async def get_status(uid: str, store: DocumentStore = Depends(require_durable_store)):
    """Registration status, used by the client to decide whether to sign out."""
    record = await UserService.get_registration(store, uid)
    if not record:
        raise NotFoundException("Registration not found")
    return StatusResponse(uid=uid, status=record["status"])
