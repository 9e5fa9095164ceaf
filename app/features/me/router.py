# Self-service Feature - Router
#
# Read-only views for a signed-in patient, resolved from the Firebase identity.

from fastapi import APIRouter, Depends
from typing import List
from app.database import DocumentStore, get_store
from app.features.auth.dependencies import require_durable_store, require_patient
from app.features.auth.identity import Patient
from app.features.bookings.schemas import BookingResponse
from app.features.bookings.service import BookingService
from app.features.patients.schemas import PatientResponse, RecordListResponse, RecordResponse
from app.features.patients.service import PatientService, RecordService
from app.shared.exceptions import NotFoundException


router = APIRouter(prefix="/me", tags=["Self-service"])


async def _own_profile(store: DocumentStore, patient: Patient) -> dict:
    profile = await PatientService.find_patient_for(store, patient.uid, patient.email)
    if not profile:
        raise NotFoundException("No patient profile found for this account")
    return profile


@router.get("/patient", response_model=PatientResponse)
async def my_profile(
    patient: Patient = Depends(require_patient),
    store: DocumentStore = Depends(require_durable_store),
):
    """The caller's own patient profile."""
    return PatientResponse.model_validate(await _own_profile(store, patient))


@router.get("/records", response_model=RecordListResponse)
async def my_records(
    patient: Patient = Depends(require_patient),
    store: DocumentStore = Depends(require_durable_store),
):
    """Medical records attached to the caller's profile, newest first."""
    profile = await _own_profile(store, patient)
    records = await RecordService.list_records(store, profile["id"])
    return RecordListResponse(
        records=[RecordResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.get("/bookings", response_model=List[BookingResponse])
async def my_bookings(
    patient: Patient = Depends(require_patient),
    store: DocumentStore = Depends(get_store),
):
    """Bookings made with the caller's email address."""
    if not patient.email:
        return []
    bookings = await BookingService.list_bookings_for_email(store, patient.email)
    return [BookingResponse.model_validate(b) for b in bookings]
