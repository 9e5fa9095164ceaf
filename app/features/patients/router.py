# Patient Management Feature - Router

from fastapi import APIRouter, Depends, status
from app.database import DocumentStore
from app.features.auth.dependencies import require_doctor, require_durable_store
from app.features.auth.identity import Doctor
from app.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    PatientResponse,
    PatientListResponse,
    CreateRecordRequest,
    UpdateRecordRequest,
    RecordResponse,
    RecordListResponse,
)
from app.features.patients.service import PatientService, RecordService
from app.shared.schemas import MessageResponse


router = APIRouter(prefix="/patients", tags=["Patients"])


# ============== Patient Profiles (Require Doctor Auth) ==============

@router.get("", response_model=PatientListResponse)
async def list_patients(
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    """List all patient profiles, newest first."""
    patients = await PatientService.list_patients(store)
    return PatientListResponse(
        patients=[PatientResponse.model_validate(p) for p in patients],
        total=len(patients),
    )


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
    request: CreatePatientRequest,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    """Create a patient profile."""
    return PatientResponse.model_validate(await PatientService.create_patient(store, request))


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: str,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    """Get a patient profile."""
    return PatientResponse.model_validate(await PatientService.get_patient(store, patient_id))


@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: str,
    request: UpdatePatientRequest,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    """Update a patient's contact or medical fields."""
    patient = await PatientService.update_patient(store, patient_id, request)
    return PatientResponse.model_validate(patient)


@router.delete("/{patient_id}", response_model=MessageResponse)
async def delete_patient(
    patient_id: str,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    """Delete a patient profile and all of its records."""
    await PatientService.delete_patient(store, patient_id)
    return MessageResponse(message="Patient deleted successfully")


# ============== Medical Records (Require Doctor Auth) ==============

@router.get("/{patient_id}/records", response_model=RecordListResponse)
async def list_records(
    patient_id: str,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    records = await RecordService.list_records(store, patient_id)
    return RecordListResponse(
        records=[RecordResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.post("/{patient_id}/records", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    patient_id: str,
    request: CreateRecordRequest,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    """
    Add a visit to a patient's medical record.

    - **date**: Visit date
    - **diagnosis**, **treatment**, **notes**, **prescription**: optional
    """
    record = await RecordService.create_record(store, patient_id, request, doctor.email)
    return RecordResponse.model_validate(record)


@router.get("/{patient_id}/records/{record_id}", response_model=RecordResponse)
async def get_record(
    patient_id: str,
    record_id: str,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    return RecordResponse.model_validate(await RecordService.get_record(store, patient_id, record_id))


@router.put("/{patient_id}/records/{record_id}", response_model=RecordResponse)
async def update_record(
    patient_id: str,
    record_id: str,
    request: UpdateRecordRequest,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    record = await RecordService.update_record(store, patient_id, record_id, request)
    return RecordResponse.model_validate(record)


@router.delete("/{patient_id}/records/{record_id}", response_model=MessageResponse)
async def delete_record(
    patient_id: str,
    record_id: str,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(require_durable_store),
):
    await RecordService.delete_record(store, patient_id, record_id)
    return MessageResponse(message="Record deleted successfully")
