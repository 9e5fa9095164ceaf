# Patient Management Feature - Service

from typing import Any, Dict, List, Optional
from app.database import DocumentStore
from app.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    CreateRecordRequest,
    UpdateRecordRequest,
)
from app.core.logging import logger
from app.shared.exceptions import NotFoundException
from app.shared.models import normalize_email, utc_now_iso


PATIENTS_COLLECTION = "patients"


def records_collection(patient_id: str) -> str:
    return f"{PATIENTS_COLLECTION}/{patient_id}/records"


class PatientService:
    """Service class for patient profile operations."""

    @staticmethod
    async def create_patient(store: DocumentStore, request: CreatePatientRequest) -> Dict[str, Any]:
        """Create a patient profile; the document id doubles as the patient id."""
        patient = request.model_dump(by_alias=True)
        patient["email"] = normalize_email(patient["email"])
        patient["createdAt"] = utc_now_iso()

        patient_id = await store.create(PATIENTS_COLLECTION, patient)
        patient["id"] = patient_id
        logger.info(f"Created patient {patient_id}")
        return patient

    @staticmethod
    async def list_patients(store: DocumentStore) -> List[Dict[str, Any]]:
        return await store.list(PATIENTS_COLLECTION, order_by="createdAt", descending=True)

    @staticmethod
    async def get_patient(store: DocumentStore, patient_id: str) -> Dict[str, Any]:
        """Get a patient by id."""
        patient = await store.get(PATIENTS_COLLECTION, patient_id)
        if not patient:
            raise NotFoundException("Patient not found")
        return patient

    @staticmethod
    async def update_patient(store: DocumentStore, patient_id: str, request: UpdatePatientRequest) -> Dict[str, Any]:
        changes = request.model_dump(exclude_unset=True, by_alias=True)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
        changes["updatedAt"] = utc_now_iso()

        if not await store.update(PATIENTS_COLLECTION, patient_id, changes):
            raise NotFoundException("Patient not found")
        logger.info(f"Updated patient {patient_id}")
        return await PatientService.get_patient(store, patient_id)

    @staticmethod
    async def delete_patient(store: DocumentStore, patient_id: str) -> None:
        """Delete a patient together with their medical records."""
        await PatientService.get_patient(store, patient_id)

        # Firestore does not cascade deletes into sub-collections
        for record in await store.list(records_collection(patient_id)):
            await store.delete(records_collection(patient_id), record["id"])
        await store.delete(PATIENTS_COLLECTION, patient_id)
        logger.info(f"Deleted patient {patient_id}")

    @staticmethod
    async def find_patient_for(store: DocumentStore, uid: str, email: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Find the profile belonging to a signed-in patient.

        A profile linked by UID wins. Otherwise the oldest profile with the
        same email is used; emails are not unique, so this is a best match.
        """
        linked = await store.list(PATIENTS_COLLECTION, filters=[("uid", uid)], limit=1)
        if linked:
            return linked[0]
        if not email:
            return None

        matches = await store.list(
            PATIENTS_COLLECTION,
            filters=[("email", normalize_email(email))],
            order_by="createdAt",
        )
        if len(matches) > 1:
            logger.warning(f"{len(matches)} patient profiles share the email of {uid}; using the oldest")
        return matches[0] if matches else None


class RecordService:
    """Service class for medical records of a patient."""

    @staticmethod
    async def create_record(
        store: DocumentStore,
        patient_id: str,
        request: CreateRecordRequest,
        created_by: Optional[str],
    ) -> Dict[str, Any]:
        await PatientService.get_patient(store, patient_id)

        record = request.model_dump(by_alias=True)
        record.update({
            "patientId": patient_id,
            "createdBy": created_by,
            "createdAt": utc_now_iso(),
        })
        record_id = await store.create(records_collection(patient_id), record)
        record["id"] = record_id
        logger.info(f"Created record {record_id} for patient {patient_id}")
        return record

    @staticmethod
    async def list_records(store: DocumentStore, patient_id: str) -> List[Dict[str, Any]]:
        """Records of a patient, newest visit first."""
        await PatientService.get_patient(store, patient_id)
        return await store.list(records_collection(patient_id), order_by="date", descending=True)

    @staticmethod
    async def get_record(store: DocumentStore, patient_id: str, record_id: str) -> Dict[str, Any]:
        record = await store.get(records_collection(patient_id), record_id)
        if not record:
            raise NotFoundException("Record not found")
        return record

    @staticmethod
    async def update_record(
        store: DocumentStore,
        patient_id: str,
        record_id: str,
        request: UpdateRecordRequest,
    ) -> Dict[str, Any]:
        changes = request.model_dump(exclude_unset=True, by_alias=True)
        changes["updatedAt"] = utc_now_iso()

        if not await store.update(records_collection(patient_id), record_id, changes):
            raise NotFoundException("Record not found")
        return await RecordService.get_record(store, patient_id, record_id)

    @staticmethod
    async def delete_record(store: DocumentStore, patient_id: str, record_id: str) -> None:
        if not await store.delete(records_collection(patient_id), record_id):
            raise NotFoundException("Record not found")
        logger.info(f"Deleted record {record_id} of patient {patient_id}")
