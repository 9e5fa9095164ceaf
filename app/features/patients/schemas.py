# Patient Management Feature - Schemas

from typing import Optional, List
from pydantic import EmailStr, Field, field_validator
from app.shared.models import CamelModel


# ============== Patient Profile ==============

class PatientBase(CamelModel):
    """Contact and medical fields shared by create and update."""
    uid: Optional[str] = Field(None, max_length=128, description="Firebase UID of the patient, if linked")
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, pattern=r'^(Male|Female|Other)$')
    mobile: Optional[str] = Field(None, max_length=30)
    address_line1: Optional[str] = Field(None, max_length=200)
    address_line2: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    emergency_contact_name: Optional[str] = Field(None, max_length=100)
    emergency_contact_phone: Optional[str] = Field(None, max_length=30)
    notes: Optional[str] = Field(None, max_length=5000)


class CreatePatientRequest(PatientBase):
    """Request schema for creating a patient profile."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    allergies: List[str] = Field(default_factory=list)
    medical_conditions: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)


class UpdatePatientRequest(PatientBase):
    """Request schema for updating patient information."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    allergies: Optional[List[str]] = None
    medical_conditions: Optional[List[str]] = None
    medications: Optional[List[str]] = None

    @field_validator("name", "email", "allergies", "medical_conditions", "medications")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class PatientResponse(PatientBase):
    """Response schema for patient data."""
    id: str
    name: str
    email: str
    allergies: List[str] = []
    medical_conditions: List[str] = []
    medications: List[str] = []
    created_at: str
    updated_at: Optional[str] = None


class PatientListResponse(CamelModel):
    """Response schema for list of patients."""
    patients: List[PatientResponse]
    total: int


# ============== Medical Records ==============

class CreateRecordRequest(CamelModel):
    """A visit entry in the patient's medical record."""
    date: str = Field(..., min_length=1, max_length=20)
    diagnosis: Optional[str] = Field(None, max_length=2000)
    treatment: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=5000)
    prescription: Optional[str] = Field(None, max_length=2000)


class UpdateRecordRequest(CamelModel):
    date: Optional[str] = Field(None, min_length=1, max_length=20)
    diagnosis: Optional[str] = Field(None, max_length=2000)
    treatment: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=5000)
    prescription: Optional[str] = Field(None, max_length=2000)

    @field_validator("date")
    @classmethod
    def date_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Visit date cannot be null")
        return v


class RecordResponse(CamelModel):
    id: str
    patient_id: str
    date: str
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    notes: Optional[str] = None
    prescription: Optional[str] = None
    created_by: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None


class RecordListResponse(CamelModel):
    records: List[RecordResponse]
    total: int
