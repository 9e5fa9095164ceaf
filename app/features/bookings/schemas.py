# Bookings Feature - Schemas

from typing import List, Literal, Optional
from pydantic import Field, field_validator
from app.shared.models import CamelModel


EmailStatus = Literal["disabled", "pending", "sent", "error"]
BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]

REQUIRED_BOOKING_FIELDS = ("name", "phone", "date", "time", "address")


class BookingCreate(CamelModel):
    """
    Booking form submission.

    Every field is optional at the schema level so that missing required
    fields are reported together as one 400 error by the service.
    """
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=254)
    phone: Optional[str] = Field(None, max_length=30)
    date: Optional[str] = Field(None, max_length=20)
    time: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)
    reasons: List[str] = Field(default_factory=list)
    service: Optional[str] = Field(None, max_length=50)


class BookingUpdate(CamelModel):
    """Partial update made from the dashboard."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=254)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    date: Optional[str] = Field(None, min_length=1, max_length=20)
    time: Optional[str] = Field(None, min_length=1, max_length=20)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)
    reasons: Optional[List[str]] = None
    service: Optional[str] = Field(None, max_length=50)
    status: Optional[BookingStatus] = None

    @field_validator("name", "phone", "date", "time", "address", "notes", "reasons", "service", "status")
    @classmethod
    def reject_null(cls, v):
        # Leave a field out to keep it; null would blank a stored value
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class BookingResponse(CamelModel):
    """Full booking, as seen by the doctor or by the patient who made it."""
    id: str
    name: str
    email: Optional[str] = None
    phone: str
    date: str
    time: str
    address: Optional[str] = None
    notes: str = ""
    reasons: List[str] = []
    service: str = "GENERAL"
    status: str = "pending"
    email_status: Optional[EmailStatus] = None
    created_at: str
    updated_at: Optional[str] = None


class PublicBookingResponse(CamelModel):
    """Booking in the public listing: contact details masked, address and notes left out."""
    id: str
    name: str
    email: Optional[str] = None
    phone: str
    date: str
    time: str
    service: str = "GENERAL"
    created_at: str
