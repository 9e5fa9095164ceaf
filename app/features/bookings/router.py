# Bookings Feature - Router

from fastapi import APIRouter, BackgroundTasks, Depends, status
from typing import List, Optional, Union
from app.database import DocumentStore, get_store
from app.features.auth.dependencies import optional_doctor, require_doctor
from app.features.auth.identity import Doctor
from app.features.bookings.schemas import (
    BookingCreate,
    BookingUpdate,
    BookingResponse,
    PublicBookingResponse,
)
from app.features.bookings.service import BookingService
from app.config import settings


router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("", response_model=None)
async def list_bookings(
    doctor: Optional[Doctor] = Depends(optional_doctor),
    store: DocumentStore = Depends(get_store),
) -> Union[List[BookingResponse], List[PublicBookingResponse]]:
    """
    List bookings, newest first.

    A doctor gets the full list; everyone else gets the latest few with
    email and phone masked.
    """
    if doctor is not None:
        bookings = await BookingService.list_bookings(store, settings.DOCTOR_BOOKINGS_LIMIT)
        return [BookingResponse.model_validate(b) for b in bookings]

    bookings = await BookingService.list_public_bookings(store)
    return [PublicBookingResponse.model_validate(b) for b in bookings]


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_store),
):
    """
    Submit a booking request from the public form.

    - **name**, **phone**, **date**, **time**, **address**: required
    - **email**, **notes**, **reasons**, **service**: optional
    """
    booking = await BookingService.create_booking(store, data)

    if booking["emailStatus"] == "pending":
        background_tasks.add_task(BookingService.notify_booking, store, dict(booking))

    return BookingResponse.model_validate(booking)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(get_store),
):
    """Get a single booking. Requires doctor authentication."""
    return BookingResponse.model_validate(await BookingService.get_booking(store, booking_id))


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    update_data: BookingUpdate,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(get_store),
):
    """Update a booking. Requires doctor authentication."""
    booking = await BookingService.update_booking(store, booking_id, update_data)
    return BookingResponse.model_validate(booking)


@router.delete("/{booking_id}", response_model=BookingResponse)
async def delete_booking(
    booking_id: str,
    doctor: Doctor = Depends(require_doctor),
    store: DocumentStore = Depends(get_store),
):
    """Delete a booking and return it. Requires doctor authentication."""
    return BookingResponse.model_validate(await BookingService.delete_booking(store, booking_id))
