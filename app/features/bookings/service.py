# Bookings Feature - Service

from typing import Any, Dict, List
from app.config import settings
from app.core.email import MailState, send_booking_acknowledgement, send_booking_notification
from app.core.logging import logger
from app.database import DocumentStore
from app.features.bookings.redaction import redact_booking
from app.features.bookings.schemas import REQUIRED_BOOKING_FIELDS, BookingCreate, BookingUpdate
from app.shared.exceptions import BadRequestException, NotFoundException
from app.shared.models import normalize_email, utc_now_iso


BOOKINGS_COLLECTION = "bookings"


class BookingService:
    """Service class for booking operations."""

    @staticmethod
    def missing_fields(data: BookingCreate) -> List[str]:
        missing = []
        for field in REQUIRED_BOOKING_FIELDS:
            value = getattr(data, field)
            if value is None or not str(value).strip():
                missing.append(field)
        return missing

    @staticmethod
    async def create_booking(store: DocumentStore, data: BookingCreate) -> Dict[str, Any]:
        """
        Store a booking request.

        The returned ``emailStatus`` is "disabled" when mail is off and
        "pending" when a notification will be sent in the background.
        """
        missing = BookingService.missing_fields(data)
        if missing:
            raise BadRequestException("Missing required fields", details=missing)

        booking = {
            "name": data.name.strip(),
            "email": normalize_email(data.email),
            "phone": data.phone.strip(),
            "date": data.date,
            "time": data.time,
            "address": data.address.strip(),
            "notes": data.notes or "",
            "reasons": data.reasons,
            "service": data.service or "GENERAL",
            "status": "pending",
            "createdAt": utc_now_iso(),
            "emailStatus": "pending" if MailState.ready else "disabled",
        }
        booking_id = await store.create(BOOKINGS_COLLECTION, booking)
        booking["id"] = booking_id
        logger.info(f"Created booking {booking_id} for {booking['date']} {booking['time']}")
        return booking

    @staticmethod
    async def notify_booking(store: DocumentStore, booking: Dict[str, Any]) -> None:
        """
        Send the booking e-mails and record the outcome on the booking.

        Runs after the response has been sent; failures are logged, never raised.
        """
        try:
            sent = await send_booking_notification(booking)
            if sent and settings.MAIL_ACK and booking.get("email"):
                if not await send_booking_acknowledgement(booking):
                    logger.warning(f"[mail] ack failed for booking {booking['id']}")

            email_status = "sent" if sent else "error"
            await store.update(BOOKINGS_COLLECTION, booking["id"], {"emailStatus": email_status})
            logger.info(f"[mail] booking {booking['id']} email status: {email_status}")
        except Exception as e:
            logger.error(f"[mail] notification for booking {booking.get('id')} failed: {type(e).__name__}: {e}")

    @staticmethod
    async def list_bookings(store: DocumentStore, limit: int) -> List[Dict[str, Any]]:
        """Newest bookings first."""
        return await store.list(
            BOOKINGS_COLLECTION,
            order_by="createdAt",
            descending=True,
            limit=limit,
        )

    @staticmethod
    async def list_public_bookings(store: DocumentStore) -> List[Dict[str, Any]]:
        bookings = await BookingService.list_bookings(store, settings.PUBLIC_BOOKINGS_LIMIT)
        return [redact_booking(b) for b in bookings]

    @staticmethod
    async def list_bookings_for_email(store: DocumentStore, email: str) -> List[Dict[str, Any]]:
        return await store.list(
            BOOKINGS_COLLECTION,
            filters=[("email", normalize_email(email))],
            order_by="createdAt",
            descending=True,
        )

    @staticmethod
    async def get_booking(store: DocumentStore, booking_id: str) -> Dict[str, Any]:
        booking = await store.get(BOOKINGS_COLLECTION, booking_id)
        if not booking:
            raise NotFoundException("Booking not found")
        return booking

    @staticmethod
    async def update_booking(store: DocumentStore, booking_id: str, update_data: BookingUpdate) -> Dict[str, Any]:
        changes = update_data.model_dump(exclude_unset=True, by_alias=True)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
        changes["updatedAt"] = utc_now_iso()

        if not await store.update(BOOKINGS_COLLECTION, booking_id, changes):
            raise NotFoundException("Booking not found")
        logger.info(f"Updated booking {booking_id}: {sorted(changes)}")
        return await BookingService.get_booking(store, booking_id)

    @staticmethod
    async def delete_booking(store: DocumentStore, booking_id: str) -> Dict[str, Any]:
        """Delete a booking and return it as it was."""
        booking = await BookingService.get_booking(store, booking_id)
        await store.delete(BOOKINGS_COLLECTION, booking_id)
        logger.info(f"Deleted booking {booking_id}")
        return booking
