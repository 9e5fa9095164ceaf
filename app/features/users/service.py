# Users Feature - Service

from typing import Any, Dict, List, Optional
from firebase_admin import exceptions as firebase_exceptions
from app.core.firebase import FirebaseGateway
from app.core.logging import logger
from app.database import DocumentStore
from app.features.users.schemas import RegisterRequest
from app.shared.exceptions import NotFoundException
from app.shared.models import normalize_email, utc_now_iso


USERS_COLLECTION = "users"


class UserService:
    """Registration records and the patient approval workflow."""

    @staticmethod
    async def register(store: DocumentStore, request: RegisterRequest) -> tuple[Dict[str, Any], bool]:
        """
        Create a pending registration for a freshly signed-up Firebase user.

        An existing record is returned untouched so a repeated signup can never
        move an approved or rejected user back to pending.

        Returns:
            tuple: (record, created)
        """
        existing = await store.get(USERS_COLLECTION, request.uid)
        if existing:
            logger.info(f"Registration for {request.uid} already exists with status {existing.get('status')}")
            return existing, False

        record = {
            "uid": request.uid,
            "name": request.name,
            "email": normalize_email(request.email),
            "status": "pending",
            "createdAt": utc_now_iso(),
            "approvedAt": None,
            "approvedBy": None,
        }
        await store.create(USERS_COLLECTION, record, doc_id=request.uid)
        logger.info(f"Registered {request.uid} as pending")
        return record, True

    @staticmethod
    async def get_registration(store: DocumentStore, uid: str) -> Optional[Dict[str, Any]]:
        return await store.get(USERS_COLLECTION, uid)

    @staticmethod
    async def list_pending(store: DocumentStore) -> List[Dict[str, Any]]:
        return await store.list(
            USERS_COLLECTION,
            filters=[("status", "pending")],
            order_by="createdAt",
        )

    @staticmethod
    async def set_approval(
        store: DocumentStore,
        identity_provider: FirebaseGateway,
        uid: str,
        approve: bool,
        decided_by: Optional[str],
    ) -> tuple[Dict[str, Any], bool]:
        """
        Approve or reject a registration and mirror the decision into custom claims.

        Repeating a decision overwrites it; the status is never set back to pending.

        Returns:
            tuple: (record, claims_updated)
        """
        record = await store.get(USERS_COLLECTION, uid)
        if not record:
            raise NotFoundException("Registration not found")

        changes = {
            "status": "approved" if approve else "rejected",
            "approvedAt": utc_now_iso(),
            "approvedBy": decided_by,
        }
        await store.update(USERS_COLLECTION, uid, changes)
        record.update(changes)
        logger.info(f"Registration {uid} {changes['status']} by {decided_by}")

        claims_updated = False
        if identity_provider.available:
            try:
                await identity_provider.set_custom_claims(uid, {"role": "patient", "approved": approve})
                claims_updated = True
            except (firebase_exceptions.FirebaseError, ValueError) as e:
                logger.error(f"Failed to set approval claims for {uid}: {type(e).__name__}: {e}")
        else:
            logger.warning(f"Firebase unavailable - approval claims for {uid} not set")

        return record, claims_updated
