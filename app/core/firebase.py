"""Firebase Admin SDK wrapper: identity provider and Firestore client."""

from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore_async
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.core.logging import logger


class FirebaseGateway:
    """Lazily initialised access to Firebase Authentication and Firestore."""

    def __init__(self):
        self.app: Optional[firebase_admin.App] = None
        self._db = None

    @property
    def available(self) -> bool:
        return self.app is not None

    def initialize(self) -> bool:
        """Initialise the Admin SDK once; returns False when not configured."""
        if self.app is not None:
            return True

        if not settings.firebase_configured:
            logger.warning("Firebase service account not configured - identity and persistence disabled")
            return False

        try:
            if settings.FIREBASE_PRIVATE_KEY and settings.FIREBASE_CLIENT_EMAIL:
                logger.info("Firebase init: using inline service account")
                cred = credentials.Certificate({
                    "type": "service_account",
                    "project_id": settings.FIREBASE_PROJECT_ID,
                    "client_email": settings.FIREBASE_CLIENT_EMAIL,
                    # .env files usually carry the key with escaped newlines
                    "private_key": settings.FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
                    "token_uri": "https://oauth2.googleapis.com/token",
                })
            else:
                logger.info(f"Firebase init: using service account file {settings.GOOGLE_APPLICATION_CREDENTIALS}")
                cred = credentials.Certificate(settings.GOOGLE_APPLICATION_CREDENTIALS)

            options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
            self.app = firebase_admin.initialize_app(cred, options)
            logger.info(f"Connected to Firebase project: {self.app.project_id}")
            return True
        except (ValueError, IOError) as e:
            logger.error(f"Failed to initialize Firebase: {e}")
            self.app = None
            return False

    @property
    def db(self):
        """Async Firestore client."""
        if self._db is None:
            self._db = firestore_async.client(self.app)
        return self._db

    async def verify_id_token(self, id_token: str) -> Optional[Dict[str, Any]]:
        """Verify a Firebase ID token; decoded claims or None, never raises."""
        if not self.available:
            return None
        try:
            return await run_in_threadpool(auth.verify_id_token, id_token, self.app)
        except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError,
                auth.CertificateFetchError, ValueError) as e:
            logger.debug(f"Firebase ID token rejected: {type(e).__name__}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error verifying Firebase ID token: {type(e).__name__}: {e}")
            return None

    async def set_custom_claims(self, uid: str, claims: Dict[str, Any]) -> None:
        """Replace the custom claims of a user."""
        await run_in_threadpool(auth.set_custom_user_claims, uid, claims, self.app)
        logger.info(f"Custom claims set for {uid}: {claims}")

    async def get_user_by_email(self, email: str):
        return await run_in_threadpool(auth.get_user_by_email, email, self.app)


# Singleton instance
firebase = FirebaseGateway()
