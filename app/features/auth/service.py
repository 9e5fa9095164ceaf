from datetime import datetime
from typing import Any, Dict
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions
from app.config import settings
from app.core.firebase import FirebaseGateway
from app.core.security import DOCTOR_ROLE, create_doctor_token, verify_doctor_credentials
from app.shared.exceptions import (
    CredentialsException,
    NotFoundException,
    ServiceUnavailableException,
)
from app.core.logging import logger


class AuthService:
    """Doctor credential check and Firebase claim administration."""

    @staticmethod
    def login_doctor(email: str, password: str) -> tuple[str, str, datetime]:
        """
        Check the administrator credential and issue a doctor token.

        Returns:
            tuple: (token, email, expires_at)
        """
        if not verify_doctor_credentials(email, password):
            logger.warning("Doctor login rejected")
            raise CredentialsException("Invalid email or password")

        token, expires_at = create_doctor_token(settings.DOCTOR_EMAIL)
        logger.info("Doctor token issued")
        return token, settings.DOCTOR_EMAIL, expires_at

    @staticmethod
    async def set_doctor_claims(identity_provider: FirebaseGateway, uid: str) -> Dict[str, Any]:
        """
        Grant the doctor role to a Firebase user.

        Returns:
            dict: The claims that were set
        """
        if not identity_provider.available:
            raise ServiceUnavailableException("Firebase is not configured on the server")

        claims = {"role": DOCTOR_ROLE}
        try:
            await identity_provider.set_custom_claims(uid, claims)
        except firebase_auth.UserNotFoundError:
            raise NotFoundException("Firebase user not found")
        except firebase_exceptions.FirebaseError as e:
            logger.error(f"Failed to set doctor claims for {uid}: {type(e).__name__}: {e}")
            raise ServiceUnavailableException("Failed to update user claims")
        return claims
