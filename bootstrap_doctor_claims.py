"""
One-time setup: give the Firebase account of DOCTOR_EMAIL the doctor role.

Run on the server with the Firebase service account configured:

    python bootstrap_doctor_claims.py [email]
"""

import asyncio
import sys

from firebase_admin import auth

from app.config import settings
from app.core.firebase import firebase
from app.core.logging import logger
from app.features.auth.service import AuthService


async def main(email: str) -> int:
    if not firebase.initialize():
        logger.error("Firebase is not configured - nothing to do")
        return 1

    try:
        user = await firebase.get_user_by_email(email)
    except auth.UserNotFoundError:
        logger.error(f"No Firebase user with email {email}")
        return 1

    claims = await AuthService.set_doctor_claims(firebase, user.uid)
    logger.info(f"Doctor claims {claims} set on {email} ({user.uid})")
    return 0


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else settings.DOCTOR_EMAIL
    if not target:
        raise SystemExit("Pass an email or set DOCTOR_EMAIL")
    raise SystemExit(asyncio.run(main(target)))
