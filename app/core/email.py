import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape
from app.config import settings
from app.core.logging import logger
from typing import Any, Dict, List, Optional


class MailState:
    """Whether the SMTP transport is configured and passed verification."""

    ready: bool = False


async def verify_smtp() -> bool:
    """
    Verify the SMTP transport once at startup.

    Returns:
        bool: True if the server accepted a login
    """
    if not settings.mail_configured:
        logger.info("[mail] SMTP variables not fully set - email disabled")
        MailState.ready = False
        return False

    smtp = aiosmtplib.SMTP(
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        use_tls=settings.SMTP_SECURE,
    )
    try:
        await smtp.connect()
        await smtp.login(settings.SMTP_USER, settings.SMTP_PASS)
        await smtp.quit()
        MailState.ready = True
        logger.info("[mail] transporter verified")
    except (aiosmtplib.SMTPException, OSError) as e:
        MailState.ready = False
        logger.error(f"[mail] setup failed: {type(e).__name__}: {e}")
    return MailState.ready


async def send_email(
    to: List[str],
    subject: str,
    body: str,
    html_body: Optional[str] = None
) -> bool:
    """
    Send an email through the configured SMTP server.

    Args:
        to: List of recipient email addresses
        subject: Email subject
        body: Plain text email body
        html_body: Optional HTML email body

    Returns:
        bool: True if email sent successfully
    """
    logger.info(f"Sending email to {', '.join(to)}")
    logger.debug(f"SMTP: {settings.SMTP_HOST}:{settings.SMTP_PORT}, User: {settings.SMTP_USER}")

    message = MIMEMultipart("alternative")
    message["From"] = settings.mail_from
    message["To"] = ", ".join(to)
    message["Subject"] = subject

    message.attach(MIMEText(body, "plain"))
    if html_body:
        message.attach(MIMEText(html_body, "html"))

    try:
        await aiosmtplib.send(
            message,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            use_tls=settings.SMTP_SECURE,
        )
        logger.info(f"Email sent successfully to {', '.join(to)}")
        return True
    except aiosmtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP authentication failed: {e}")
        logger.error(f"   SMTP User: {settings.SMTP_USER}")
        logger.error(f"   SMTP Host: {settings.SMTP_HOST}:{settings.SMTP_PORT}")
        return False
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error(f"SMTP error sending email to {to}: {type(e).__name__}: {e}")
        return False


async def send_booking_notification(booking: Dict[str, Any]) -> bool:
    """
    Notify the clinic inbox about a new booking request.

    Args:
        booking: Stored booking document

    Returns:
        bool: True if email sent successfully
    """
    service = booking.get("service") or "GENERAL"
    subject = f"New Booking: {booking.get('name')} ({service})"

    fields = [
        ("Name", booking.get("name")),
        ("Email", booking.get("email")),
        ("Phone", booking.get("phone")),
        ("Address", booking.get("address")),
        ("Service", service),
        ("Reasons", ", ".join(booking.get("reasons") or [])),
        ("Date/Time", f"{booking.get('date')} @ {booking.get('time')}"),
        ("Notes", booking.get("notes")),
    ]

    body = "New Booking Request\n\n" + "\n".join(
        f"{label}: {value or '-'}" for label, value in fields
    ) + f"\n\nSubmitted at {booking.get('createdAt')}\n"

    rows = "\n".join(
        f"<p><strong>{label}:</strong> {escape(str(value or '-'))}</p>" for label, value in fields
    )
    html_body = f"""
    <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #0ea5e9;">New Booking Request</h2>
                {rows}
                <p style="color: #999; font-size: 12px;"><em>Submitted at {escape(str(booking.get('createdAt')))}</em></p>
            </div>
        </body>
    </html>
    """

    return await send_email([settings.mail_to], subject, body, html_body)


async def send_booking_acknowledgement(booking: Dict[str, Any]) -> bool:
    """Tell the patient their booking request was received."""
    subject = "We received your booking request"
    body = (
        f"Hi {booking.get('name')}, we have received your booking request for "
        f"{booking.get('service') or 'GENERAL'} on {booking.get('date')} at {booking.get('time')}. "
        "We will confirm soon."
    )
    return await send_email([booking["email"]], subject, body)
