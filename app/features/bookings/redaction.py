# Bookings Feature - Contact redaction for the public listing

from typing import Any, Dict, Optional


VISIBLE_PHONE_DIGITS = 3


def mask_email(email: Optional[str]) -> Optional[str]:
    """jane@example.com -> j***@example.com"""
    if not email:
        return email
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def mask_phone(phone: Optional[str]) -> Optional[str]:
    """Replace every digit but the last three with '*'; separators are kept."""
    if not phone:
        return phone
    digits_to_mask = max(sum(c.isdigit() for c in phone) - VISIBLE_PHONE_DIGITS, 0)
    masked = []
    for c in phone:
        if c.isdigit() and digits_to_mask > 0:
            masked.append("*")
            digits_to_mask -= 1
        else:
            masked.append(c)
    return "".join(masked)


def redact_booking(booking: Dict[str, Any]) -> Dict[str, Any]:
    redacted = dict(booking)
    redacted["email"] = mask_email(booking.get("email"))
    redacted["phone"] = mask_phone(booking.get("phone"))
    return redacted
