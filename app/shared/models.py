from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (sortable, as stored in Firestore)."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Lowercased, trimmed email; Firebase reports sign-in emails in lowercase."""
    if email is None:
        return None
    return email.strip().lower() or None
