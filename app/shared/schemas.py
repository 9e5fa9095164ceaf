from pydantic import BaseModel
from typing import Optional, Any


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned by every exception handler."""

    error: str
    details: Optional[Any] = None
