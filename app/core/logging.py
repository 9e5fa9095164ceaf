"""Centralized logging configuration."""

import logging
import re
import sys

from app.config import settings


# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("google", "urllib3", "grpc", "aiosmtplib")

_BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9\-_\.=]+")


class TokenRedactingFilter(logging.Filter):
    """Masks bearer tokens that end up in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "Bearer" in message:
            record.msg = _BEARER_PATTERN.sub(r"\1[redacted]", message)
            record.args = None
        return True


def setup_logging() -> logging.Logger:
    """Configure and return the application logger."""

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logger = logging.getLogger("dental_clinic")
    logger.setLevel(level)

    # Prevent duplicate handlers on reload
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.addFilter(TokenRedactingFilter())
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug(f"Logging configured with level: {logging.getLevelName(level)}")

    return logger


# Create the global logger instance
logger = setup_logging()
