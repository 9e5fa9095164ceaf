"""Application configuration settings."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import json


DEFAULT_JWT_SECRET = "dev-insecure-secret-change-me"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Dental Clinic API"
    API_PREFIX: str = "/api"
    PORT: int = 5174

    # CORS - Vite dev server and preview
    BACKEND_CORS_ORIGINS: str = '["http://localhost:5173", "http://localhost:4173"]'

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Doctor token signing
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    DOCTOR_TOKEN_EXPIRE_HOURS: int = 8

    # Single administrator (doctor) credential
    DOCTOR_EMAIL: Optional[str] = None
    DOCTOR_PASSWORD: Optional[str] = None
    DOCTOR_PASSWORD_HASH: Optional[str] = None  # bcrypt, wins over DOCTOR_PASSWORD

    # SMTP
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_SECURE: bool = False
    MAIL_FROM: Optional[str] = None
    MAIL_TO: Optional[str] = None
    MAIL_ACK: bool = False

    # Firebase service account
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CLIENT_EMAIL: Optional[str] = None
    FIREBASE_PRIVATE_KEY: Optional[str] = None
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None

    # Patient approval gate
    REQUIRE_APPROVAL: bool = Field(
        default=False,
        validation_alias=AliasChoices("REQUIRE_APPROVAL", "VITE_REQUIRE_APPROVAL"),
    )

    # Booking listings
    PUBLIC_BOOKINGS_LIMIT: int = 10
    DOCTOR_BOOKINGS_LIMIT: int = 500

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # .env is shared with the Vite frontend
    )

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from JSON string."""
        try:
            return json.loads(self.BACKEND_CORS_ORIGINS)
        except ValueError:
            return ["http://localhost:5173"]

    @property
    def doctor_configured(self) -> bool:
        return bool(self.DOCTOR_EMAIL and (self.DOCTOR_PASSWORD or self.DOCTOR_PASSWORD_HASH))

    @property
    def mail_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASS)

    @property
    def mail_from(self) -> Optional[str]:
        return self.MAIL_FROM or self.SMTP_USER

    @property
    def mail_to(self) -> Optional[str]:
        return self.MAIL_TO or self.SMTP_USER

    @property
    def firebase_configured(self) -> bool:
        """Inline service account or a credentials file."""
        inline = self.FIREBASE_PROJECT_ID and self.FIREBASE_CLIENT_EMAIL and self.FIREBASE_PRIVATE_KEY
        return bool(inline or self.GOOGLE_APPLICATION_CREDENTIALS)

    @property
    def using_default_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET


settings = Settings()
