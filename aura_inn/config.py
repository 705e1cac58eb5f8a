"""Application configuration using pydantic-settings."""

import warnings
from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_JWT_DEFAULT = "change-me-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Aura Inn Booking API"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/aura_inn.db"

    # Booking store backend: "sql" uses database_url, "json" uses the legacy
    # flat-file layout under data_dir.
    booking_store: Literal["sql", "json"] = "sql"
    data_dir: Path = Path("./data")

    # Redis (Celery broker for the reminder schedule)
    redis_url: str = "redis://localhost:6379/0"

    # JWT Auth
    jwt_secret_key: str = _INSECURE_JWT_DEFAULT
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30
    jwt_refresh_token_expire_days: int = 7

    # SMTP (an empty host disables outbound mail)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_from: str = "reservations@theaurainn.local"
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 30.0

    # Hotel
    hotel_name: str = "The Aura Inn"
    hotel_location_url: str = "https://maps.google.com"
    owner_email: str = ""
    admin_dashboard_url: str = "/admin/settings"
    timezone: str = "Asia/Kolkata"

    # Pre-arrival reminders
    reminder_hour: int = 9
    reminder_minute: int = 0

    # Booking intake
    allow_unknown_room_types: bool = False

    # Admin activity log
    activity_log_size: int = 200

    # Frontend
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    @model_validator(mode="after")
    def _validate_secrets(self) -> "Settings":
        """Reject insecure JWT secret in production and warn in development."""
        if self.jwt_secret_key == _INSECURE_JWT_DEFAULT:
            if self.environment == "production":
                raise ValueError(
                    "JWT_SECRET_KEY must be set to a strong random value in production. "
                    'Generate one with: python -c "import secrets; print(secrets.token_urlsafe(64))"'
                )
            warnings.warn(
                "Using default JWT secret — this is insecure and only acceptable for local development. "
                "Set JWT_SECRET_KEY in your .env file.",
                UserWarning,
                stacklevel=1,
            )
        return self

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses an async driver."""
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("sqlite:///"):
            url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return url

    @property
    def owner_address(self) -> str:
        """Configured address for new-booking alerts.

        The dashboard's ``generalData.adminEmail`` takes precedence over the SMTP
        addresses when ``OWNER_EMAIL`` is unset.
        """
        return self.owner_email or self.smtp_username or self.smtp_from


settings = Settings()
