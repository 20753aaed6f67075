# backend/tennisplan/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional, Set

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

from .constants import BRAND_NAME


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


PROD_SITE_MODES: Set[str] = {"prod", "production", "live"}


def _classify_site_mode(raw_site_mode: str | None) -> tuple[str, bool]:
    """Return normalized site mode and whether it is a production mode."""

    normalized = (raw_site_mode or "").strip().lower()
    return normalized, normalized in PROD_SITE_MODES


class Settings(BaseSettings):
    # Environment (derived from SITE_MODE)
    environment: str = "production" if _classify_site_mode(os.getenv("SITE_MODE", "local"))[1] else "development"
    is_testing: bool = False  # Set to True when running tests

    # Database
    database_url: str = Field(
        default="sqlite:///./tennisplan.db",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL (sqlite or postgresql)",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")
    auto_create_tables: bool = Field(
        default=True,
        alias="AUTO_CREATE_TABLES",
        description="Create missing tables on startup",
    )

    # School
    school_name: str = Field(default=BRAND_NAME, alias="SCHOOL_NAME")
    school_timezone: str = Field(default="Europe/Berlin", alias="SCHOOL_TIMEZONE")
    school_address: str = Field(default="", alias="SCHOOL_ADDRESS")
    school_email: str = Field(default="info@tennisschule.example", alias="SCHOOL_EMAIL")
    school_iban: str = Field(default="", alias="SCHOOL_IBAN")
    invoice_payment_days: int = Field(default=14, ge=0, alias="INVOICE_PAYMENT_DAYS")
    default_trainer_name: str = "Trainer"

    # Email settings
    email_provider: Literal["console", "resend"] = Field(
        default="console",
        alias="EMAIL_PROVIDER",
        description="Email provider name",
    )
    resend_api_key: Optional[SecretStr] = Field(
        default=None,
        alias="RESEND_API_KEY",
        description="API key for Resend provider (optional)",
    )
    from_email: str = Field(default="Tennisschule <noreply@tennisschule.example>", alias="FROM_EMAIL")
    email_reply_to: Optional[str] = Field(default=None, alias="EMAIL_REPLY_TO")

    # HTTP
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
        alias="ALLOWED_ORIGINS",
        description="Comma separated list of CORS origins",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("school_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject unknown timezone names early instead of at first request."""
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
