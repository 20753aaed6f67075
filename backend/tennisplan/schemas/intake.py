# backend/tennisplan/schemas/intake.py
"""
Schemas for the public intake forms.

Registration requests and SEPA mandates are submitted without login, so
input is normalized strictly here before it reaches the services.
"""

from datetime import date, datetime
import re
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from ..models.enums import RegistrationStatus
from .base import StandardizedModel, StrictRequestModel, blank_to_none, required_text

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
IBAN_REGEX = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]+$")
IBAN_MIN_LENGTH = 15
IBAN_MAX_LENGTH = 34


def normalize_iban(value: str) -> str:
    """Strip all whitespace and upper-case."""
    return re.sub(r"\s+", "", value or "").upper()


def is_valid_iban(value: str) -> bool:
    iban = normalize_iban(value)
    return IBAN_MIN_LENGTH <= len(iban) <= IBAN_MAX_LENGTH and IBAN_REGEX.fullmatch(iban) is not None


def format_iban(value: str) -> str:
    """Group an IBAN in blocks of four: ``DE89 3704 0044 ...``."""
    iban = normalize_iban(value)
    return " ".join(iban[i : i + 4] for i in range(0, len(iban), 4))


def mask_iban(value: str) -> str:
    """Keep country code, check digits and the last four characters."""
    iban = normalize_iban(value)
    if len(iban) <= 8:
        return iban
    return format_iban(iban[:4] + "*" * (len(iban) - 8) + iban[-4:])


def validate_email_text(value: object) -> object:
    if isinstance(value, str):
        value = value.strip()
        if not EMAIL_REGEX.fullmatch(value):
            raise ValueError("Invalid email address")
    return value


class RegistrationCreate(StrictRequestModel):
    name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    preferred_time: Optional[str] = Field(None, max_length=255)
    experience_level: Optional[str] = Field(None, max_length=50)
    age_years: Optional[int] = Field(None, ge=1, le=120)
    message: Optional[str] = Field(None, max_length=2000)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: object) -> object:
        return required_text(v, "name")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: object) -> object:
        return validate_email_text(v)

    @field_validator("phone", "preferred_time", "experience_level", "message", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("age_years", mode="before")
    @classmethod
    def _age(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class RegistrationResponse(StandardizedModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    preferred_time: Optional[str] = None
    experience_level: Optional[str] = None
    age_years: Optional[int] = None
    message: Optional[str] = None
    status: RegistrationStatus
    player_id: Optional[str] = None
    created_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None


class RegistrationListResponse(StandardizedModel):
    items: List[RegistrationResponse]
    total: int


class SepaMandateCreate(StrictRequestModel):
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    is_minor: bool = False
    guardian_name: Optional[str] = Field(None, max_length=200)
    street: str = Field(..., max_length=255)
    postal_code: str = Field(..., max_length=20)
    city: str = Field(..., max_length=100)
    iban: str = Field(..., max_length=64)
    email: str = Field(..., max_length=255)
    consent: bool = Field(..., description="Direct debit authorisation accepted")
    player_id: Optional[str] = None

    @field_validator("first_name", "last_name", "street", "postal_code", "city", mode="before")
    @classmethod
    def _required(cls, v: object, info) -> object:
        return required_text(v, info.field_name)

    @field_validator("guardian_name", "player_id", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v: object) -> object:
        return validate_email_text(v)

    @field_validator("iban", mode="before")
    @classmethod
    def _iban(cls, v: object) -> object:
        if isinstance(v, str):
            iban = normalize_iban(v)
            if not is_valid_iban(iban):
                raise ValueError("Invalid IBAN")
            return iban
        return v

    @model_validator(mode="after")
    def _consent_and_guardian(self) -> "SepaMandateCreate":
        if not self.consent:
            raise ValueError("The direct debit mandate must be accepted")
        if self.is_minor and not self.guardian_name:
            raise ValueError("guardian_name is required for minors")
        return self


class SepaMandateResponse(StandardizedModel):
    id: str
    first_name: str
    last_name: str
    is_minor: bool
    guardian_name: Optional[str] = None
    account_holder: str
    street: str
    postal_code: str
    city: str
    iban_masked: str
    email: str
    mandate_reference: str
    signature_date: date
    player_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_mandate(cls, mandate: Any) -> "SepaMandateResponse":
        """Build the response; the IBAN only ever leaves the service masked."""
        return cls(
            id=mandate.id,
            first_name=mandate.first_name,
            last_name=mandate.last_name,
            is_minor=mandate.is_minor,
            guardian_name=mandate.guardian_name,
            account_holder=mandate.account_holder,
            street=mandate.street,
            postal_code=mandate.postal_code,
            city=mandate.city,
            iban_masked=mask_iban(mandate.iban),
            email=mandate.email,
            mandate_reference=mandate.mandate_reference,
            signature_date=mandate.signature_date,
            player_id=mandate.player_id,
            created_at=mandate.created_at,
        )


class SepaMandateListResponse(StandardizedModel):
    items: List[SepaMandateResponse]
    total: int


class SepaMandateLinkRequest(StrictRequestModel):
    player_id: Optional[str] = None

    @field_validator("player_id", mode="before")
    @classmethod
    def _player_id(cls, v: object) -> object:
        return blank_to_none(v)
