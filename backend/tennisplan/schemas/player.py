"""Player schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_NAME_LENGTH, MAX_NOTE_LENGTH
from .base import StandardizedModel, StrictRequestModel, blank_to_none, required_text


class PlayerCreate(StrictRequestModel):
    name: str = Field(..., max_length=MAX_NAME_LENGTH)
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    billing_address: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: object) -> object:
        return required_text(v, "name")

    @field_validator("contact_email", "contact_phone", "notes", "billing_address", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)


class PlayerUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    billing_address: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: object) -> object:
        return required_text(v, "name")

    @field_validator("contact_email", "contact_phone", "notes", "billing_address", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)


class PlayerResponse(StandardizedModel):
    id: str
    name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: Optional[str] = None
    billing_address: Optional[str] = None
    created_at: Optional[datetime] = None


class PlayerListResponse(StandardizedModel):
    items: List[PlayerResponse]
    total: int
