"""Trainer schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from ..core.constants import MAX_NAME_LENGTH
from .base import Money, StandardizedModel, StrictRequestModel, blank_to_none, required_text


class TrainerCreate(StrictRequestModel):
    name: str = Field(..., max_length=MAX_NAME_LENGTH)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    hourly_wage: Optional[Money] = Field(None, ge=0, description="Hourly wage used for payout")
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: object) -> object:
        return required_text(v, "name")

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)


class TrainerUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    hourly_wage: Optional[Money] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: object) -> object:
        return required_text(v, "name")

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)


class TrainerResponse(StandardizedModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    hourly_wage: Optional[Money] = None
    is_active: bool
    created_at: Optional[datetime] = None


class TrainerListResponse(StandardizedModel):
    items: List[TrainerResponse]
    total: int
