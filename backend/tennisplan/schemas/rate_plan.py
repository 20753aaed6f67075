"""Rate plan (tariff) schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from ..core.constants import MAX_NAME_LENGTH, MAX_NOTE_LENGTH
from ..models.enums import BillingMode
from .base import Money, StandardizedModel, StrictRequestModel, blank_to_none, required_text


class RatePlanCreate(StrictRequestModel):
    name: str = Field(..., max_length=MAX_NAME_LENGTH)
    price_per_hour: Money = Field(..., ge=0, description="Price per hour in EUR")
    billing_mode: BillingMode = BillingMode.PER_TRAINING
    monthly_fee: Optional[Money] = Field(None, ge=0, description="Monthly fee for monthly_flat plans")
    description: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: object) -> object:
        return required_text(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)

    @model_validator(mode="after")
    def _monthly_fee_required(self) -> "RatePlanCreate":
        if self.billing_mode == BillingMode.MONTHLY_FLAT and self.monthly_fee is None:
            raise ValueError("monthly_fee is required for monthly_flat rate plans")
        return self


class RatePlanUpdate(StrictRequestModel):
    """Partial update; the monthly fee rule is checked against the merged plan by the service."""

    name: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    price_per_hour: Optional[Money] = Field(None, ge=0)
    billing_mode: Optional[BillingMode] = None
    monthly_fee: Optional[Money] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: object) -> object:
        return required_text(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def _optional_text(cls, v: object) -> object:
        return blank_to_none(v)


class RatePlanResponse(StandardizedModel):
    id: str
    name: str
    price_per_hour: Money
    billing_mode: BillingMode
    monthly_fee: Optional[Money] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class RatePlanListResponse(StandardizedModel):
    items: List[RatePlanResponse]
    total: int
