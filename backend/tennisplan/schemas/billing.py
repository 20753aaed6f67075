# backend/tennisplan/schemas/billing.py
"""
Monthly billing schemas.

Amounts are rounded to cents. A player is "paid" for a month when a
payment record exists; the method tells cash from non-cash payments.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..models.enums import PaymentMethod
from .base import MONTH_PATTERN, Money, StandardizedModel, StrictRequestModel, blank_to_none


class BreakdownLine(StandardizedModel):
    """``count x amount`` for all sessions of a player with the same share."""

    amount: Money
    count: int
    subtotal: Money
    label: str


class FlatFeeLine(StandardizedModel):
    rate_plan_id: str
    rate_plan_name: str
    amount: Money
    session_count: int


class PaymentInfo(StandardizedModel):
    method: PaymentMethod
    amount: Money
    paid_at: Optional[datetime] = None
    note: Optional[str] = None


class PlayerBillingRow(StandardizedModel):
    player_id: str
    player_name: str
    session_count: int
    total: Money
    total_label: str
    breakdown: List[BreakdownLine]
    breakdown_label: str
    flat_fees: List[FlatFeeLine]
    paid: bool
    payment: Optional[PaymentInfo] = None


class TrainerBillingRow(StandardizedModel):
    trainer_id: str
    trainer_name: str
    session_count: int
    minutes: int
    revenue: Money
    hourly_wage: Optional[Money] = None
    wage_payout: Optional[Money] = None


class BillingSessionLine(StandardizedModel):
    session_id: str
    session_date: date
    start: str
    end: str
    player_names: str
    rate_plan_name: str
    trainer_name: str
    total: Money
    note: Optional[str] = None
    series_id: Optional[str] = None


class BillingTotals(StandardizedModel):
    revenue: Money
    paid_cash: Money
    paid_non_cash: Money
    open: Money
    session_count: int


class MonthlyBillingResponse(StandardizedModel):
    month: str
    players: List[PlayerBillingRow]
    trainers: List[TrainerBillingRow]
    sessions: List[BillingSessionLine]
    totals: BillingTotals


class MarkPaidRequest(StrictRequestModel):
    method: PaymentMethod = PaymentMethod.CASH
    amount: Optional[Money] = Field(None, ge=0, description="Defaults to the player's monthly sum")
    note: Optional[str] = Field(None, max_length=500)

    @field_validator("note", mode="before")
    @classmethod
    def _note(cls, v: object) -> object:
        return blank_to_none(v)


class PaymentStatusResponse(StandardizedModel):
    month: str = Field(..., pattern=MONTH_PATTERN)
    player_id: str
    paid: bool
    payment: Optional[PaymentInfo] = None
