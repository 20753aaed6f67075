# backend/tennisplan/models/rate_plan.py
"""Rate plan (tariff) model."""

from sqlalchemy import CheckConstraint, Column, DateTime, Numeric, String, Text
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .enums import BillingMode


class RatePlan(Base):
    __tablename__ = "rate_plans"
    __table_args__ = (
        CheckConstraint("price_per_hour >= 0", name="ck_rate_plans_price_non_negative"),
        CheckConstraint(
            "billing_mode IN ('per_training', 'per_player', 'monthly_flat')",
            name="ck_rate_plans_billing_mode",
        ),
    )

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(200), nullable=False)
    price_per_hour = Column(Numeric(10, 2), nullable=False, default=0)
    billing_mode = Column(String(20), nullable=False, default=BillingMode.PER_TRAINING.value)
    monthly_fee = Column(Numeric(10, 2), nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def mode(self) -> BillingMode:
        return BillingMode(self.billing_mode)

    def __repr__(self) -> str:
        return f"<RatePlan {self.id} {self.name!r} {self.billing_mode}>"
