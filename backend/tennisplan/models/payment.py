# backend/tennisplan/models/payment.py
"""
Monthly payment records.

A row means the player has paid the given billing month; no row means
the month is still open. The method distinguishes cash from non-cash
(bank transfer, SEPA direct debit) payments.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import backref, relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .enums import PaymentMethod


class MonthlyPayment(Base):
    __tablename__ = "monthly_payments"
    __table_args__ = (
        UniqueConstraint("player_id", "billing_month", name="uq_monthly_payments_player_month"),
        CheckConstraint("method IN ('cash', 'transfer', 'sepa')", name="ck_monthly_payments_method"),
    )

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    player_id = Column(String(26), ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    billing_month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    note = Column(Text, nullable=True)
    paid_at = Column(DateTime(timezone=True), server_default=func.now())

    player = relationship("Player", backref=backref("payments", cascade="all, delete-orphan"))

    @property
    def is_cash(self) -> bool:
        return PaymentMethod(self.method).is_cash

    def __repr__(self) -> str:
        return f"<MonthlyPayment {self.player_id} {self.billing_month} {self.method}>"
