# backend/tennisplan/models/trainer.py
"""Trainer model: the people who run training sessions."""

from sqlalchemy import Boolean, Column, DateTime, Numeric, String
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Trainer(Base):
    __tablename__ = "trainers"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    # Used for the monthly payout in trainer billing; NULL means no payout is computed
    hourly_wage = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Trainer {self.id} {self.name!r}>"
