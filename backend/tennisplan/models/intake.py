# backend/tennisplan/models/intake.py
"""
Public intake forms: training registrations and SEPA direct-debit mandates.

Both are submitted through links the school hands out and are reviewed
by staff afterwards.
"""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .enums import RegistrationStatus


class RegistrationRequest(Base):
    __tablename__ = "registration_requests"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    preferred_time = Column(String(255), nullable=True)
    experience_level = Column(String(50), nullable=True)
    age_years = Column(Integer, nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=RegistrationStatus.NEW.value, index=True)
    player_id = Column(String(26), ForeignKey("players.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    processed_at = Column(DateTime(timezone=True), nullable=True)

    player = relationship("Player")


class SepaMandate(Base):
    __tablename__ = "sepa_mandates"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    is_minor = Column(Boolean, nullable=False, default=False)
    guardian_name = Column(String(200), nullable=True)
    street = Column(String(255), nullable=False)
    postal_code = Column(String(20), nullable=False)
    city = Column(String(100), nullable=False)
    iban = Column(String(34), nullable=False)  # stored without spaces
    email = Column(String(255), nullable=False)
    mandate_reference = Column(String(35), nullable=False, unique=True)
    signature_date = Column(Date, nullable=False)
    player_id = Column(String(26), ForeignKey("players.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    player = relationship("Player")

    @property
    def account_holder(self) -> str:
        if self.is_minor and self.guardian_name:
            return self.guardian_name
        return f"{self.first_name} {self.last_name}"
