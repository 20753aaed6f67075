# backend/tennisplan/models/player.py
"""Player model."""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(200), nullable=False, index=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    billing_address = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def matches(self, term: str) -> bool:
        """Case-insensitive match on name, email, phone and billing address."""
        needle = term.strip().lower()
        if not needle:
            return True
        haystack = (
            self.name or "",
            self.contact_email or "",
            self.contact_phone or "",
            self.billing_address or "",
        )
        return any(needle in value.lower() for value in haystack)

    def __repr__(self) -> str:
        return f"<Player {self.id} {self.name!r}>"
