# backend/tennisplan/models/training.py
"""
Training session and substitute assignment models.

A training session is a self-contained appointment: trainer, rate plan,
date and times live on the row. Sessions created by one weekly
repetition share a ``series_id`` so that later edits can target
"this session" or "this and all following sessions".
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .enums import SessionStatus

training_session_players = Table(
    "training_session_players",
    Base.metadata,
    Column(
        "training_session_id",
        String(26),
        ForeignKey("training_sessions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "player_id",
        String(26),
        ForeignKey("players.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class TrainingSession(Base):
    __tablename__ = "training_sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('planned', 'completed', 'cancelled')",
            name="ck_training_sessions_status",
        ),
        CheckConstraint("end_time > start_time", name="ck_training_sessions_time_order"),
        Index("ix_training_sessions_trainer_date", "trainer_id", "session_date"),
    )

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    trainer_id = Column(String(26), ForeignKey("trainers.id"), nullable=False)
    rate_plan_id = Column(String(26), ForeignKey("rate_plans.id", ondelete="SET NULL"), nullable=True)

    session_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    status = Column(String(20), nullable=False, default=SessionStatus.PLANNED.value, index=True)
    note = Column(Text, nullable=True)
    series_id = Column(String(26), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    trainer = relationship("Trainer", foreign_keys=[trainer_id], lazy="joined")
    rate_plan = relationship("RatePlan", lazy="joined")
    players = relationship(
        "Player",
        secondary=training_session_players,
        lazy="selectin",
        order_by="Player.name",
        backref="training_sessions",
    )
    substitute = relationship(
        "SubstituteAssignment",
        back_populates="training_session",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def player_ids(self) -> list[str]:
        return [player.id for player in self.players]

    @property
    def effective_trainer_id(self) -> str:
        """Trainer who actually runs the session (the substitute when assigned)."""
        if self.substitute is not None:
            return self.substitute.substitute_trainer_id
        return self.trainer_id

    @property
    def effective_trainer(self):
        if self.substitute is not None and self.substitute.substitute_trainer is not None:
            return self.substitute.substitute_trainer
        return self.trainer

    def __repr__(self) -> str:
        return f"<TrainingSession {self.id} {self.session_date} {self.start_time}-{self.end_time} {self.status}>"


class SubstituteAssignment(Base):
    """A substitute trainer taking over one session from its regular trainer."""

    __tablename__ = "substitute_assignments"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    training_session_id = Column(
        String(26),
        ForeignKey("training_sessions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    original_trainer_id = Column(String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False)
    substitute_trainer_id = Column(String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    training_session = relationship("TrainingSession", back_populates="substitute")
    original_trainer = relationship("Trainer", foreign_keys=[original_trainer_id], lazy="joined")
    substitute_trainer = relationship("Trainer", foreign_keys=[substitute_trainer_id], lazy="joined")

    def __repr__(self) -> str:
        return f"<SubstituteAssignment {self.training_session_id} -> {self.substitute_trainer_id}>"
