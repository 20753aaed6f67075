# backend/tennisplan/schemas/training.py
"""
Training session schemas.

Sessions are self-contained: date, times, trainer, rate plan and players
live on the session. Weekly repetition creates one session per week that
share a ``series_id``.
"""

from datetime import date, datetime, time
from typing import Any, List, Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from ..core.constants import MAX_NOTE_LENGTH
from ..models.enums import SessionStatus, UpdateScope
from ..services.pricing_service import quote
from ..utils.money import round2
from .base import Money, StandardizedModel, StrictRequestModel, blank_to_none, parse_hhmm, serialize_hhmm


class TrainingSessionCreate(StrictRequestModel):
    session_date: date = Field(..., description="Date of the (first) session")
    start_time: time = Field(..., description="Start time, HH:MM")
    end_time: time = Field(..., description="End time, HH:MM")
    trainer_id: str = Field(..., min_length=1)
    rate_plan_id: str = Field(..., min_length=1)
    player_ids: List[str] = Field(..., min_length=1, description="At least one player")
    status: SessionStatus = SessionStatus.PLANNED
    note: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    repeat_weekly: bool = False
    repeat_until: Optional[date] = Field(None, description="Last date of the weekly repetition (inclusive)")

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_hhmm(v)

    @field_validator("note", mode="before")
    @classmethod
    def clean_note(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("player_ids")
    @classmethod
    def dedupe_players(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(pid for pid in v if pid))

    @model_validator(mode="after")
    def validate_time_order(self) -> "TrainingSessionCreate":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        if not self.player_ids:
            raise ValueError("At least one player is required")
        return self


class TrainingSessionUpdate(StrictRequestModel):
    """
    Edit of a session.

    ``scope=following`` applies everything except the date to the session's
    series members dated on or after it.
    """

    session_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    trainer_id: Optional[str] = None
    rate_plan_id: Optional[str] = None
    player_ids: Optional[List[str]] = None
    status: Optional[SessionStatus] = None
    note: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    scope: UpdateScope = UpdateScope.SINGLE

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_hhmm(v)

    @field_validator("note", mode="before")
    @classmethod
    def clean_note(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("player_ids")
    @classmethod
    def require_players(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = list(dict.fromkeys(pid for pid in v if pid))
        if not cleaned:
            raise ValueError("At least one player is required")
        return cleaned


class PricePreviewRequest(StrictRequestModel):
    rate_plan_id: Optional[str] = None
    start_time: time
    end_time: time
    player_count: int = Field(0, ge=0)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_hhmm(v)


class PricePreviewResponse(StandardizedModel):
    duration_minutes: int
    total: Money
    per_player: Money
    total_label: str
    per_player_label: str


class SubstituteInfo(StandardizedModel):
    substitute_trainer_id: str
    substitute_trainer_name: Optional[str] = None
    reason: Optional[str] = None


class TrainingSessionResponse(StandardizedModel):
    id: str
    session_date: date
    start_time: time
    end_time: time
    trainer_id: str
    trainer_name: Optional[str] = None
    effective_trainer_id: str
    rate_plan_id: Optional[str] = None
    rate_plan_name: Optional[str] = None
    player_ids: List[str]
    player_names: List[str]
    status: SessionStatus
    note: Optional[str] = None
    series_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    duration_minutes: int
    total_price: Money
    price_per_player: Money
    substitute: Optional[SubstituteInfo] = None

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> Optional[str]:
        return serialize_hhmm(value)

    @classmethod
    def from_session(cls, session: Any) -> "TrainingSessionResponse":
        """Create the response from a TrainingSession ORM object, including its prices."""
        price = quote(session.rate_plan, session.start_time, session.end_time, len(session.players))
        substitute = None
        if session.substitute is not None:
            substitute_trainer = session.substitute.substitute_trainer
            substitute = SubstituteInfo(
                substitute_trainer_id=session.substitute.substitute_trainer_id,
                substitute_trainer_name=substitute_trainer.name if substitute_trainer else None,
                reason=session.substitute.reason,
            )
        return cls(
            id=session.id,
            session_date=session.session_date,
            start_time=session.start_time,
            end_time=session.end_time,
            trainer_id=session.trainer_id,
            trainer_name=session.trainer.name if session.trainer else None,
            effective_trainer_id=session.effective_trainer_id,
            rate_plan_id=session.rate_plan_id,
            rate_plan_name=session.rate_plan.name if session.rate_plan else None,
            player_ids=session.player_ids,
            player_names=[player.name for player in session.players],
            status=session.status,
            note=session.note,
            series_id=session.series_id,
            completed_at=session.completed_at,
            duration_minutes=price.duration_minutes,
            total_price=round2(price.total),
            price_per_player=round2(price.per_player),
            substitute=substitute,
        )


class TrainingSessionListResponse(StandardizedModel):
    items: List[TrainingSessionResponse]
    total: int


class CompleteSessionResponse(StandardizedModel):
    session: TrainingSessionResponse
    changed: bool


class DeleteSessionsResponse(StandardizedModel):
    deleted: int
    scope: UpdateScope
