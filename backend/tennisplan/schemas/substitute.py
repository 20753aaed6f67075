"""Substitute trainer assignment schemas."""

from datetime import date, datetime, time
from typing import Any, List, Optional

from pydantic import Field, field_serializer, field_validator

from ..core.constants import MAX_NOTE_LENGTH
from .base import StandardizedModel, StrictRequestModel, blank_to_none, serialize_hhmm


class SubstituteAssignRequest(StrictRequestModel):
    substitute_trainer_id: str = Field(..., min_length=1)
    reason: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator("reason", mode="before")
    @classmethod
    def _reason(cls, v: object) -> object:
        return blank_to_none(v)


class SubstituteResponse(StandardizedModel):
    id: str
    training_session_id: str
    session_date: date
    start_time: time
    end_time: time
    original_trainer_id: str
    original_trainer_name: Optional[str] = None
    substitute_trainer_id: str
    substitute_trainer_name: Optional[str] = None
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> Optional[str]:
        return serialize_hhmm(value)

    @classmethod
    def from_assignment(cls, assignment: Any) -> "SubstituteResponse":
        session = assignment.training_session
        return cls(
            id=assignment.id,
            training_session_id=assignment.training_session_id,
            session_date=session.session_date,
            start_time=session.start_time,
            end_time=session.end_time,
            original_trainer_id=assignment.original_trainer_id,
            original_trainer_name=assignment.original_trainer.name if assignment.original_trainer else None,
            substitute_trainer_id=assignment.substitute_trainer_id,
            substitute_trainer_name=assignment.substitute_trainer.name if assignment.substitute_trainer else None,
            reason=assignment.reason,
            created_at=assignment.created_at,
        )


class SubstituteListResponse(StandardizedModel):
    items: List[SubstituteResponse]
    total: int
