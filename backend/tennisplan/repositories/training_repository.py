# backend/tennisplan/repositories/training_repository.py
"""
Data access for training sessions.

All list queries return sessions ordered by date and start time, which is
the order every view presents them in.
"""

from datetime import date, time
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ..models.enums import SessionStatus
from ..models.training import SubstituteAssignment, TrainingSession
from .base_repository import BaseRepository


class TrainingRepository(BaseRepository[TrainingSession]):
    def __init__(self, db: Session):
        super().__init__(db, TrainingSession)

    def _ordered(self, query):
        return query.order_by(TrainingSession.session_date, TrainingSession.start_time, TrainingSession.id)

    def list_all(self) -> List[TrainingSession]:
        return self._execute_query(self._ordered(self._build_query()))

    def get_in_range(
        self,
        start_date: date,
        end_date: date,
        status: Optional[SessionStatus] = None,
    ) -> List[TrainingSession]:
        """Sessions with ``start_date <= session_date < end_date``."""
        query = self._build_query().filter(
            TrainingSession.session_date >= start_date,
            TrainingSession.session_date < end_date,
        )
        if status is not None:
            query = query.filter(TrainingSession.status == status.value)
        return self._execute_query(self._ordered(query))

    def get_upcoming(self, from_date: date, limit: int) -> List[TrainingSession]:
        query = self._build_query().filter(TrainingSession.session_date >= from_date)
        return self._execute_query(self._ordered(query).limit(limit))

    def get_series_from(self, series_id: str, from_date: date) -> List[TrainingSession]:
        query = self._build_query().filter(
            TrainingSession.series_id == series_id,
            TrainingSession.session_date >= from_date,
        )
        return self._execute_query(self._ordered(query))

    def get_by_rate_plan(self, rate_plan_id: str) -> List[TrainingSession]:
        return self._execute_query(self._build_query().filter(TrainingSession.rate_plan_id == rate_plan_id))

    def count_for_trainer(self, trainer_id: str) -> int:
        return self._build_query().filter(TrainingSession.trainer_id == trainer_id).count()

    def find_overlapping(
        self,
        trainer_id: str,
        session_date: date,
        start_time: time,
        end_time: time,
        exclude_ids: Optional[List[str]] = None,
    ) -> List[TrainingSession]:
        """
        Non-cancelled sessions run by ``trainer_id`` overlapping the given slot.

        A trainer runs a session when it is theirs without a substitute, or when
        they are the assigned substitute.
        """
        query = (
            self._build_query()
            .outerjoin(
                SubstituteAssignment,
                SubstituteAssignment.training_session_id == TrainingSession.id,
            )
            .filter(
                TrainingSession.session_date == session_date,
                TrainingSession.status != SessionStatus.CANCELLED.value,
                TrainingSession.start_time < end_time,
                TrainingSession.end_time > start_time,
            )
            .filter(
                or_(
                    and_(TrainingSession.trainer_id == trainer_id, SubstituteAssignment.id.is_(None)),
                    SubstituteAssignment.substitute_trainer_id == trainer_id,
                )
            )
        )
        if exclude_ids:
            query = query.filter(TrainingSession.id.notin_(exclude_ids))
        return self._execute_query(self._ordered(query))
