# backend/tennisplan/repositories/substitute_repository.py
from datetime import date
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models.training import SubstituteAssignment, TrainingSession
from .base_repository import BaseRepository


class SubstituteRepository(BaseRepository[SubstituteAssignment]):
    def __init__(self, db: Session):
        super().__init__(db, SubstituteAssignment)

    def get_in_range(self, start_date: date, end_date: date) -> List[SubstituteAssignment]:
        query = (
            self._build_query()
            .join(TrainingSession, TrainingSession.id == SubstituteAssignment.training_session_id)
            .filter(
                TrainingSession.session_date >= start_date,
                TrainingSession.session_date < end_date,
            )
            .order_by(TrainingSession.session_date, TrainingSession.start_time)
        )
        return self._execute_query(query)

    def get_involving_trainer(self, trainer_id: str) -> List[SubstituteAssignment]:
        query = self._build_query().filter(
            or_(
                SubstituteAssignment.substitute_trainer_id == trainer_id,
                SubstituteAssignment.original_trainer_id == trainer_id,
            )
        )
        return self._execute_query(query)
