# backend/tennisplan/repositories/trainer_repository.py
"""Data access for trainers."""

from typing import List

from sqlalchemy.orm import Session

from ..models.trainer import Trainer
from .base_repository import BaseRepository


class TrainerRepository(BaseRepository[Trainer]):
    def __init__(self, db: Session):
        super().__init__(db, Trainer)

    def list_ordered(self, include_inactive: bool = True) -> List[Trainer]:
        query = self._build_query()
        if not include_inactive:
            query = query.filter(Trainer.is_active.is_(True))
        return self._execute_query(query.order_by(Trainer.name, Trainer.id))
