# backend/tennisplan/services/trainer_service.py
"""
Trainer Service for the Tennisplan backend.

Manages trainer master data. A trainer who still owns training sessions
cannot be deleted; deactivate them instead.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException
from ..models.trainer import Trainer
from ..repositories.factory import RepositoryFactory
from ..schemas.trainer import TrainerCreate, TrainerUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class TrainerService(BaseService):
    def __init__(self, db: Session, trainer_repository=None, training_repository=None):
        super().__init__(db)
        self.trainer_repository = trainer_repository or RepositoryFactory.create_trainer_repository(db)
        self.training_repository = training_repository or RepositoryFactory.create_training_repository(db)
        self.substitute_repository = RepositoryFactory.create_substitute_repository(db)

    @BaseService.measure_operation("list_trainers")
    def list_trainers(self, include_inactive: bool = True) -> List[Trainer]:
        return self.trainer_repository.list_ordered(include_inactive=include_inactive)

    def get_trainer(self, trainer_id: str) -> Trainer:
        trainer = self.trainer_repository.get_by_id(trainer_id)
        if not trainer:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND", details={"trainer_id": trainer_id})
        return trainer

    @BaseService.measure_operation("create_trainer")
    def create_trainer(self, data: TrainerCreate) -> Trainer:
        self.log_operation("create_trainer", trainer_name=data.name)
        with self.transaction():
            return self.trainer_repository.create(**data.model_dump())

    @BaseService.measure_operation("update_trainer")
    def update_trainer(self, trainer_id: str, data: TrainerUpdate) -> Trainer:
        self.get_trainer(trainer_id)
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is None:
            changes.pop("name")
        if "is_active" in changes and changes["is_active"] is None:
            changes.pop("is_active")
        self.log_operation("update_trainer", trainer_id=trainer_id, fields=sorted(changes))
        with self.transaction():
            return self.trainer_repository.update(trainer_id, **changes)

    @BaseService.measure_operation("delete_trainer")
    def delete_trainer(self, trainer_id: str) -> None:
        """
        Delete a trainer.

        Raises:
            NotFoundException: unknown trainer
            ConflictException: the trainer still owns sessions
        """
        self.get_trainer(trainer_id)
        owned = self.training_repository.count_for_trainer(trainer_id)
        if owned:
            raise ConflictException(
                "Trainer still has training sessions",
                code="TRAINER_HAS_SESSIONS",
                details={"trainer_id": trainer_id, "session_count": owned},
            )
        self.log_operation("delete_trainer", trainer_id=trainer_id)
        with self.transaction():
            # Stand-in duties go with the trainer; the sessions fall back to their own trainer
            for assignment in self.substitute_repository.get_involving_trainer(trainer_id):
                assignment.training_session.substitute = None
            self.trainer_repository.delete(trainer_id)
