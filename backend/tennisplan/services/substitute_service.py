"""
Substitute Service for the Tennisplan backend.

A substitute takes over a single session from its regular trainer. The
substitute then counts as the session's trainer for the calendar, the
planning overview, trainer billing and conflict checks.
"""

from datetime import date, timedelta
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import BusinessRuleException, NotFoundException, SessionConflictException, ValidationException
from ..models.enums import SessionStatus
from ..models.training import SubstituteAssignment, TrainingSession
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class SubstituteService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.substitute_repository = RepositoryFactory.create_substitute_repository(db)
        self.training_repository = RepositoryFactory.create_training_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)

    @BaseService.measure_operation("assign_substitute")
    def assign(self, session_id: str, substitute_trainer_id: str, reason: Optional[str] = None) -> SubstituteAssignment:
        """
        Assign a substitute trainer to a session, replacing any previous one.

        Raises:
            NotFoundException: unknown session or trainer
            BusinessRuleException: cancelled session or inactive substitute
            ValidationException: the substitute is the session's own trainer
            SessionConflictException: the substitute is busy at that time
        """
        session = self._get_session(session_id)
        if session.status == SessionStatus.CANCELLED.value:
            raise BusinessRuleException(
                "Cancelled sessions cannot get a substitute",
                code="SESSION_CANCELLED",
                details={"session_id": session_id},
            )

        substitute = self.trainer_repository.get_by_id(substitute_trainer_id)
        if not substitute:
            raise NotFoundException(
                "Trainer not found", code="TRAINER_NOT_FOUND", details={"trainer_id": substitute_trainer_id}
            )
        if not substitute.is_active:
            raise BusinessRuleException(
                "Substitute trainer is not active",
                code="TRAINER_INACTIVE",
                details={"trainer_id": substitute_trainer_id},
            )
        if substitute.id == session.trainer_id:
            raise ValidationException(
                "Substitute must differ from the session's trainer", code="SUBSTITUTE_IS_TRAINER"
            )

        overlapping = self.training_repository.find_overlapping(
            substitute.id,
            session.session_date,
            session.start_time,
            session.end_time,
            exclude_ids=[session.id],
        )
        if overlapping:
            raise SessionConflictException(
                "The substitute already has a session at this time",
                details={"trainer_id": substitute.id, "conflicting_session_id": overlapping[0].id},
            )

        self.log_operation(
            "assign_substitute",
            session_id=session_id,
            original_trainer_id=session.trainer_id,
            substitute_trainer_id=substitute.id,
        )
        with self.transaction():
            existing = session.substitute
            if existing is not None:
                existing.substitute_trainer = substitute
                existing.reason = reason
                assignment = existing
            else:
                assignment = SubstituteAssignment(
                    original_trainer=session.trainer,
                    substitute_trainer=substitute,
                    reason=reason,
                )
                session.substitute = assignment
            self.db.flush()
        return assignment

    @BaseService.measure_operation("remove_substitute")
    def remove(self, session_id: str) -> bool:
        """Remove the substitute of a session; returns False when there was none."""
        session = self._get_session(session_id)
        if session.substitute is None:
            return False
        self.log_operation("remove_substitute", session_id=session_id)
        with self.transaction():
            session.substitute = None
            self.db.flush()
        return True

    @BaseService.measure_operation("list_substitutes")
    def list_substitutes(self, date_from: date, date_to: date) -> List[SubstituteAssignment]:
        """Assignments for sessions dated ``date_from`` through ``date_to`` inclusive."""
        if date_to < date_from:
            raise ValidationException("date_to must not be before date_from", code="INVALID_RANGE")
        return self.substitute_repository.get_in_range(date_from, date_to + timedelta(days=1))

    def _get_session(self, session_id: str) -> TrainingSession:
        session = self.training_repository.get_by_id(session_id)
        if not session:
            raise NotFoundException(
                "Training session not found", code="SESSION_NOT_FOUND", details={"session_id": session_id}
            )
        return session
