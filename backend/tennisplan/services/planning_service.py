"""Planning overview: what is coming up and who is busy."""

from datetime import timedelta
import logging
from typing import Dict

from sqlalchemy.orm import Session

from ..core.constants import PLANNING_LOOKAHEAD_DAYS, UPCOMING_SESSIONS_LIMIT
from ..core.timezone_utils import get_school_today
from ..models.enums import SessionStatus
from ..repositories.factory import RepositoryFactory
from ..schemas.planning import PlanningOverviewResponse, RecordCounts, TrainerWorkload
from ..schemas.substitute import SubstituteResponse
from ..schemas.training import TrainingSessionResponse
from .base import BaseService

logger = logging.getLogger(__name__)


class PlanningService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.training_repository = RepositoryFactory.create_training_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)
        self.player_repository = RepositoryFactory.create_player_repository(db)
        self.rate_plan_repository = RepositoryFactory.create_rate_plan_repository(db)
        self.substitute_repository = RepositoryFactory.create_substitute_repository(db)

    @BaseService.measure_operation("planning_overview")
    def overview(self) -> PlanningOverviewResponse:
        """
        Upcoming sessions, trainer workload for the next days and substitutes.

        Workload counts non-cancelled sessions per effective trainer from today
        through the lookahead window; trainers without sessions are listed with 0
        when active.
        """
        today = get_school_today()
        window_end = today + timedelta(days=PLANNING_LOOKAHEAD_DAYS)

        upcoming = self.training_repository.get_upcoming(today, UPCOMING_SESSIONS_LIMIT)

        counts: Dict[str, int] = {}
        for session in self.training_repository.get_in_range(today, window_end):
            if session.status == SessionStatus.CANCELLED.value:
                continue
            counts[session.effective_trainer_id] = counts.get(session.effective_trainer_id, 0) + 1

        workload = [
            TrainerWorkload(trainer_id=trainer.id, trainer_name=trainer.name, session_count=counts.get(trainer.id, 0))
            for trainer in self.trainer_repository.list_ordered()
            if trainer.is_active or counts.get(trainer.id)
        ]
        workload.sort(key=lambda row: (-row.session_count, row.trainer_name))

        substitutes = self.substitute_repository.get_in_range(today, window_end)

        return PlanningOverviewResponse(
            upcoming=[TrainingSessionResponse.from_session(session) for session in upcoming],
            workload=workload,
            substitutes=[SubstituteResponse.from_assignment(assignment) for assignment in substitutes],
            counts=RecordCounts(
                trainers=self.trainer_repository.count(),
                players=self.player_repository.count(),
                rate_plans=self.rate_plan_repository.count(),
                sessions=self.training_repository.count(),
            ),
        )
