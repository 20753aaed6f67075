# backend/tennisplan/services/training_service.py
"""
Training Service for the Tennisplan backend.

Handles the lifecycle of training sessions:
- Creating single sessions and weekly series
- Editing a session or a session and all following ones of its series
- Completing and deleting sessions
- Preventing a trainer from holding two overlapping sessions
"""

from datetime import date, time, timedelta
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import UPCOMING_SESSIONS_LIMIT
from ..core.exceptions import NotFoundException, SessionConflictException, ValidationException
from ..core.timezone_utils import get_school_today, utc_now
from ..core.ulid_helper import generate_ulid
from ..models.enums import SessionStatus, UpdateScope
from ..models.player import Player
from ..models.rate_plan import RatePlan
from ..models.trainer import Trainer
from ..models.training import TrainingSession
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.training import TrainingSessionCreate, TrainingSessionUpdate
from ..utils.time_utils import time_to_hhmm, weekly_dates
from .base import BaseService

logger = logging.getLogger(__name__)


class TrainingService(BaseService):
    """
    Service for training session operations.

    Sessions are self-contained: changing a rate plan or a player record later
    never rewrites the date or time of an existing session.
    """

    def __init__(
        self,
        db: Session,
        training_repository=None,
        trainer_repository=None,
        player_repository=None,
        rate_plan_repository=None,
    ):
        super().__init__(db)
        self.training_repository = training_repository or RepositoryFactory.create_training_repository(db)
        self.trainer_repository = trainer_repository or RepositoryFactory.create_trainer_repository(db)
        self.player_repository = player_repository or RepositoryFactory.create_player_repository(db)
        self.rate_plan_repository = rate_plan_repository or RepositoryFactory.create_rate_plan_repository(db)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_session(self, session_id: str) -> TrainingSession:
        session = self.training_repository.get_by_id(session_id)
        if not session:
            raise NotFoundException(
                "Training session not found",
                code="SESSION_NOT_FOUND",
                details={"session_id": session_id},
            )
        return session

    @BaseService.measure_operation("list_sessions")
    def list_sessions(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[SessionStatus] = None,
    ) -> List[TrainingSession]:
        """
        Sessions ordered by date and start time.

        ``date_to`` is inclusive. Without a range every session is returned.
        """
        if date_from is None and date_to is None:
            sessions = self.training_repository.list_all()
            if status is not None:
                sessions = [s for s in sessions if s.status == status.value]
            return sessions
        start = date_from or date.min
        end = date_to + timedelta(days=1) if date_to else date.max
        return self.training_repository.get_in_range(start, end, status)

    @BaseService.measure_operation("upcoming_sessions")
    def upcoming(self, limit: int = UPCOMING_SESSIONS_LIMIT) -> List[TrainingSession]:
        """Sessions dated today or later, earliest first."""
        return self.training_repository.get_upcoming(get_school_today(), limit)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @BaseService.measure_operation("create_sessions")
    def create_sessions(self, data: TrainingSessionCreate) -> List[TrainingSession]:
        """
        Create a session, or one session per week when ``repeat_weekly`` is set.

        Returns:
            The created sessions in date order

        Raises:
            ValidationException: invalid repetition range or unknown players
            NotFoundException: unknown trainer or rate plan
            SessionConflictException: the trainer is busy on one of the dates
        """
        trainer = self._require_trainer(data.trainer_id)
        rate_plan = self._require_rate_plan(data.rate_plan_id)
        players = self._require_players(data.player_ids)

        if data.repeat_weekly:
            if data.repeat_until is None:
                raise ValidationException("repeat_until is required for weekly repetition", code="REPEAT_UNTIL_REQUIRED")
            if data.repeat_until < data.session_date:
                raise ValidationException(
                    "repeat_until must not be before the first date",
                    code="INVALID_REPEAT_RANGE",
                    details={"session_date": data.session_date.isoformat(), "repeat_until": data.repeat_until.isoformat()},
                )
            dates = weekly_dates(data.session_date, data.repeat_until)
            series_id: Optional[str] = generate_ulid()
        else:
            dates = [data.session_date]
            series_id = None

        if data.status != SessionStatus.CANCELLED:
            for session_date in dates:
                self._check_trainer_free(trainer.id, session_date, data.start_time, data.end_time)

        self.log_operation(
            "create_sessions",
            trainer_id=trainer.id,
            count=len(dates),
            series_id=series_id,
        )

        created: List[TrainingSession] = []
        with self.transaction():
            for session_date in dates:
                session = self.training_repository.create(
                    trainer_id=trainer.id,
                    rate_plan_id=rate_plan.id,
                    session_date=session_date,
                    start_time=data.start_time,
                    end_time=data.end_time,
                    status=data.status.value,
                    note=data.note,
                    series_id=series_id,
                    completed_at=utc_now() if data.status == SessionStatus.COMPLETED else None,
                )
                session.players = list(players)
                created.append(session)
            self.db.flush()
        return created

    @BaseService.measure_operation("update_session")
    def update_session(self, session_id: str, data: TrainingSessionUpdate) -> List[TrainingSession]:
        """
        Edit a session, or the session and all following ones of its series.

        With ``scope=following`` every series member dated on or after the
        edited session receives the new times, trainer, rate plan, players,
        status and note; dates stay as they are. A session outside a series
        is always edited alone.

        Returns:
            The updated sessions in date order
        """
        session = self.get_session(session_id)
        changes = data.model_dump(exclude_unset=True, exclude={"scope"})
        for key in ("session_date", "start_time", "end_time", "trainer_id", "status", "player_ids"):
            if key in changes and changes[key] is None:
                changes.pop(key)
        if "rate_plan_id" in changes and not changes["rate_plan_id"]:
            raise ValidationException("A rate plan is required", code="RATE_PLAN_REQUIRED")

        trainer = self._require_trainer(changes["trainer_id"]) if "trainer_id" in changes else None
        rate_plan = self._require_rate_plan(changes["rate_plan_id"]) if "rate_plan_id" in changes else None
        players = self._require_players(changes["player_ids"]) if "player_ids" in changes else None

        start_time = changes.get("start_time", session.start_time)
        end_time = changes.get("end_time", session.end_time)
        if end_time <= start_time:
            raise ValidationException("End time must be after start time", code="INVALID_TIME_RANGE")

        if data.scope == UpdateScope.FOLLOWING and session.series_id:
            targets = self.training_repository.get_series_from(session.series_id, session.session_date)
            changes.pop("session_date", None)
            # later members take over the edited session's full state, not just the sent fields
            changes = {
                "start_time": start_time,
                "end_time": end_time,
                "status": changes.get("status", session.status),
                "note": changes.get("note", session.note),
                "rate_plan_id": changes.get("rate_plan_id", session.rate_plan_id),
                "trainer_id": changes.get("trainer_id", session.trainer_id),
                "player_ids": changes.get("player_ids", [player.id for player in session.players]),
            }
            trainer = trainer or session.trainer
            if rate_plan is None:
                rate_plan = session.rate_plan
            if players is None:
                players = list(session.players)
        else:
            targets = [session]

        target_ids = [target.id for target in targets]
        for target in targets:
            status = SessionStatus(changes.get("status", target.status))
            if status == SessionStatus.CANCELLED:
                continue
            trainer_id = changes.get("trainer_id", target.trainer_id)
            runner_id = self._runner_after_update(target, trainer_id)
            self._check_trainer_free(
                runner_id,
                changes.get("session_date", target.session_date),
                start_time,
                end_time,
                exclude_ids=target_ids,
            )

        self.log_operation(
            "update_session",
            session_id=session_id,
            scope=data.scope.value,
            affected=len(targets),
            fields=sorted(changes),
        )

        with self.transaction():
            for target in targets:
                self._apply_changes(target, changes, trainer, rate_plan, players)
            self.db.flush()
        return targets

    @BaseService.measure_operation("complete_session")
    def complete_session(self, session_id: str) -> tuple[TrainingSession, bool]:
        """
        Mark a planned session as completed.

        Sessions in any other state are returned unchanged.

        Returns:
            (session, changed)
        """
        session = self.get_session(session_id)
        if session.status != SessionStatus.PLANNED.value:
            return session, False

        with self.transaction():
            session.status = SessionStatus.COMPLETED.value
            session.completed_at = utc_now()
            self.db.flush()

        prometheus_metrics.inc_sessions_completed()
        self.log_operation("complete_session", session_id=session_id)
        return session, True

    @BaseService.measure_operation("delete_sessions")
    def delete_sessions(self, session_id: str, scope: UpdateScope = UpdateScope.SINGLE) -> int:
        """Delete a session, or the session and all following ones of its series."""
        session = self.get_session(session_id)
        if scope == UpdateScope.FOLLOWING and session.series_id:
            targets = self.training_repository.get_series_from(session.series_id, session.session_date)
        else:
            targets = [session]

        self.log_operation("delete_sessions", session_id=session_id, scope=scope.value, count=len(targets))
        with self.transaction():
            for target in targets:
                self.db.delete(target)
            self.db.flush()
        return len(targets)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_changes(
        self,
        target: TrainingSession,
        changes: dict,
        trainer: Optional[Trainer],
        rate_plan: Optional[RatePlan],
        players: Optional[List[Player]],
    ) -> None:
        for key in ("session_date", "start_time", "end_time", "note"):
            if key in changes:
                setattr(target, key, changes[key])
        if "rate_plan_id" in changes:
            target.rate_plan = rate_plan
        if players is not None:
            target.players = list(players)
        if "status" in changes:
            new_status = SessionStatus(changes["status"])
            if new_status == SessionStatus.COMPLETED and target.status != SessionStatus.COMPLETED.value:
                target.completed_at = utc_now()
            elif new_status != SessionStatus.COMPLETED:
                target.completed_at = None
            target.status = new_status.value
            if new_status == SessionStatus.CANCELLED:
                target.substitute = None
        if trainer is not None:
            target.trainer = trainer
            if target.substitute is not None:
                if target.substitute.substitute_trainer_id == trainer.id:
                    # The substitute became the regular trainer
                    target.substitute = None
                else:
                    target.substitute.original_trainer = trainer

    @staticmethod
    def _runner_after_update(target: TrainingSession, trainer_id: str) -> str:
        if target.substitute is not None and target.substitute.substitute_trainer_id != trainer_id:
            return target.substitute.substitute_trainer_id
        return trainer_id

    def _check_trainer_free(
        self,
        trainer_id: str,
        session_date: date,
        start_time: time,
        end_time: time,
        exclude_ids: Optional[Iterable[str]] = None,
    ) -> None:
        overlapping = self.training_repository.find_overlapping(
            trainer_id,
            session_date,
            start_time,
            end_time,
            exclude_ids=list(exclude_ids or []),
        )
        if overlapping:
            other = overlapping[0]
            raise SessionConflictException(
                details={
                    "trainer_id": trainer_id,
                    "session_date": session_date.isoformat(),
                    "conflicting_session_id": other.id,
                    "conflicting_time": f"{time_to_hhmm(other.start_time)}-{time_to_hhmm(other.end_time)}",
                }
            )

    def _require_trainer(self, trainer_id: str) -> Trainer:
        trainer = self.trainer_repository.get_by_id(trainer_id)
        if not trainer:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND", details={"trainer_id": trainer_id})
        return trainer

    def _require_rate_plan(self, rate_plan_id: str) -> RatePlan:
        rate_plan = self.rate_plan_repository.get_by_id(rate_plan_id)
        if not rate_plan:
            raise NotFoundException(
                "Rate plan not found", code="RATE_PLAN_NOT_FOUND", details={"rate_plan_id": rate_plan_id}
            )
        return rate_plan

    def _require_players(self, player_ids: List[str]) -> List[Player]:
        if not player_ids:
            raise ValidationException("At least one player is required", code="PLAYERS_REQUIRED")
        found = {player.id: player for player in self.player_repository.get_by_ids(player_ids)}
        missing = [pid for pid in player_ids if pid not in found]
        if missing:
            raise ValidationException("Unknown players", code="UNKNOWN_PLAYERS", details={"player_ids": missing})
        return [found[pid] for pid in player_ids]
