"""
Weekly calendar layout.

Positions every session of a Monday-to-Sunday week on an hour grid that
runs from 07:00 to 22:00 with a fixed number of pixels per hour.
"""

from datetime import date, time, timedelta
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import (
    CALENDAR_END_HOUR,
    CALENDAR_MIN_EVENT_PX,
    CALENDAR_PX_PER_HOUR,
    CALENDAR_START_HOUR,
    UNKNOWN_PLAYER_LABEL,
    UNKNOWN_RATE_PLAN_LABEL,
)
from ..core.exceptions import ValidationException
from ..core.timezone_utils import get_school_today
from ..models.enums import STATUS_LABELS, SessionStatus
from ..models.training import TrainingSession
from ..repositories.factory import RepositoryFactory
from ..schemas.calendar import CalendarDay, CalendarEvent, CalendarWeekResponse
from ..utils.time_utils import duration_minutes, format_short, start_of_week, time_to_hhmm, time_to_minutes, week_days
from .base import BaseService

logger = logging.getLogger(__name__)


def event_top_px(start: time) -> float:
    """Offset from the top of the grid; sessions before 07:00 stick to the top."""
    hours_from_grid_start = (time_to_minutes(start) - CALENDAR_START_HOUR * 60) / 60
    return max(0.0, hours_from_grid_start) * CALENDAR_PX_PER_HOUR


def event_height_px(start: time, end: time) -> float:
    return max(float(CALENDAR_MIN_EVENT_PX), duration_minutes(start, end) / 60 * CALENDAR_PX_PER_HOUR)


def player_label(session: TrainingSession) -> str:
    names = [player.name or UNKNOWN_PLAYER_LABEL for player in session.players]
    return ", ".join(names) if names else UNKNOWN_PLAYER_LABEL


def rate_plan_label(session: TrainingSession) -> str:
    return session.rate_plan.name if session.rate_plan is not None else UNKNOWN_RATE_PLAN_LABEL


def status_label(status: str) -> str:
    return STATUS_LABELS[SessionStatus(status)]


def build_event(session: TrainingSession) -> CalendarEvent:
    top = event_top_px(session.start_time)
    height = event_height_px(session.start_time, session.end_time)
    trainer = session.effective_trainer
    return CalendarEvent(
        session_id=session.id,
        session_date=session.session_date,
        start=time_to_hhmm(session.start_time),
        end=time_to_hhmm(session.end_time),
        top_px=top,
        height_px=height,
        show_second_line=height >= CALENDAR_PX_PER_HOUR,
        player_names=player_label(session),
        rate_plan_name=rate_plan_label(session),
        status=session.status,
        status_label=status_label(session.status),
        trainer_id=session.effective_trainer_id,
        trainer_name=trainer.name if trainer is not None else "",
        has_substitute=session.substitute is not None,
        series_id=session.series_id,
    )


class CalendarService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.training_repository = RepositoryFactory.create_training_repository(db)

    @BaseService.measure_operation("calendar_week")
    def week(self, anchor: Optional[date] = None, trainer_id: Optional[str] = None) -> CalendarWeekResponse:
        """
        Lay out the week containing ``anchor`` (default: today).

        With ``trainer_id`` only sessions run by that trainer are shown.
        """
        today = get_school_today()
        week_start = start_of_week(anchor or today)
        if not date.min + timedelta(days=7) <= week_start <= date.max - timedelta(days=7):
            raise ValidationException(
                "Week is outside the supported calendar range",
                code="INVALID_WEEK",
                details={"anchor": (anchor or today).isoformat()},
            )
        days = week_days(week_start)
        sessions = self.training_repository.get_in_range(week_start, week_start + timedelta(days=7))
        if trainer_id:
            sessions = [s for s in sessions if s.effective_trainer_id == trainer_id]

        by_day: Dict[date, List[CalendarEvent]] = {day: [] for day in days}
        for session in sessions:
            by_day[session.session_date].append(build_event(session))

        return CalendarWeekResponse(
            week_start=week_start,
            week_end=days[-1],
            prev_week=week_start - timedelta(days=7),
            next_week=week_start + timedelta(days=7),
            hours=[f"{hour:02d}:00" for hour in range(CALENDAR_START_HOUR, CALENDAR_END_HOUR + 1)],
            px_per_hour=CALENDAR_PX_PER_HOUR,
            days=[
                CalendarDay(date=day, label=format_short(day), is_today=day == today, events=by_day[day])
                for day in days
            ],
        )
