"""Weekly calendar view schemas."""

from datetime import date
from typing import List, Optional

from .base import StandardizedModel


class CalendarEvent(StandardizedModel):
    """One session positioned on the day column of the week grid."""

    session_id: str
    session_date: date
    start: str
    end: str
    top_px: float
    height_px: float
    show_second_line: bool
    player_names: str
    rate_plan_name: str
    status: str
    status_label: str
    trainer_id: str
    trainer_name: str
    has_substitute: bool
    series_id: Optional[str] = None


class CalendarDay(StandardizedModel):
    date: date
    label: str
    is_today: bool
    events: List[CalendarEvent]


class CalendarWeekResponse(StandardizedModel):
    week_start: date
    week_end: date
    prev_week: date
    next_week: date
    hours: List[str]
    px_per_hour: int
    days: List[CalendarDay]
