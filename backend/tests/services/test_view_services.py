"""Calendar week layout and planning overview."""

from datetime import date, time, timedelta

import pytest

from tennisplan.core.exceptions import ValidationException
from tennisplan.core.timezone_utils import get_school_today
from tennisplan.models import SubstituteAssignment
from tennisplan.models.enums import SessionStatus
from tennisplan.services.calendar_service import CalendarService
from tennisplan.services.planning_service import PlanningService


class TestCalendarWeek:
    def test_week_layout(self, db, make_session, trainer, shared_plan, player_anna, player_ben):
        make_session(
            trainer, shared_plan, [player_anna, player_ben], date(2024, 6, 5), time(8, 30), time(10, 0),
            SessionStatus.PLANNED,
        )

        week = CalendarService(db).week(anchor=date(2024, 6, 6))

        assert week.week_start == date(2024, 6, 3)
        assert week.week_end == date(2024, 6, 9)
        assert week.prev_week == date(2024, 5, 27)
        assert week.next_week == date(2024, 6, 10)
        assert week.hours[0] == "07:00"
        assert week.hours[-1] == "22:00"
        assert len(week.days) == 7
        assert week.days[0].label == "Mo 03.06."

        event = week.days[2].events[0]
        assert event.top_px == 60
        assert event.height_px == 60
        assert event.show_second_line is True
        assert event.player_names == "Anna Schmidt, Ben Fischer"
        assert event.rate_plan_name == "Gruppe"
        assert event.status_label == "offen"
        assert event.trainer_name == trainer.name

    def test_short_session_hides_second_line(self, db, make_session, trainer, shared_plan, player_anna):
        make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3), time(7, 0), time(7, 30))

        event = CalendarService(db).week(anchor=date(2024, 6, 3)).days[0].events[0]

        assert event.height_px == 22
        assert event.show_second_line is False
        assert event.status_label == "durchgeführt"

    def test_filter_by_effective_trainer(
        self, db, make_session, trainer, other_trainer, shared_plan, player_anna
    ):
        covered = make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3))
        make_session(trainer, shared_plan, [player_anna], date(2024, 6, 4))
        covered.substitute = SubstituteAssignment(original_trainer=trainer, substitute_trainer=other_trainer)
        db.commit()

        week = CalendarService(db).week(anchor=date(2024, 6, 3), trainer_id=other_trainer.id)

        events = [event for day in week.days for event in day.events]
        assert [event.session_id for event in events] == [covered.id]
        assert events[0].has_substitute is True
        assert events[0].trainer_name == other_trainer.name

    def test_empty_week_defaults_to_today(self, db):
        week = CalendarService(db).week()

        assert any(day.is_today for day in week.days)
        assert all(day.events == [] for day in week.days)

    @pytest.mark.parametrize("anchor", [date(9999, 12, 31), date(1, 1, 3)])
    def test_week_at_calendar_edges_is_rejected(self, db, anchor):
        with pytest.raises(ValidationException) as exc:
            CalendarService(db).week(anchor)

        assert exc.value.code == "INVALID_WEEK"


class TestPlanningOverview:
    def test_overview(self, db, make_session, trainer, other_trainer, shared_plan, player_anna):
        today = get_school_today()
        make_session(trainer, shared_plan, [player_anna], today, status=SessionStatus.PLANNED)
        make_session(trainer, shared_plan, [player_anna], today + timedelta(days=2), status=SessionStatus.PLANNED)
        make_session(trainer, shared_plan, [player_anna], today + timedelta(days=3), status=SessionStatus.CANCELLED)
        make_session(trainer, shared_plan, [player_anna], today - timedelta(days=1))
        covered = make_session(
            trainer, shared_plan, [player_anna], today + timedelta(days=1), status=SessionStatus.PLANNED
        )
        covered.substitute = SubstituteAssignment(original_trainer=trainer, substitute_trainer=other_trainer)
        db.commit()

        overview = PlanningService(db).overview()

        assert len(overview.upcoming) == 4
        assert overview.upcoming[0].session_date == today
        workload = {row.trainer_id: row.session_count for row in overview.workload}
        assert workload == {trainer.id: 2, other_trainer.id: 1}
        assert [s.training_session_id for s in overview.substitutes] == [covered.id]
        assert overview.counts.sessions == 5
        assert overview.counts.players == 1
