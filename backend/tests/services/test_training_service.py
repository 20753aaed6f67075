"""Training session creation, weekly series, scoped edits and conflicts."""

from datetime import date, time, timedelta

import pytest

from tennisplan.core.exceptions import NotFoundException, SessionConflictException, ValidationException
from tennisplan.core.timezone_utils import get_school_today
from tennisplan.models.enums import SessionStatus, UpdateScope
from tennisplan.schemas.training import TrainingSessionCreate, TrainingSessionUpdate
from tennisplan.services.substitute_service import SubstituteService
from tennisplan.services.training_service import TrainingService

MONDAY = date(2024, 6, 3)


@pytest.fixture
def service(db):
    return TrainingService(db)


@pytest.fixture
def create_data(trainer, shared_plan, player_anna, player_ben):
    def _data(**overrides):
        data = {
            "session_date": MONDAY,
            "start_time": "17:00",
            "end_time": "18:00",
            "trainer_id": trainer.id,
            "rate_plan_id": shared_plan.id,
            "player_ids": [player_anna.id, player_ben.id],
        }
        data.update(overrides)
        return TrainingSessionCreate(**data)

    return _data


@pytest.fixture
def series(service, create_data):
    """Four weekly Monday sessions, 03.06. to 24.06."""
    return service.create_sessions(create_data(repeat_weekly=True, repeat_until=date(2024, 6, 24)))


class TestCreate:
    def test_single_session(self, service, create_data, player_anna, player_ben):
        sessions = service.create_sessions(create_data(note="  Aufschlag üben "))

        assert len(sessions) == 1
        session = sessions[0]
        assert session.series_id is None
        assert session.status == SessionStatus.PLANNED.value
        assert session.note == "Aufschlag üben"
        assert sorted(session.player_ids) == sorted([player_anna.id, player_ben.id])

    def test_weekly_series_shares_series_id(self, series):
        assert [s.session_date for s in series] == [MONDAY + timedelta(weeks=i) for i in range(4)]
        assert len({s.series_id for s in series}) == 1
        assert series[0].series_id is not None

    def test_repeat_until_before_date(self, service, create_data):
        with pytest.raises(ValidationException) as exc_info:
            service.create_sessions(create_data(repeat_weekly=True, repeat_until=MONDAY - timedelta(days=1)))

        assert exc_info.value.code == "INVALID_REPEAT_RANGE"

    def test_repeat_until_required(self, service, create_data):
        with pytest.raises(ValidationException):
            service.create_sessions(create_data(repeat_weekly=True))

    def test_created_completed_sets_timestamp(self, service, create_data):
        session = service.create_sessions(create_data(status=SessionStatus.COMPLETED))[0]

        assert session.completed_at is not None

    def test_unknown_player(self, service, create_data):
        with pytest.raises(ValidationException) as exc_info:
            service.create_sessions(create_data(player_ids=["01HZZZZZZZZZZZZZZZZZZZZZZZ"]))

        assert exc_info.value.code == "UNKNOWN_PLAYERS"

    def test_unknown_trainer(self, service, create_data):
        with pytest.raises(NotFoundException):
            service.create_sessions(create_data(trainer_id="01HZZZZZZZZZZZZZZZZZZZZZZZ"))

    def test_end_must_follow_start(self, create_data):
        with pytest.raises(ValueError):
            create_data(start_time="18:00", end_time="17:00")


class TestConflicts:
    def test_overlapping_session_is_rejected(self, service, create_data):
        service.create_sessions(create_data())

        with pytest.raises(SessionConflictException):
            service.create_sessions(create_data(start_time="17:30", end_time="18:30"))

    def test_adjacent_sessions_are_fine(self, service, create_data):
        service.create_sessions(create_data())

        sessions = service.create_sessions(create_data(start_time="18:00", end_time="19:00"))

        assert len(sessions) == 1

    def test_cancelled_sessions_do_not_block(self, service, create_data):
        service.create_sessions(create_data(status=SessionStatus.CANCELLED))

        assert len(service.create_sessions(create_data())) == 1

    def test_series_conflict_creates_nothing(self, service, create_data):
        service.create_sessions(create_data(session_date=MONDAY + timedelta(weeks=2)))

        with pytest.raises(SessionConflictException):
            service.create_sessions(create_data(repeat_weekly=True, repeat_until=date(2024, 6, 24)))

        assert len(service.list_sessions()) == 1

    def test_other_trainer_may_overlap(self, service, create_data, other_trainer):
        service.create_sessions(create_data())

        assert len(service.create_sessions(create_data(trainer_id=other_trainer.id))) == 1


class TestUpdate:
    def test_single_scope_changes_one_session(self, service, series):
        updated = service.update_session(series[1].id, TrainingSessionUpdate(start_time="16:00", end_time="17:00"))

        assert [s.id for s in updated] == [series[1].id]
        assert series[1].start_time == time(16, 0)
        assert series[2].start_time == time(17, 0)

    def test_following_scope_keeps_dates(self, service, series, other_trainer, player_anna):
        updated = service.update_session(
            series[1].id,
            TrainingSessionUpdate(
                start_time="15:00",
                end_time="16:30",
                trainer_id=other_trainer.id,
                player_ids=[player_anna.id],
                note="Sommerzeit",
                scope=UpdateScope.FOLLOWING,
            ),
        )

        assert [s.id for s in updated] == [s.id for s in series[1:]]
        for original, session in zip(series[1:], updated):
            assert session.session_date == original.session_date
            assert session.start_time == time(15, 0)
            assert session.trainer_id == other_trainer.id
            assert session.player_ids == [player_anna.id]
            assert session.note == "Sommerzeit"
        assert series[0].start_time == time(17, 0)
        assert series[0].trainer_id != other_trainer.id

    def test_following_copies_full_state_over_single_edits(self, service, series, player_anna):
        service.update_session(
            series[2].id,
            TrainingSessionUpdate(end_time="19:00", note="länger", player_ids=[player_anna.id]),
        )

        service.update_session(series[0].id, TrainingSessionUpdate(start_time="16:00", scope=UpdateScope.FOLLOWING))

        assert [(s.start_time, s.end_time) for s in series] == [(time(16, 0), time(18, 0))] * 4
        assert series[2].note is None
        assert len(series[2].player_ids) == 2

    def test_following_fixes_time_order_of_edited_member(self, service, series):
        service.update_session(series[2].id, TrainingSessionUpdate(start_time="16:00", end_time="16:30"))

        updated = service.update_session(
            series[0].id, TrainingSessionUpdate(start_time="17:30", scope=UpdateScope.FOLLOWING)
        )

        assert all(s.end_time > s.start_time for s in updated)
        assert series[2].start_time == time(17, 30)
        assert series[2].end_time == time(18, 0)

    def test_following_outside_series_edits_single(self, service, create_data):
        session = service.create_sessions(create_data())[0]

        updated = service.update_session(session.id, TrainingSessionUpdate(note="x", scope=UpdateScope.FOLLOWING))

        assert len(updated) == 1

    def test_update_into_conflict(self, service, series, create_data):
        other = service.create_sessions(create_data(session_date=MONDAY, start_time="19:00", end_time="20:00"))[0]

        with pytest.raises(SessionConflictException):
            service.update_session(other.id, TrainingSessionUpdate(start_time="17:30", end_time="18:30"))

    def test_cancelling_drops_substitute(self, db, service, series, other_trainer):
        SubstituteService(db).assign(series[0].id, other_trainer.id, "Krank")

        service.update_session(series[0].id, TrainingSessionUpdate(status=SessionStatus.CANCELLED))

        assert series[0].substitute is None
        assert series[0].status == SessionStatus.CANCELLED.value

    def test_invalid_time_order(self, service, series):
        with pytest.raises(ValidationException):
            service.update_session(series[0].id, TrainingSessionUpdate(start_time="19:00"))


class TestCompleteAndDelete:
    def test_complete_planned_session(self, service, series):
        session, changed = service.complete_session(series[0].id)

        assert changed is True
        assert session.status == SessionStatus.COMPLETED.value
        assert session.completed_at is not None

    def test_complete_is_idempotent(self, service, series):
        service.complete_session(series[0].id)

        session, changed = service.complete_session(series[0].id)

        assert changed is False
        assert session.status == SessionStatus.COMPLETED.value

    def test_cancelled_session_is_not_completed(self, service, series):
        service.update_session(series[0].id, TrainingSessionUpdate(status=SessionStatus.CANCELLED))

        session, changed = service.complete_session(series[0].id)

        assert changed is False
        assert session.status == SessionStatus.CANCELLED.value

    def test_delete_following(self, service, series):
        deleted = service.delete_sessions(series[2].id, UpdateScope.FOLLOWING)

        assert deleted == 2
        assert [s.id for s in service.list_sessions()] == [series[0].id, series[1].id]

    def test_delete_single(self, service, series):
        assert service.delete_sessions(series[2].id) == 1
        assert len(service.list_sessions()) == 3

    def test_delete_unknown(self, service):
        with pytest.raises(NotFoundException):
            service.delete_sessions("01HZZZZZZZZZZZZZZZZZZZZZZZ")


class TestQueries:
    def test_list_range_is_inclusive(self, service, series):
        sessions = service.list_sessions(date_from=date(2024, 6, 10), date_to=date(2024, 6, 17))

        assert [s.session_date for s in sessions] == [date(2024, 6, 10), date(2024, 6, 17)]

    def test_list_by_status(self, service, series):
        service.complete_session(series[0].id)

        completed = service.list_sessions(status=SessionStatus.COMPLETED)

        assert [s.id for s in completed] == [series[0].id]

    def test_upcoming_starts_today(self, service, create_data):
        today = get_school_today()
        service.create_sessions(create_data(session_date=today - timedelta(days=1)))
        later = service.create_sessions(create_data(session_date=today + timedelta(days=2)))[0]
        first = service.create_sessions(create_data(session_date=today, start_time="08:00", end_time="09:00"))[0]

        upcoming = service.upcoming()

        assert [s.id for s in upcoming] == [first.id, later.id]

    def test_upcoming_limit(self, service, create_data):
        today = get_school_today()
        service.create_sessions(
            create_data(session_date=today, repeat_weekly=True, repeat_until=today + timedelta(weeks=5))
        )

        assert len(service.upcoming(limit=3)) == 3
