from datetime import date, time

import pytest

from tennisplan.core.exceptions import (
    BusinessRuleException,
    NotFoundException,
    SessionConflictException,
    ValidationException,
)
from tennisplan.models import Trainer
from tennisplan.models.enums import SessionStatus
from tennisplan.services.substitute_service import SubstituteService

DAY = date(2024, 6, 3)


@pytest.fixture
def planned(make_session, trainer, shared_plan, player_anna):
    return make_session(trainer, shared_plan, [player_anna], DAY, status=SessionStatus.PLANNED)


def test_assign_makes_substitute_effective(db, planned, trainer, other_trainer):
    assignment = SubstituteService(db).assign(planned.id, other_trainer.id, "Turnier")

    assert assignment.original_trainer_id == trainer.id
    assert assignment.substitute_trainer_id == other_trainer.id
    assert assignment.reason == "Turnier"
    assert planned.effective_trainer_id == other_trainer.id


def test_reassign_replaces_previous(db, planned, other_trainer):
    third = Trainer(name="Lena Wolf", is_active=True)
    db.add(third)
    db.commit()
    service = SubstituteService(db)
    service.assign(planned.id, other_trainer.id)

    service.assign(planned.id, third.id, "Tausch")

    assert planned.effective_trainer_id == third.id
    assert service.substitute_repository.count() == 1


def test_substitute_must_differ_from_trainer(db, planned, trainer):
    with pytest.raises(ValidationException):
        SubstituteService(db).assign(planned.id, trainer.id)


def test_inactive_substitute(db, planned, other_trainer):
    other_trainer.is_active = False
    db.commit()

    with pytest.raises(BusinessRuleException) as exc_info:
        SubstituteService(db).assign(planned.id, other_trainer.id)

    assert exc_info.value.code == "TRAINER_INACTIVE"


def test_unknown_substitute(db, planned):
    with pytest.raises(NotFoundException):
        SubstituteService(db).assign(planned.id, "01HZZZZZZZZZZZZZZZZZZZZZZZ")


def test_cancelled_session(db, make_session, trainer, other_trainer, shared_plan, player_anna):
    cancelled = make_session(trainer, shared_plan, [player_anna], DAY, status=SessionStatus.CANCELLED)

    with pytest.raises(BusinessRuleException) as exc_info:
        SubstituteService(db).assign(cancelled.id, other_trainer.id)

    assert exc_info.value.code == "SESSION_CANCELLED"


def test_busy_substitute(db, planned, make_session, other_trainer, shared_plan, player_ben):
    make_session(other_trainer, shared_plan, [player_ben], DAY, time(17, 30), time(18, 30), SessionStatus.PLANNED)

    with pytest.raises(SessionConflictException):
        SubstituteService(db).assign(planned.id, other_trainer.id)


def test_remove(db, planned, trainer, other_trainer):
    service = SubstituteService(db)
    service.assign(planned.id, other_trainer.id)

    assert service.remove(planned.id) is True
    assert planned.effective_trainer_id == trainer.id
    assert service.remove(planned.id) is False


def test_list_in_range(db, make_session, planned, trainer, other_trainer, shared_plan, player_anna):
    later = make_session(trainer, shared_plan, [player_anna], date(2024, 6, 20), status=SessionStatus.PLANNED)
    service = SubstituteService(db)
    service.assign(planned.id, other_trainer.id)
    service.assign(later.id, other_trainer.id)

    assignments = service.list_substitutes(DAY, date(2024, 6, 10))

    assert [a.training_session_id for a in assignments] == [planned.id]


def test_list_rejects_reversed_range(db):
    with pytest.raises(ValidationException):
        SubstituteService(db).list_substitutes(date(2024, 6, 10), date(2024, 6, 1))
