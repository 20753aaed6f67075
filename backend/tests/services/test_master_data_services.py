"""Trainers, players and rate plans."""

from datetime import date
from decimal import Decimal
import logging

import pytest

from tennisplan.core.exceptions import ConflictException, NotFoundException, ValidationException
from tennisplan.models import TrainingSession
from tennisplan.schemas.player import PlayerCreate, PlayerUpdate
from tennisplan.schemas.rate_plan import RatePlanCreate, RatePlanUpdate
from tennisplan.schemas.trainer import TrainerCreate, TrainerUpdate
from tennisplan.services.player_service import PlayerService
from tennisplan.services.rate_plan_service import RatePlanService
from tennisplan.services.trainer_service import TrainerService


class TestTrainerService:
    def test_create_trims_and_nulls_blanks(self, db):
        trainer = TrainerService(db).create_trainer(TrainerCreate(name="  Sarah  ", phone=" ", hourly_wage="22,50"))

        assert trainer.name == "Sarah"
        assert trainer.phone is None
        assert trainer.hourly_wage == Decimal("22.50")

    def test_update(self, db, trainer):
        updated = TrainerService(db).update_trainer(trainer.id, TrainerUpdate(is_active=False))

        assert updated.is_active is False
        assert updated.name == trainer.name

    def test_list_active_only(self, db, trainer, other_trainer):
        service = TrainerService(db)
        service.update_trainer(other_trainer.id, TrainerUpdate(is_active=False))

        assert [t.id for t in service.list_trainers(include_inactive=False)] == [trainer.id]
        assert len(service.list_trainers()) == 2

    def test_delete_with_sessions_conflicts(self, db, make_session, trainer, shared_plan, player_anna):
        make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3))

        with pytest.raises(ConflictException) as exc_info:
            TrainerService(db).delete_trainer(trainer.id)

        assert exc_info.value.code == "TRAINER_HAS_SESSIONS"

    def test_delete(self, db, other_trainer):
        service = TrainerService(db)
        service.delete_trainer(other_trainer.id)

        with pytest.raises(NotFoundException):
            service.get_trainer(other_trainer.id)


class TestPlayerService:
    def test_search_matches_contact_fields(self, db, player_anna, player_ben):
        service = PlayerService(db)

        assert [p.id for p in service.list_players("ANNA")] == [player_anna.id]
        assert [p.id for p in service.list_players("musterstadt")] == [player_anna.id]
        assert [p.id for p in service.list_players("ben@")] == [player_ben.id]
        assert len(service.list_players("  ")) == 2

    def test_update_clears_optional_text(self, db, player_anna):
        updated = PlayerService(db).update_player(player_anna.id, PlayerUpdate(billing_address="   "))

        assert updated.billing_address is None

    def test_create_requires_name(self):
        with pytest.raises(ValueError):
            PlayerCreate(name="   ")

    def test_delete_removes_player_from_sessions(self, db, make_session, trainer, shared_plan, player_anna, player_ben):
        session = make_session(trainer, shared_plan, [player_anna, player_ben], date(2024, 6, 3))

        PlayerService(db).delete_player(player_anna.id)
        db.expire_all()

        remaining = db.get(TrainingSession, session.id)
        assert remaining.player_ids == [player_ben.id]


class TestRatePlanService:
    def test_monthly_flat_requires_fee(self):
        with pytest.raises(ValueError):
            RatePlanCreate(name="Abo", price_per_hour=0, billing_mode="monthly_flat")

    def test_update_to_flat_without_fee(self, db, shared_plan):
        with pytest.raises(ValidationException) as exc_info:
            RatePlanService(db).update_rate_plan(shared_plan.id, RatePlanUpdate(billing_mode="monthly_flat"))

        assert exc_info.value.code == "MONTHLY_FEE_REQUIRED"

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            RatePlanCreate(name="Gratis", price_per_hour=-1)

    def test_delete_detaches_sessions(self, db, make_session, trainer, shared_plan, player_anna):
        session = make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3))

        RatePlanService(db).delete_rate_plan(shared_plan.id)
        db.expire_all()

        remaining = db.get(TrainingSession, session.id)
        assert remaining is not None
        assert remaining.rate_plan_id is None


class TestOperationLogging:
    def test_creates_log_at_info_level(self, db, caplog):
        with caplog.at_level(logging.INFO, logger="tennisplan.services"):
            TrainerService(db).create_trainer(TrainerCreate(name="Sarah"))
            PlayerService(db).create_player(PlayerCreate(name="Lena"))
            RatePlanService(db).create_rate_plan(RatePlanCreate(name="Einzel", price_per_hour=30))

        records = {r.operation: r for r in caplog.records if hasattr(r, "operation")}
        assert records["create_trainer"].trainer_name == "Sarah"
        assert records["create_player"].player_name == "Lena"
        assert records["create_rate_plan"].rate_plan_name == "Einzel"

    def test_reserved_context_keys_are_prefixed(self, db, caplog):
        with caplog.at_level(logging.INFO, logger="tennisplan.services"):
            TrainerService(db).log_operation("rename_keys", name="x", message="y", module="z")

        record = next(r for r in caplog.records if getattr(r, "operation", None) == "rename_keys")
        assert record.ctx_name == "x"
        assert record.ctx_message == "y"
        assert record.ctx_module == "z"
        assert record.name == "tennisplan.services.TrainerService"
