from datetime import date, time
from decimal import Decimal

import pytest

from tennisplan.core.exceptions import ValidationException
from tennisplan.models import MonthlyPayment, Player, RatePlan, Trainer, TrainingSession
from tennisplan.models.enums import BillingMode, PaymentMethod, SessionStatus
from tennisplan.models.intake import RegistrationRequest
from tennisplan.services.data_admin_service import DataAdminService
from tennisplan.services.substitute_service import SubstituteService


def _legacy_state():
    return {
        "trainer": {"name": "Tom Richter", "email": "tom@example.com"},
        "spieler": [
            {"id": "s1", "name": "Lena", "kontaktEmail": "lena@example.com", "rechnungsAdresse": "Am Platz 3"},
            {"id": "s2", "name": "Max", "kontaktTelefon": "0171 123", "notizen": "  "},
            {"id": "s3", "name": "  "},
        ],
        "tarife": [
            {"id": "t1", "name": "Einzel", "preisProStunde": 30, "abrechnung": "proSpieler"},
            {"id": "t2", "name": "Gruppe", "preisProStunde": "40", "abrechnung": "proTraining", "beschreibung": "2-4"},
        ],
        "trainings": [
            {
                "id": "a",
                "datum": "2024-06-03",
                "uhrzeitVon": "17:00",
                "uhrzeitBis": "18:00",
                "status": "durchgefuehrt",
                "spielerIds": ["s1", "s2", "ghost"],
                "tarifId": "t1",
                "serieId": "serie-1",
            },
            {
                "id": "b",
                "datum": "2024-06-10",
                "uhrzeitVon": "17:00",
                "uhrzeitBis": "18:00",
                "status": "geplant",
                "spielerIds": ["s1"],
                "tarifId": "t1",
                "serieId": "serie-1",
            },
            {
                "id": "c",
                "datum": "2024-06-12",
                "uhrzeitVon": "09:00",
                "uhrzeitBis": "10:30",
                "status": "abgesagt",
                "spielerIds": ["s2"],
                "tarifId": "missing",
                "notiz": "Regen",
            },
            {"id": "d", "datum": "kaputt", "uhrzeitVon": "09:00", "uhrzeitBis": "10:00"},
        ],
        "abrechnungPaid": {"2024-06": ["s1", "ghost"], "Juni": ["s2"]},
    }


class TestLegacyImport:
    def test_imports_master_data(self, db):
        result = DataAdminService(db).import_legacy(_legacy_state())

        assert result.source == "legacy"
        assert result.trainers == 1
        assert result.players == 2
        assert result.rate_plans == 2
        assert result.sessions == 3
        assert result.dropped_player_refs == 1

        trainer = db.query(Trainer).one()
        assert trainer.name == "Tom Richter"
        assert trainer.email == "tom@example.com"

        max_player = db.query(Player).filter_by(name="Max").one()
        assert max_player.contact_phone == "0171 123"
        assert max_player.notes is None

        modes = {plan.name: plan.billing_mode for plan in db.query(RatePlan).all()}
        assert modes == {"Einzel": BillingMode.PER_PLAYER.value, "Gruppe": BillingMode.PER_TRAINING.value}

    def test_maps_sessions(self, db):
        DataAdminService(db).import_legacy(_legacy_state())

        sessions = db.query(TrainingSession).order_by(TrainingSession.session_date).all()
        assert [s.status for s in sessions] == [
            SessionStatus.COMPLETED.value,
            SessionStatus.PLANNED.value,
            SessionStatus.CANCELLED.value,
        ]
        assert sessions[0].series_id is not None
        assert sessions[0].series_id == sessions[1].series_id
        assert len(sessions[0].series_id) == 26
        assert sessions[2].series_id is None
        assert sessions[2].rate_plan_id is None
        assert sessions[2].note == "Regen"
        assert sessions[2].start_time == time(9, 0)
        assert sorted(p.name for p in sessions[0].players) == ["Lena", "Max"]
        assert sessions[0].completed_at is not None

    def test_paid_lists_become_transfer_payments(self, db):
        result = DataAdminService(db).import_legacy(_legacy_state())

        payment = db.query(MonthlyPayment).one()
        assert result.payments == 1
        assert payment.billing_month == "2024-06"
        assert payment.method == PaymentMethod.TRANSFER.value
        assert payment.amount == Decimal("30.00")
        assert payment.player.name == "Lena"
        assert any("Juni" in warning for warning in result.warnings)

    def test_paid_month_that_is_not_a_list_is_skipped(self, db):
        state = _legacy_state()
        state["abrechnungPaid"] = {"2024-06": "s1", "2024-05": None}

        result = DataAdminService(db).import_legacy(state)

        assert result.payments == 0
        assert db.query(MonthlyPayment).count() == 0
        assert any("2024-06 is not a list" in warning for warning in result.warnings)

    def test_missing_keys_use_defaults(self, db):
        result = DataAdminService(db).import_data({"trainings": []})

        assert result.source == "legacy"
        assert result.players == 0
        assert db.query(Trainer).one().name == "Trainer"

    def test_replaces_planning_data_but_keeps_intake(self, db, trainer, player_anna):
        db.add(RegistrationRequest(name="Neu", email="neu@example.com"))
        db.commit()

        DataAdminService(db).import_legacy(_legacy_state())

        assert db.query(Player).filter_by(name="Anna Schmidt").count() == 0
        assert db.query(Trainer).count() == 1
        assert db.query(RegistrationRequest).count() == 1


class TestBackup:
    def test_export_then_restore(
        self, db, make_session, trainer, other_trainer, shared_plan, flat_plan, player_anna, player_ben
    ):
        session = make_session(trainer, shared_plan, [player_anna, player_ben], date(2024, 6, 3), note="Aufschlag")
        make_session(trainer, flat_plan, [player_anna], date(2024, 6, 4), status=SessionStatus.PLANNED)
        SubstituteService(db).assign(session.id, other_trainer.id, "Urlaub")
        db.add(
            MonthlyPayment(
                player_id=player_ben.id, billing_month="2024-06", amount=Decimal("20.00"), method="cash"
            )
        )
        db.commit()

        service = DataAdminService(db)
        document = service.export()

        assert document["format"] == "tennisplan-backup"
        assert document["version"] == 1
        assert len(document["trainers"]) == 2
        assert len(document["sessions"]) == 2
        exported = next(s for s in document["sessions"] if s["id"] == session.id)
        assert sorted(exported["player_ids"]) == sorted([player_anna.id, player_ben.id])
        assert exported["start_time"] == "17:00"
        assert document["substitutes"][0]["substitute_trainer_id"] == other_trainer.id
        assert document["payments"][0]["amount"] == "20.00"

        db.query(Player).filter_by(id=player_ben.id).one().name = "Umbenannt"
        db.commit()

        result = service.import_data(document)

        assert result.source == "backup"
        assert result.sessions == 2
        assert result.substitutes == 1
        assert result.payments == 1
        assert result.warnings == []
        assert db.get(Player, player_ben.id).name == "Ben Fischer"
        restored = db.get(TrainingSession, session.id)
        assert restored.note == "Aufschlag"
        assert restored.effective_trainer_id == other_trainer.id
        assert db.get(RatePlan, flat_plan.id).monthly_fee == Decimal("60.00")

    def test_restore_drops_unknown_references(self, db):
        document = {
            "format": "tennisplan-backup",
            "version": 1,
            "trainers": [{"id": "01HZX3V2E6X8J4Q9R7T5W1Y0AA", "name": "Sarah"}],
            "players": [],
            "rate_plans": [],
            "sessions": [
                {
                    "id": "01HZX3V2E6X8J4Q9R7T5W1Y0AB",
                    "trainer_id": "01HZX3V2E6X8J4Q9R7T5W1Y0AA",
                    "session_date": "2024-06-03",
                    "start_time": "10:00",
                    "end_time": "11:00",
                    "status": "completed",
                    "player_ids": ["unknown"],
                },
                {
                    "id": "01HZX3V2E6X8J4Q9R7T5W1Y0AC",
                    "trainer_id": "nobody",
                    "session_date": "2024-06-03",
                    "start_time": "10:00",
                    "end_time": "11:00",
                },
            ],
        }

        result = DataAdminService(db).import_data(document)

        assert result.sessions == 1
        assert result.dropped_player_refs == 1
        assert len(result.warnings) == 1

    def test_unsupported_version(self, db):
        with pytest.raises(ValidationException) as exc_info:
            DataAdminService(db).import_data({"format": "tennisplan-backup", "version": 99})

        assert exc_info.value.code == "UNSUPPORTED_BACKUP_VERSION"

    def test_unknown_format(self, db):
        with pytest.raises(ValidationException) as exc_info:
            DataAdminService(db).import_data({"foo": "bar"})

        assert exc_info.value.code == "UNKNOWN_IMPORT_FORMAT"


class TestStatsAndReset:
    def test_stats(self, db, make_session, trainer, shared_plan, player_anna):
        make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3))
        make_session(trainer, shared_plan, [player_anna], date(2024, 6, 4), status=SessionStatus.CANCELLED)

        stats = DataAdminService(db).stats()

        assert stats.trainers == 1
        assert stats.sessions == 2
        assert stats.sessions_by_status == {"planned": 0, "completed": 1, "cancelled": 1}
        assert stats.registrations == 0

    def test_reset_deletes_everything(self, db, make_session, trainer, shared_plan, player_anna):
        make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3))
        db.add(RegistrationRequest(name="Neu", email="neu@example.com"))
        db.commit()

        result = DataAdminService(db).reset()

        assert result.deleted["sessions"] == 1
        assert result.deleted["registrations"] == 1
        assert db.query(TrainingSession).count() == 0
        assert db.query(Player).count() == 0
