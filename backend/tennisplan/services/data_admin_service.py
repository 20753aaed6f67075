# backend/tennisplan/services/data_admin_service.py
"""
Data administration: JSON backup export, import and full reset.

Two import formats are understood:

- the backup written by ``export()`` (``"format": "tennisplan-backup"``),
  restored with its ids
- the browser-storage export of the old single-trainer planner
  (``trainer``, ``spieler``, ``tarife``, ``trainings``, ``abrechnungPaid``)

Either import replaces all planning data (trainers, players, rate plans,
sessions, substitutes, payments). Registrations and SEPA mandates stay.
"""

from datetime import date, datetime, time
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ValidationException
from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..models.enums import BillingMode, PaymentMethod, SessionStatus
from ..models.intake import RegistrationRequest, SepaMandate
from ..models.payment import MonthlyPayment
from ..models.player import Player
from ..models.rate_plan import RatePlan
from ..models.trainer import Trainer
from ..models.training import SubstituteAssignment, TrainingSession
from ..repositories.factory import RepositoryFactory
from ..schemas.admin import BACKUP_FORMAT, BACKUP_VERSION, DataStatsResponse, ImportResultResponse, ResetResponse
from ..schemas.base import parse_hhmm
from ..utils.money import round2
from ..utils.time_utils import MONTH_REGEX, time_to_hhmm
from .base import BaseService
from .billing_service import BillingService

logger = logging.getLogger(__name__)

LEGACY_KEYS = ("trainer", "spieler", "tarife", "trainings", "abrechnungPaid")

LEGACY_BILLING_MODES = {
    "proTraining": BillingMode.PER_TRAINING,
    "proSpieler": BillingMode.PER_PLAYER,
}

LEGACY_STATUSES = {
    "geplant": SessionStatus.PLANNED,
    "durchgefuehrt": SessionStatus.COMPLETED,
    "abgesagt": SessionStatus.CANCELLED,
}

# Planning tables in delete order (children first)
PLANNING_MODELS = (
    ("payments", MonthlyPayment),
    ("substitutes", SubstituteAssignment),
    ("sessions", TrainingSession),
    ("players", Player),
    ("rate_plans", RatePlan),
    ("trainers", Trainer),
)

INTAKE_MODELS = (
    ("registrations", RegistrationRequest),
    ("sepa_mandates", SepaMandate),
)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _money_text(value: Any) -> Optional[str]:
    return None if value is None else str(round2(value))


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except (TypeError, ValueError):
        return None


def _parse_time(value: Any) -> Optional[time]:
    try:
        parsed = parse_hhmm(str(value or ""))
    except ValueError:
        return None
    return parsed if isinstance(parsed, time) else None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _records(value: Any) -> List[Dict[str, Any]]:
    """Dict entries of a JSON array; anything else is ignored."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def is_legacy_document(document: Dict[str, Any]) -> bool:
    return document.get("format") != BACKUP_FORMAT and any(key in document for key in LEGACY_KEYS)


class DataAdminService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)
        self.player_repository = RepositoryFactory.create_player_repository(db)
        self.rate_plan_repository = RepositoryFactory.create_rate_plan_repository(db)
        self.training_repository = RepositoryFactory.create_training_repository(db)
        self.substitute_repository = RepositoryFactory.create_substitute_repository(db)
        self.payment_repository = RepositoryFactory.create_payment_repository(db)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    @BaseService.measure_operation("export_backup")
    def export(self) -> Dict[str, Any]:
        """Full JSON backup of the planning data."""
        trainers = self.trainer_repository.list_ordered()
        players = self.player_repository.search()
        rate_plans = self.rate_plan_repository.list_ordered()
        sessions = self.training_repository.list_all()
        payments = self.payment_repository.list_all()

        document = {
            "format": BACKUP_FORMAT,
            "version": BACKUP_VERSION,
            "exported_at": utc_now().isoformat(),
            "school_name": settings.school_name,
            "trainers": [
                {
                    "id": t.id,
                    "name": t.name,
                    "email": t.email,
                    "phone": t.phone,
                    "hourly_wage": _money_text(t.hourly_wage),
                    "is_active": bool(t.is_active),
                }
                for t in trainers
            ],
            "players": [
                {
                    "id": p.id,
                    "name": p.name,
                    "contact_email": p.contact_email,
                    "contact_phone": p.contact_phone,
                    "notes": p.notes,
                    "billing_address": p.billing_address,
                }
                for p in players
            ],
            "rate_plans": [
                {
                    "id": r.id,
                    "name": r.name,
                    "price_per_hour": _money_text(r.price_per_hour),
                    "billing_mode": r.billing_mode,
                    "monthly_fee": _money_text(r.monthly_fee),
                    "description": r.description,
                }
                for r in rate_plans
            ],
            "sessions": [
                {
                    "id": s.id,
                    "trainer_id": s.trainer_id,
                    "rate_plan_id": s.rate_plan_id,
                    "session_date": s.session_date.isoformat(),
                    "start_time": time_to_hhmm(s.start_time),
                    "end_time": time_to_hhmm(s.end_time),
                    "status": s.status,
                    "note": s.note,
                    "series_id": s.series_id,
                    "completed_at": s.completed_at.isoformat() if s.completed_at else None,
                    "player_ids": s.player_ids,
                }
                for s in sessions
            ],
            "substitutes": [
                {
                    "training_session_id": s.id,
                    "original_trainer_id": s.substitute.original_trainer_id,
                    "substitute_trainer_id": s.substitute.substitute_trainer_id,
                    "reason": s.substitute.reason,
                }
                for s in sessions
                if s.substitute is not None
            ],
            "payments": [
                {
                    "player_id": p.player_id,
                    "billing_month": p.billing_month,
                    "amount": _money_text(p.amount),
                    "method": p.method,
                    "note": p.note,
                    "paid_at": p.paid_at.isoformat() if p.paid_at else None,
                }
                for p in payments
            ],
        }
        self.log_operation("export_backup", sessions=len(sessions), players=len(players))
        return document

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    @BaseService.measure_operation("import_data")
    def import_data(self, document: Dict[str, Any]) -> ImportResultResponse:
        """Restore a backup or import a legacy planner export, replacing planning data."""
        if not isinstance(document, dict):
            raise ValidationException("Import document must be a JSON object", code="INVALID_IMPORT")
        if document.get("format") == BACKUP_FORMAT:
            return self.restore_backup(document)
        if is_legacy_document(document):
            return self.import_legacy(document)
        raise ValidationException("Unknown import format", code="UNKNOWN_IMPORT_FORMAT")

    def _clear_planning_data(self) -> Dict[str, int]:
        deleted = {}
        for name, model in PLANNING_MODELS:
            deleted[name] = RepositoryFactory.create_base_repository(self.db, model).delete_all()
        return deleted

    @BaseService.measure_operation("restore_backup")
    def restore_backup(self, document: Dict[str, Any]) -> ImportResultResponse:
        version = document.get("version")
        if version != BACKUP_VERSION:
            raise ValidationException(
                "Unsupported backup version", code="UNSUPPORTED_BACKUP_VERSION", details={"version": version}
            )

        warnings: List[str] = []
        dropped_refs = 0
        with self.transaction():
            self._clear_planning_data()

            trainers = {}
            for raw in _records(document.get("trainers")):
                trainer = self.trainer_repository.create(
                    id=raw.get("id") or generate_ulid(),
                    name=_text(raw.get("name")) or settings.default_trainer_name,
                    email=_text(raw.get("email")),
                    phone=_text(raw.get("phone")),
                    hourly_wage=round2(raw["hourly_wage"]) if raw.get("hourly_wage") is not None else None,
                    is_active=bool(raw.get("is_active", True)),
                )
                trainers[trainer.id] = trainer

            players = {}
            for raw in _records(document.get("players")):
                name = _text(raw.get("name"))
                if not name:
                    warnings.append("Skipped player without name")
                    continue
                player = self.player_repository.create(
                    id=raw.get("id") or generate_ulid(),
                    name=name,
                    contact_email=_text(raw.get("contact_email")),
                    contact_phone=_text(raw.get("contact_phone")),
                    notes=_text(raw.get("notes")),
                    billing_address=_text(raw.get("billing_address")),
                )
                players[player.id] = player

            rate_plans = {}
            for raw in _records(document.get("rate_plans")):
                try:
                    mode = BillingMode(raw.get("billing_mode") or BillingMode.PER_TRAINING.value)
                except ValueError:
                    warnings.append(f"Rate plan {raw.get('id')}: unknown billing mode, using per_training")
                    mode = BillingMode.PER_TRAINING
                monthly_fee = round2(raw["monthly_fee"]) if raw.get("monthly_fee") is not None else None
                if mode is BillingMode.MONTHLY_FLAT and monthly_fee is None:
                    monthly_fee = Decimal("0.00")
                plan = self.rate_plan_repository.create(
                    id=raw.get("id") or generate_ulid(),
                    name=_text(raw.get("name")) or "Tarif",
                    price_per_hour=max(round2(raw.get("price_per_hour")), Decimal("0.00")),
                    billing_mode=mode.value,
                    monthly_fee=monthly_fee,
                    description=_text(raw.get("description")),
                )
                rate_plans[plan.id] = plan

            sessions = {}
            for raw in _records(document.get("sessions")):
                parsed = self._parse_session(raw, warnings)
                if parsed is None:
                    continue
                session_date, start, end, status = parsed
                trainer_id = raw.get("trainer_id")
                if trainer_id not in trainers:
                    warnings.append(f"Session {raw.get('id')}: unknown trainer, skipped")
                    continue
                known_players = [players[pid] for pid in raw.get("player_ids") or [] if pid in players]
                dropped_refs += len(raw.get("player_ids") or []) - len(known_players)
                session = self.training_repository.create(
                    id=raw.get("id") or generate_ulid(),
                    trainer_id=trainer_id,
                    rate_plan_id=raw.get("rate_plan_id") if raw.get("rate_plan_id") in rate_plans else None,
                    session_date=session_date,
                    start_time=start,
                    end_time=end,
                    status=status.value,
                    note=_text(raw.get("note")),
                    series_id=_text(raw.get("series_id")),
                    completed_at=_parse_datetime(raw.get("completed_at")),
                )
                session.players = known_players
                sessions[session.id] = session

            substitute_count = 0
            for raw in _records(document.get("substitutes")):
                session = sessions.get(raw.get("training_session_id"))
                substitute_id = raw.get("substitute_trainer_id")
                if session is None or substitute_id not in trainers or substitute_id == session.trainer_id:
                    warnings.append(f"Substitute for session {raw.get('training_session_id')}: skipped")
                    continue
                session.substitute = SubstituteAssignment(
                    original_trainer_id=session.trainer_id,
                    substitute_trainer_id=substitute_id,
                    reason=_text(raw.get("reason")),
                )
                substitute_count += 1

            payment_count = 0
            for raw in _records(document.get("payments")):
                player_id = raw.get("player_id")
                month = str(raw.get("billing_month") or "")
                if player_id not in players or not MONTH_REGEX.fullmatch(month):
                    warnings.append(f"Payment {player_id} {month}: skipped")
                    continue
                try:
                    method = PaymentMethod(raw.get("method") or PaymentMethod.CASH.value)
                except ValueError:
                    method = PaymentMethod.TRANSFER
                self.payment_repository.create(
                    player_id=player_id,
                    billing_month=month,
                    amount=round2(raw.get("amount")),
                    method=method.value,
                    note=_text(raw.get("note")),
                    paid_at=_parse_datetime(raw.get("paid_at")) or utc_now(),
                )
                payment_count += 1

            self.db.flush()

        self.log_operation("restore_backup", sessions=len(sessions), warnings=len(warnings))
        return ImportResultResponse(
            source="backup",
            trainers=len(trainers),
            players=len(players),
            rate_plans=len(rate_plans),
            sessions=len(sessions),
            substitutes=substitute_count,
            payments=payment_count,
            dropped_player_refs=dropped_refs,
            warnings=warnings,
        )

    @BaseService.measure_operation("import_legacy")
    def import_legacy(self, state: Dict[str, Any]) -> ImportResultResponse:
        """
        Import the old planner's export.

        Missing keys fall back to empty collections and a trainer named after
        ``settings.default_trainer_name``. Legacy ids are replaced by new ULIDs;
        sessions of one legacy series share one new series id. Players listed as
        paid for a month become ``transfer`` payments of their monthly total.
        """
        legacy_trainer = state.get("trainer") or {}
        if not isinstance(legacy_trainer, dict):
            legacy_trainer = {}
        warnings: List[str] = []
        dropped_refs = 0

        with self.transaction():
            self._clear_planning_data()

            trainer = self.trainer_repository.create(
                name=_text(legacy_trainer.get("name")) or settings.default_trainer_name,
                email=_text(legacy_trainer.get("email")),
                is_active=True,
            )

            player_ids: Dict[str, str] = {}
            players: Dict[str, Player] = {}
            for raw in _records(state.get("spieler")):
                name = _text(raw.get("name"))
                if not name:
                    warnings.append(f"Spieler {raw.get('id')}: no name, skipped")
                    continue
                player = self.player_repository.create(
                    name=name,
                    contact_email=_text(raw.get("kontaktEmail")),
                    contact_phone=_text(raw.get("kontaktTelefon")),
                    notes=_text(raw.get("notizen")),
                    billing_address=_text(raw.get("rechnungsAdresse")),
                )
                player_ids[str(raw.get("id"))] = player.id
                players[player.id] = player

            plan_ids: Dict[str, RatePlan] = {}
            for raw in _records(state.get("tarife")):
                mode = LEGACY_BILLING_MODES.get(raw.get("abrechnung"), BillingMode.PER_TRAINING)
                plan = self.rate_plan_repository.create(
                    name=_text(raw.get("name")) or "Tarif",
                    price_per_hour=max(round2(raw.get("preisProStunde")), Decimal("0.00")),
                    billing_mode=mode.value,
                    description=_text(raw.get("beschreibung")),
                )
                plan_ids[str(raw.get("id"))] = plan

            series_ids: Dict[str, str] = {}
            session_count = 0
            for raw in _records(state.get("trainings")):
                parsed = self._parse_session(
                    {
                        "id": raw.get("id"),
                        "session_date": raw.get("datum"),
                        "start_time": raw.get("uhrzeitVon"),
                        "end_time": raw.get("uhrzeitBis"),
                        "status": LEGACY_STATUSES.get(raw.get("status"), SessionStatus.PLANNED).value,
                    },
                    warnings,
                )
                if parsed is None:
                    continue
                session_date, start, end, status = parsed

                legacy_player_ids = [str(pid) for pid in raw.get("spielerIds") or []]
                known = [players[player_ids[pid]] for pid in legacy_player_ids if pid in player_ids]
                dropped_refs += len(legacy_player_ids) - len(known)

                legacy_series = _text(raw.get("serieId"))
                series_id = None
                if legacy_series:
                    series_id = series_ids.setdefault(legacy_series, generate_ulid())

                plan = plan_ids.get(str(raw.get("tarifId")))
                session = self.training_repository.create(
                    trainer_id=trainer.id,
                    rate_plan_id=plan.id if plan else None,
                    session_date=session_date,
                    start_time=start,
                    end_time=end,
                    status=status.value,
                    note=_text(raw.get("notiz")),
                    series_id=series_id,
                    completed_at=utc_now() if status == SessionStatus.COMPLETED else None,
                )
                session.players = known
                session_count += 1

            self.db.flush()
            payment_count = self._import_legacy_payments(state.get("abrechnungPaid") or {}, player_ids, warnings)

        self.log_operation(
            "import_legacy",
            players=len(players),
            sessions=session_count,
            dropped_player_refs=dropped_refs,
        )
        return ImportResultResponse(
            source="legacy",
            trainers=1,
            players=len(players),
            rate_plans=len(plan_ids),
            sessions=session_count,
            substitutes=0,
            payments=payment_count,
            dropped_player_refs=dropped_refs,
            warnings=warnings,
        )

    def _import_legacy_payments(
        self, paid: Dict[str, Any], player_ids: Dict[str, str], warnings: List[str]
    ) -> int:
        if not isinstance(paid, dict):
            warnings.append("abrechnungPaid is not an object, ignored")
            return 0

        billing = BillingService(self.db)
        count = 0
        for month, legacy_ids in paid.items():
            if not MONTH_REGEX.fullmatch(str(month)):
                warnings.append(f"abrechnungPaid: invalid month {month!r}, skipped")
                continue
            if legacy_ids is None:
                continue
            if not isinstance(legacy_ids, list):
                warnings.append(f"abrechnungPaid: {month} is not a list, skipped")
                continue
            for legacy_id in dict.fromkeys(str(pid) for pid in legacy_ids):
                player_id = player_ids.get(legacy_id)
                if player_id is None:
                    continue
                self.payment_repository.create(
                    player_id=player_id,
                    billing_month=month,
                    amount=billing.player_total(month, player_id),
                    method=PaymentMethod.TRANSFER.value,
                    paid_at=utc_now(),
                )
                count += 1
        return count

    @staticmethod
    def _parse_session(
        raw: Dict[str, Any], warnings: List[str]
    ) -> Optional[Tuple[date, time, time, SessionStatus]]:
        session_date = _parse_date(raw.get("session_date"))
        start = _parse_time(raw.get("start_time"))
        end = _parse_time(raw.get("end_time"))
        if session_date is None or start is None or end is None:
            warnings.append(f"Session {raw.get('id')}: invalid date or time, skipped")
            return None
        if end <= start:
            warnings.append(f"Session {raw.get('id')}: end is not after start, skipped")
            return None
        try:
            status = SessionStatus(raw.get("status") or SessionStatus.PLANNED.value)
        except ValueError:
            warnings.append(f"Session {raw.get('id')}: unknown status, using planned")
            status = SessionStatus.PLANNED
        return session_date, start, end, status

    # ------------------------------------------------------------------
    # Stats and reset
    # ------------------------------------------------------------------

    @BaseService.measure_operation("data_stats")
    def stats(self) -> DataStatsResponse:
        by_status = {
            status.value: self.training_repository.count(status=status.value) for status in SessionStatus
        }
        return DataStatsResponse(
            trainers=self.trainer_repository.count(),
            players=self.player_repository.count(),
            rate_plans=self.rate_plan_repository.count(),
            sessions=sum(by_status.values()),
            sessions_by_status=by_status,
            substitutes=self.substitute_repository.count(),
            payments=self.payment_repository.count(),
            registrations=RepositoryFactory.create_registration_repository(self.db).count(),
            sepa_mandates=RepositoryFactory.create_sepa_mandate_repository(self.db).count(),
        )

    @BaseService.measure_operation("reset_data")
    def reset(self) -> ResetResponse:
        """Delete all data, intake forms included."""
        with self.transaction():
            deleted = self._clear_planning_data()
            for name, model in INTAKE_MODELS:
                deleted[name] = RepositoryFactory.create_base_repository(self.db, model).delete_all()
        self.logger.warning("All data deleted", extra={"deleted": deleted})
        return ResetResponse(deleted=deleted)
