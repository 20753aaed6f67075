# backend/tennisplan/services/billing_service.py
"""
Billing Service for the Tennisplan backend.

Aggregates the completed sessions of a billing month:

- per player: the rounded share of every session, grouped into
  ``count x amount`` lines, plus one monthly fee per flat-rate plan used
- per trainer (the substitute counts when one was assigned): sessions,
  minutes, revenue and wage payout
- payment state per player, split into cash and non-cash

Also records payments and renders HTML invoices.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import UNKNOWN_PLAYER_NAME
from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import get_school_today, utc_now
from ..models.enums import BillingMode, PaymentMethod, SessionStatus
from ..models.payment import MonthlyPayment
from ..models.training import TrainingSession
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.billing import (
    BillingSessionLine,
    BillingTotals,
    BreakdownLine,
    FlatFeeLine,
    MonthlyBillingResponse,
    PaymentInfo,
    PaymentStatusResponse,
    PlayerBillingRow,
    TrainerBillingRow,
)
from ..utils.money import format_euro, round2, to_decimal
from ..utils.time_utils import parse_month, time_to_hhmm
from .base import BaseService
from .calendar_service import player_label, rate_plan_label
from .pricing_service import quote
from .template_service import TemplateRegistry, TemplateService

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class _PlayerAccumulator:
    player_id: str
    name: str
    session_sum: Decimal = ZERO
    session_count: int = 0
    counts: Dict[Decimal, int] = field(default_factory=dict)
    flat_plans: Dict[str, Tuple[str, Decimal, int]] = field(default_factory=dict)
    lines: List[Tuple[TrainingSession, Decimal]] = field(default_factory=list)

    @property
    def flat_total(self) -> Decimal:
        return round2(sum((fee for _, fee, _ in self.flat_plans.values()), ZERO))

    @property
    def total(self) -> Decimal:
        return round2(self.session_sum + self.flat_total)


@dataclass
class _TrainerAccumulator:
    trainer_id: str
    name: str
    hourly_wage: Optional[Decimal]
    session_count: int = 0
    minutes: int = 0
    revenue: Decimal = ZERO


def breakdown_label(lines: List[BreakdownLine]) -> str:
    """``2 × 25,00 € + 1 × 12,50 €``; ``-`` when empty."""
    if not lines:
        return "-"
    return " + ".join(line.label for line in lines)


class BillingService(BaseService):
    """
    Service for monthly billing.

    Only completed sessions are billed. Amounts are rounded half-up to cents
    per session share before they are summed, so a player's total always
    equals the sum of the lines shown on their invoice.
    """

    def __init__(self, db: Session, template_service: Optional[TemplateService] = None):
        super().__init__(db)
        self.training_repository = RepositoryFactory.create_training_repository(db)
        self.player_repository = RepositoryFactory.create_player_repository(db)
        self.payment_repository = RepositoryFactory.create_payment_repository(db)
        self.template_service = template_service or TemplateService(db)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def _month_range(self, month: str) -> Tuple[date, date]:
        try:
            return parse_month(month)
        except ValueError as e:
            raise ValidationException(str(e), code="INVALID_MONTH", details={"month": month})

    def _completed_sessions(self, month: str) -> List[TrainingSession]:
        first, following = self._month_range(month)
        return self.training_repository.get_in_range(first, following, SessionStatus.COMPLETED)

    def _aggregate(
        self, sessions: List[TrainingSession]
    ) -> Tuple[Dict[str, _PlayerAccumulator], Dict[str, _TrainerAccumulator]]:
        players: Dict[str, _PlayerAccumulator] = {}
        trainers: Dict[str, _TrainerAccumulator] = {}

        for session in sessions:
            price = quote(session.rate_plan, session.start_time, session.end_time, len(session.players))
            share = round2(price.per_player)
            is_flat = session.rate_plan is not None and session.rate_plan.mode is BillingMode.MONTHLY_FLAT

            for player in session.players:
                entry = players.get(player.id)
                if entry is None:
                    entry = _PlayerAccumulator(player_id=player.id, name=player.name or UNKNOWN_PLAYER_NAME)
                    players[player.id] = entry
                entry.session_count += 1
                entry.lines.append((session, share))
                if is_flat:
                    plan = session.rate_plan
                    name, fee, count = entry.flat_plans.get(plan.id, (plan.name, round2(plan.monthly_fee), 0))
                    entry.flat_plans[plan.id] = (name, fee, count + 1)
                    continue
                entry.session_sum = round2(entry.session_sum + share)
                entry.counts[share] = entry.counts.get(share, 0) + 1

            trainer = session.effective_trainer
            trainer_id = session.effective_trainer_id
            trainer_entry = trainers.get(trainer_id)
            if trainer_entry is None:
                trainer_entry = _TrainerAccumulator(
                    trainer_id=trainer_id,
                    name=trainer.name if trainer is not None else "",
                    hourly_wage=to_decimal(trainer.hourly_wage) if trainer and trainer.hourly_wage is not None else None,
                )
                trainers[trainer_id] = trainer_entry
            trainer_entry.session_count += 1
            trainer_entry.minutes += price.duration_minutes
            trainer_entry.revenue = round2(trainer_entry.revenue + round2(price.total))

        return players, trainers

    @staticmethod
    def _breakdown(entry: _PlayerAccumulator) -> List[BreakdownLine]:
        lines = [
            BreakdownLine(
                amount=amount,
                count=count,
                subtotal=round2(amount * count),
                label=f"{count} × {format_euro(amount)}",
            )
            for amount, count in entry.counts.items()
        ]
        lines.sort(key=lambda line: line.amount, reverse=True)
        return lines

    @staticmethod
    def _payment_info(payment: Optional[MonthlyPayment]) -> Optional[PaymentInfo]:
        if payment is None:
            return None
        return PaymentInfo(
            method=PaymentMethod(payment.method),
            amount=round2(payment.amount),
            paid_at=payment.paid_at,
            note=payment.note,
        )

    def _player_row(self, entry: _PlayerAccumulator, payment: Optional[MonthlyPayment]) -> PlayerBillingRow:
        breakdown = self._breakdown(entry)
        return PlayerBillingRow(
            player_id=entry.player_id,
            player_name=entry.name,
            session_count=entry.session_count,
            total=entry.total,
            total_label=format_euro(entry.total),
            breakdown=breakdown,
            breakdown_label=breakdown_label(breakdown),
            flat_fees=[
                FlatFeeLine(rate_plan_id=plan_id, rate_plan_name=name, amount=fee, session_count=count)
                for plan_id, (name, fee, count) in sorted(entry.flat_plans.items(), key=lambda item: item[1][0])
            ],
            paid=payment is not None,
            payment=self._payment_info(payment),
        )

    @BaseService.measure_operation("monthly_summary")
    def monthly_summary(self, month: str) -> MonthlyBillingResponse:
        """
        Billing overview of one month (``YYYY-MM``).

        Player rows are sorted by total, highest first. ``open`` is the sum of
        the totals of players without a payment; the paid figures sum the
        recorded payment amounts.
        """
        sessions = self._completed_sessions(month)
        player_entries, trainer_entries = self._aggregate(sessions)
        payments = self.payment_repository.get_by_player_for_month(month)

        rows = [self._player_row(entry, payments.get(player_id)) for player_id, entry in player_entries.items()]
        rows.sort(key=lambda row: (-row.total, row.player_name.lower()))

        paid_cash = ZERO
        paid_non_cash = ZERO
        open_amount = ZERO
        for row in rows:
            if row.payment is None:
                open_amount += row.total
            elif PaymentMethod(row.payment.method).is_cash:
                paid_cash += row.payment.amount
            else:
                paid_non_cash += row.payment.amount

        trainers = [
            TrainerBillingRow(
                trainer_id=entry.trainer_id,
                trainer_name=entry.name,
                session_count=entry.session_count,
                minutes=entry.minutes,
                revenue=entry.revenue,
                hourly_wage=entry.hourly_wage,
                wage_payout=(
                    round2(entry.hourly_wage * Decimal(entry.minutes) / Decimal(60))
                    if entry.hourly_wage is not None
                    else None
                ),
            )
            for entry in sorted(trainer_entries.values(), key=lambda e: e.name.lower())
        ]

        session_lines = [
            BillingSessionLine(
                session_id=session.id,
                session_date=session.session_date,
                start=time_to_hhmm(session.start_time),
                end=time_to_hhmm(session.end_time),
                player_names=player_label(session),
                rate_plan_name=rate_plan_label(session),
                trainer_name=session.effective_trainer.name if session.effective_trainer else "",
                total=round2(quote(session.rate_plan, session.start_time, session.end_time, len(session.players)).total),
                note=session.note,
                series_id=session.series_id,
            )
            for session in sessions
        ]

        return MonthlyBillingResponse(
            month=month,
            players=rows,
            trainers=trainers,
            sessions=session_lines,
            totals=BillingTotals(
                revenue=round2(sum((row.total for row in rows), ZERO)),
                paid_cash=round2(paid_cash),
                paid_non_cash=round2(paid_non_cash),
                open=round2(open_amount),
                session_count=len(sessions),
            ),
        )

    def player_total(self, month: str, player_id: str) -> Decimal:
        player_entries, _ = self._aggregate(self._completed_sessions(month))
        entry = player_entries.get(player_id)
        return entry.total if entry else ZERO

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def _require_player(self, player_id: str):
        player = self.player_repository.get_by_id(player_id)
        if not player:
            raise NotFoundException("Player not found", code="PLAYER_NOT_FOUND", details={"player_id": player_id})
        return player

    def _status(self, month: str, player_id: str, payment: Optional[MonthlyPayment]) -> PaymentStatusResponse:
        return PaymentStatusResponse(
            month=month,
            player_id=player_id,
            paid=payment is not None,
            payment=self._payment_info(payment),
        )

    @BaseService.measure_operation("mark_paid")
    def mark_paid(
        self,
        month: str,
        player_id: str,
        method: PaymentMethod = PaymentMethod.CASH,
        amount: Optional[Decimal] = None,
        note: Optional[str] = None,
    ) -> PaymentStatusResponse:
        """
        Record the player's payment for the month, replacing an earlier record.

        The amount defaults to the player's monthly total.
        """
        self._month_range(month)
        self._require_player(player_id)
        paid_amount = round2(amount) if amount is not None else self.player_total(month, player_id)

        self.log_operation("mark_paid", month=month, player_id=player_id, method=method.value)
        with self.transaction():
            payment = self.payment_repository.get_for_player_month(player_id, month)
            if payment is None:
                payment = self.payment_repository.create(
                    player_id=player_id,
                    billing_month=month,
                    amount=paid_amount,
                    method=method.value,
                    note=note,
                    paid_at=utc_now(),
                )
            else:
                payment.amount = paid_amount
                payment.method = method.value
                payment.note = note
                payment.paid_at = utc_now()
                self.db.flush()

        prometheus_metrics.inc_payment_recorded(method.value)
        return self._status(month, player_id, payment)

    @BaseService.measure_operation("mark_open")
    def mark_open(self, month: str, player_id: str) -> PaymentStatusResponse:
        """Remove the player's payment record for the month."""
        self._month_range(month)
        self._require_player(player_id)
        payment = self.payment_repository.get_for_player_month(player_id, month)
        if payment is not None:
            self.log_operation("mark_open", month=month, player_id=player_id)
            with self.transaction():
                self.db.delete(payment)
                self.db.flush()
        return self._status(month, player_id, None)

    @BaseService.measure_operation("toggle_paid")
    def toggle_paid(self, month: str, player_id: str) -> PaymentStatusResponse:
        """Paid becomes open; open becomes paid in cash."""
        self._month_range(month)
        if self.payment_repository.get_for_player_month(player_id, month) is not None:
            return self.mark_open(month, player_id)
        return self.mark_paid(month, player_id, PaymentMethod.CASH)

    def get_payment_status(self, month: str, player_id: str) -> PaymentStatusResponse:
        self._month_range(month)
        self._require_player(player_id)
        return self._status(month, player_id, self.payment_repository.get_for_player_month(player_id, month))

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    @staticmethod
    def invoice_number(month: str, player_id: str) -> str:
        return f"RE-{month.replace('-', '')}-{player_id[:8]}"

    @BaseService.measure_operation("invoice_html")
    def invoice_html(self, month: str, player_id: str) -> str:
        """
        Render the HTML invoice of a player for a month.

        Raises:
            NotFoundException: unknown player or nothing billed that month
        """
        player = self._require_player(player_id)
        player_entries, _ = self._aggregate(self._completed_sessions(month))
        entry = player_entries.get(player_id)
        if entry is None:
            raise NotFoundException(
                "No completed sessions for this player in the month",
                code="NOTHING_TO_INVOICE",
                details={"player_id": player_id, "month": month},
            )

        payment = self.payment_repository.get_for_player_month(player_id, month)
        breakdown = self._breakdown(entry)
        first, _ = self._month_range(month)
        issue_date = get_school_today()
        context = {
            "invoice_number": self.invoice_number(month, player_id),
            "month": month,
            "month_label": first.strftime("%m/%Y"),
            "issue_date": issue_date,
            "due_date": issue_date + timedelta(days=settings.invoice_payment_days),
            "player": player,
            "billing_address_lines": (player.billing_address or "").splitlines(),
            "lines": [
                {
                    "date": session.session_date,
                    "start": session.start_time,
                    "end": session.end_time,
                    "rate_plan": rate_plan_label(session),
                    "is_flat": session.rate_plan is not None and session.rate_plan.mode is BillingMode.MONTHLY_FLAT,
                    "amount": share,
                }
                for session, share in entry.lines
            ],
            "breakdown": breakdown,
            "breakdown_label": breakdown_label(breakdown),
            "flat_fees": [
                {"name": name, "amount": fee, "session_count": count}
                for name, fee, count in sorted(entry.flat_plans.values())
            ],
            "total": entry.total,
            "paid": payment is not None,
            "payment": self._payment_info(payment),
        }
        self.log_operation("invoice_html", month=month, player_id=player_id)
        return self.template_service.render_template(TemplateRegistry.INVOICE, context=context)
