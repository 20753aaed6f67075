"""Centralized pricing calculations for training sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.enums import BillingMode
from ..models.rate_plan import RatePlan
from ..models.training import TrainingSession
from ..repositories.factory import RepositoryFactory
from ..utils.money import format_euro, round2, to_decimal
from ..utils.time_utils import duration_minutes
from .base import BaseService

__all__ = [
    "PriceQuote",
    "PricingService",
    "format_euro",
    "player_share",
    "quote",
    "round2",
    "session_total",
]

ZERO = Decimal("0.00")
MINUTES_PER_HOUR = Decimal(60)


@dataclass(frozen=True)
class PriceQuote:
    """Prices of one session."""

    duration_minutes: int
    base: Decimal
    total: Decimal
    per_player: Decimal


def quote(
    rate_plan: Optional[RatePlan],
    start_time: time,
    end_time: time,
    player_count: int,
) -> PriceQuote:
    """
    Price a session.

    base = hourly price x minutes / 60. ``per_player`` plans charge the base to
    every player; ``per_training`` plans split it across the players.
    ``monthly_flat`` plans (and sessions without a plan) cost nothing per session.
    Amounts are unrounded; callers round where the figure is shown or summed.
    """
    minutes = duration_minutes(start_time, end_time)
    if rate_plan is None:
        return PriceQuote(minutes, ZERO, ZERO, ZERO)

    mode = BillingMode(rate_plan.billing_mode)
    if mode is BillingMode.MONTHLY_FLAT:
        return PriceQuote(minutes, ZERO, ZERO, ZERO)

    base = to_decimal(rate_plan.price_per_hour) * Decimal(minutes) / MINUTES_PER_HOUR
    if mode is BillingMode.PER_PLAYER:
        return PriceQuote(minutes, base, base * player_count, base)
    return PriceQuote(minutes, base, base, base / max(1, player_count))


def session_total(session: TrainingSession) -> Decimal:
    return quote(session.rate_plan, session.start_time, session.end_time, len(session.players)).total


def player_share(session: TrainingSession) -> Decimal:
    return quote(session.rate_plan, session.start_time, session.end_time, len(session.players)).per_player


class PricingService(BaseService):
    """Price previews for sessions that are not saved yet."""

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.rate_plan_repository = RepositoryFactory.create_rate_plan_repository(db)

    @BaseService.measure_operation("pricing.preview")
    def preview(
        self,
        rate_plan_id: Optional[str],
        start_time: time,
        end_time: time,
        player_count: int,
    ) -> PriceQuote:
        """
        Price shown while a session is being edited.

        Zero when no plan is chosen or no player is selected yet.
        """
        if not rate_plan_id or player_count <= 0:
            return PriceQuote(duration_minutes(start_time, end_time), ZERO, ZERO, ZERO)

        rate_plan = self.rate_plan_repository.get_by_id(rate_plan_id)
        if rate_plan is None:
            raise NotFoundException(
                "Rate plan not found",
                code="RATE_PLAN_NOT_FOUND",
                details={"rate_plan_id": rate_plan_id},
            )
        return quote(rate_plan, start_time, end_time, player_count)
