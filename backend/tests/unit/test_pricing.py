"""Unit tests for session pricing and money helpers."""

from datetime import time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from tennisplan.services.pricing_service import format_euro, player_share, quote, round2, session_total


def _plan(mode: str, price: str = "40.00", fee=None):
    return SimpleNamespace(billing_mode=mode, price_per_hour=Decimal(price), monthly_fee=fee)


def _session(plan, players: int, start=time(17, 0), end=time(18, 30)):
    return SimpleNamespace(rate_plan=plan, start_time=start, end_time=end, players=[object()] * players)


class TestQuote:
    def test_per_training_splits_price(self):
        price = quote(_plan("per_training"), time(17, 0), time(18, 30), 3)

        assert price.duration_minutes == 90
        assert price.total == Decimal("60")
        assert round2(price.per_player) == Decimal("20.00")

    def test_per_player_charges_everyone(self):
        price = quote(_plan("per_player", "30.00"), time(10, 0), time(11, 0), 2)

        assert price.total == Decimal("60")
        assert price.per_player == Decimal("30")

    def test_monthly_flat_costs_nothing_per_session(self):
        price = quote(_plan("monthly_flat", "0", fee=Decimal("60")), time(10, 0), time(11, 0), 4)

        assert price.total == 0
        assert price.per_player == 0
        assert price.duration_minutes == 60

    def test_missing_plan_is_free(self):
        price = quote(None, time(10, 0), time(11, 0), 2)

        assert price.total == 0
        assert price.per_player == 0

    def test_no_players_does_not_divide_by_zero(self):
        price = quote(_plan("per_training"), time(10, 0), time(11, 0), 0)

        assert price.per_player == Decimal("40")

    def test_reversed_times_have_zero_duration(self):
        price = quote(_plan("per_training"), time(11, 0), time(10, 0), 1)

        assert price.duration_minutes == 0
        assert price.total == 0


def test_session_helpers_use_player_count():
    session = _session(_plan("per_training", "25.00"), players=3, start=time(9, 0), end=time(10, 0))

    assert session_total(session) == Decimal("25")
    assert round2(player_share(session)) == Decimal("8.33")


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("2.345"), Decimal("2.35")),
        (Decimal("2.344"), Decimal("2.34")),
        (Decimal("0.005"), Decimal("0.01")),
        (None, Decimal("0.00")),
        ("abc", Decimal("0.00")),
        (float("nan"), Decimal("0.00")),
    ],
)
def test_round2_is_half_up(value, expected):
    assert round2(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("12.5"), "12,50 €"),
        (0, "0,00 €"),
        (float("inf"), "0,00 €"),
        (Decimal("1234.567"), "1234,57 €"),
    ],
)
def test_format_euro(value, expected):
    assert format_euro(value) == expected
