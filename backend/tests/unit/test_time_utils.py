from datetime import date, time

import pytest

from tennisplan.utils.time_utils import (
    duration_minutes,
    format_short,
    parse_month,
    start_of_week,
    weekly_dates,
)


def test_duration_minutes_never_negative():
    assert duration_minutes(time(17, 0), time(18, 15)) == 75
    assert duration_minutes(time(18, 0), time(17, 0)) == 0


def test_start_of_week_is_monday():
    # 2024-06-06 is a Thursday
    assert start_of_week(date(2024, 6, 6)) == date(2024, 6, 3)
    assert start_of_week(date(2024, 6, 3)) == date(2024, 6, 3)
    assert start_of_week(date(2024, 6, 9)) == date(2024, 6, 3)


def test_format_short():
    assert format_short(date(2024, 6, 3)) == "Mo 03.06."


def test_weekly_dates_include_end_date():
    dates = weekly_dates(date(2024, 6, 3), date(2024, 6, 24))

    assert dates == [date(2024, 6, 3), date(2024, 6, 10), date(2024, 6, 17), date(2024, 6, 24)]


def test_weekly_dates_single_day():
    assert weekly_dates(date(2024, 6, 3), date(2024, 6, 9)) == [date(2024, 6, 3)]


def test_parse_month_range():
    assert parse_month("2024-12") == (date(2024, 12, 1), date(2025, 1, 1))
    assert parse_month("2024-02") == (date(2024, 2, 1), date(2024, 3, 1))


@pytest.mark.parametrize("value", ["2024-13", "24-01", "2024/01", "", None])
def test_parse_month_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_month(value)
