from datetime import date, datetime, time, timezone

from src.attendance_bot.attendance_bot.common.datetime_utils import (
    is_within,
    month_bounds,
    parse_hhmm,
    today_local,
    week_ending,
)


def test_today_uses_school_timezone():
    late_utc = datetime(2026, 3, 1, 19, 30, tzinfo=timezone.utc)

    assert today_local("Asia/Tashkent", now=late_utc) == date(2026, 3, 2)
    assert today_local("UTC", now=late_utc) == date(2026, 3, 1)


def test_is_within_is_inclusive():
    start, end = time(8, 15), time(13, 0)

    assert is_within(time(8, 15), start, end)
    assert is_within(time(13, 0, 59), start, end)
    assert not is_within(time(8, 14, 59), start, end)
    assert not is_within(time(13, 1), start, end)


def test_month_bounds_handle_leap_years():
    assert month_bounds(2026, 2) == (date(2026, 2, 1), date(2026, 2, 28))
    assert month_bounds(2028, 2)[1] == date(2028, 2, 29)
    assert month_bounds(2026, 12)[1] == date(2026, 12, 31)


def test_week_ending_is_seven_days_inclusive():
    assert week_ending(date(2026, 3, 8)) == (date(2026, 3, 2), date(2026, 3, 8))


def test_parse_hhmm():
    assert parse_hhmm(" 09:15 ") == time(9, 15)
