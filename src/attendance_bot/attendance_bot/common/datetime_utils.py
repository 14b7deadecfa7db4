from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local(tz_name: str) -> datetime:
    """Current wall-clock time in the given timezone.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(ZoneInfo(tz_name))


def today_local(tz_name: str, *, now: Optional[datetime] = None) -> date:
    """Calendar date in the given timezone (not the UTC date)."""
    now = now or now_local(tz_name)
    if now.tzinfo is not None:
        now = now.astimezone(ZoneInfo(tz_name))
    return now.date()


def is_within(moment: time, start: time, end: time) -> bool:
    """Inclusive on both ends, minute precision."""
    current = moment.hour * 60 + moment.minute
    return start.hour * 60 + start.minute <= current <= end.hour * 60 + end.minute


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def week_ending(day: date, *, days: int = 7) -> tuple[date, date]:
    return day - timedelta(days=days - 1), day
