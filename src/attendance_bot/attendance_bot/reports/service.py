"""Daily/weekly/monthly attendance reports.

Every `render_*` function is a pure function of the records it is given;
ReportService only fetches records and delegates to them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence

from ..attendance.classes import ClassCatalog
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.service import DayTotals, totals_of
from ..common.datetime_utils import month_bounds, today_local, week_ending
from ..core.constants import (
    ABSENT_LABEL,
    AVERAGE_LABEL,
    DAILY_REPORT_TITLE,
    DEFAULT_REPORT_DAYS,
    DEFAULT_TIMEZONE,
    MONTHLY_REPORT_TITLE,
    NO_DATA,
    NOT_SUBMITTED,
    TOTAL_LABEL,
    WEEKLY_REPORT_TITLE,
)
from ..core.exceptions import StoreError
from ..roster.repository import RosterRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RangeSummary:
    days: list[tuple[date, DayTotals]]
    total: DayTotals
    mean: Optional[DayTotals]


def rounded_mean(amount: int, count: int) -> int:
    """Round-half-up integer mean of non-negative values, without floats."""
    if count <= 0:
        return 0
    return (2 * amount + count) // (2 * count)


def _totals_lines(totals: DayTotals) -> list[str]:
    lines = [f"{TOTAL_LABEL}: {totals.total}/{totals.present}"]
    if totals.total > totals.present:
        lines.append(f"{ABSENT_LABEL}: {totals.absent}")
    return lines


def render_daily_report(
    work_date: date,
    records: Sequence[AttendanceRecord],
    catalog: ClassCatalog,
    *,
    title: str = DAILY_REPORT_TITLE,
) -> str:
    by_class = {r.class_name: r for r in records}
    lines = [f"{title} ({work_date.isoformat()})", ""]

    for class_name in catalog.names:
        record = by_class.get(class_name)
        if record is None:
            lines.append(f"{class_name}: {NOT_SUBMITTED}")
        else:
            lines.append(f"{class_name}: {record.total_count}/{record.present_count}")

    extras = catalog.ordered(name for name in by_class if name not in catalog)
    for class_name in extras:
        record = by_class[class_name]
        lines.append(f"{class_name}: {record.total_count}/{record.present_count}")

    lines.append("")
    lines.extend(_totals_lines(totals_of(records)))
    return "\n".join(lines)


def summarize_range(records: Sequence[AttendanceRecord], *, start: date, end: date) -> RangeSummary:
    per_day: dict[date, list[AttendanceRecord]] = {}
    for r in records:
        if start <= r.work_date <= end:
            per_day.setdefault(r.work_date, []).append(r)

    days = [(d, totals_of(per_day[d])) for d in sorted(per_day)]
    total = DayTotals(
        total=sum(t.total for _, t in days),
        present=sum(t.present for _, t in days),
    )

    mean = None
    if end > start and days:
        mean = DayTotals(
            total=rounded_mean(total.total, len(days)),
            present=rounded_mean(total.present, len(days)),
        )
    return RangeSummary(days=days, total=total, mean=mean)


def render_range_report(
    start: date,
    end: date,
    records: Sequence[AttendanceRecord],
    *,
    title: str = WEEKLY_REPORT_TITLE,
) -> str:
    summary = summarize_range(records, start=start, end=end)
    lines = [f"{title} ({start.isoformat()} - {end.isoformat()})", ""]

    if not summary.days:
        lines.append(NO_DATA)
    for day, totals in summary.days:
        line = f"{day.isoformat()}: {totals.total}/{totals.present}"
        if totals.total > totals.present:
            line += f" ({ABSENT_LABEL}: {totals.absent})"
        lines.append(line)

    lines.append("")
    if summary.mean is not None:
        lines.append(f"{AVERAGE_LABEL}: {summary.mean.total}/{summary.mean.present}")
    lines.extend(_totals_lines(summary.total))
    return "\n".join(lines)


def absentee_names(record: AttendanceRecord, known_students: Sequence[str]) -> list[str]:
    """Best-effort reconstruction from the longitudinal student store.

    Only meaningful once the class has named its attendees; the result is
    never trusted beyond the declared absent count.
    """

    if not record.present_names or not known_students:
        return []
    present = set(record.present_names)
    names = [n for n in known_students if n not in present]
    if len(names) > record.absent_count:
        return []
    return names


def render_group_summary(
    records: Sequence[AttendanceRecord],
    catalog: ClassCatalog,
    *,
    known_students: Mapping[str, Sequence[str]] | None = None,
) -> str:
    known_students = known_students or {}
    totals = totals_of(records)

    lines = [
        "📊 Bugungi davomad natijalari",
        "",
        f"Jami: {totals.total} ta o'quvchidan {totals.present} tasi keldi",
        f"Qolgan: {max(0, totals.absent)} ta o'quvchi",
    ]

    absent_lines = []
    for record in sorted(records, key=lambda r: catalog.sort_key(r.class_name)):
        if record.absent_count <= 0:
            continue
        line = f"{record.class_name}: {record.absent_count} ta o'quvchi kelmadi"
        names = absentee_names(record, known_students.get(record.class_name, ()))
        if names:
            line += f" ({', '.join(names)})"
        absent_lines.append(line)

    if absent_lines:
        lines.append("")
        lines.append("❌ Kelmaganlar ro'yxati:")
        lines.extend(absent_lines)
    return "\n".join(lines)


def render_recipient_summary(records: Sequence[AttendanceRecord], catalog: ClassCatalog) -> str:
    ordered = sorted(records, key=lambda r: catalog.sort_key(r.class_name))
    lines = [f"{r.class_name} {r.total_count}/{r.present_count}" for r in ordered]
    lines.extend(f"{name} {NOT_SUBMITTED}" for name in catalog.missing([r.class_name for r in records]))

    totals = totals_of(records)
    lines.append("")
    lines.append(f"Topshirilgan ma'lumotlarga ko'ra {TOTAL_LABEL} {totals.total}/{totals.present}")
    return "\n".join(lines)


def render_reminder(missing: Sequence[str]) -> Optional[str]:
    if not missing:
        return None
    return "⏰ Eslatma: Quyidagi sinflar hali davomat yubormadi:\n" + ", ".join(missing)


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        rosters: RosterRepository,
        *,
        catalog: ClassCatalog | None = None,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._rosters = rosters
        self._catalog = catalog or ClassCatalog()
        self._tz_name = tz_name

    def daily_report(self, work_date: date | None = None) -> str:
        work_date = work_date or today_local(self._tz_name)
        return render_daily_report(work_date, self._attendance.list_for_date(work_date), self._catalog)

    def live_summary(self, work_date: date | None = None) -> str:
        work_date = work_date or today_local(self._tz_name)
        return render_daily_report(
            work_date,
            self._attendance.list_for_date(work_date),
            self._catalog,
            title=f"{DAILY_REPORT_TITLE} yangilandi",
        )

    def range_report(self, start: date, end: date, *, title: str = WEEKLY_REPORT_TITLE) -> str:
        if end < start:
            start, end = end, start
        records = self._attendance.list_for_range(start_date=start, end_date=end)
        return render_range_report(start, end, records, title=title)

    def weekly_report(self, end: date | None = None, *, days: int = DEFAULT_REPORT_DAYS) -> str:
        start, end = week_ending(end or today_local(self._tz_name), days=days)
        return self.range_report(start, end)

    def monthly_report(self, month: int, year: int) -> str:
        start, end = month_bounds(year, month)
        return self.range_report(start, end, title=MONTHLY_REPORT_TITLE)

    def group_summary(self, work_date: date | None = None) -> str:
        work_date = work_date or today_local(self._tz_name)
        records = self._attendance.list_for_date(work_date)
        try:
            known_students = self._rosters.list_known_students()
        except StoreError:
            logger.exception("Student store unavailable, summary without absentee names")
            known_students = {}
        return render_group_summary(records, self._catalog, known_students=known_students)

    def recipient_summary(self, work_date: date | None = None) -> str:
        work_date = work_date or today_local(self._tz_name)
        return render_recipient_summary(self._attendance.list_for_date(work_date), self._catalog)

    def reminder(self, work_date: date | None = None) -> Optional[str]:
        work_date = work_date or today_local(self._tz_name)
        records = self._attendance.list_for_date(work_date)
        return render_reminder(self._catalog.missing([r.class_name for r in records]))
