from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Sequence

from ..common.datetime_utils import now_local, today_local
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import LateAction
from ..core.exceptions import StoreError
from ..roster.repository import RosterRepository
from .classes import ClassCatalog
from .model import AttendanceRecord, LateUpdateEvent, Submission
from .parser import parse_message
from .reconciliation import apply_late_update, apply_submission
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    LATE_UPDATE = "late_update"


@dataclass(frozen=True)
class DayTotals:
    total: int
    present: int

    @property
    def absent(self) -> int:
        return self.total - self.present


@dataclass(frozen=True)
class AttendanceOutcome:
    kind: OutcomeKind
    record: AttendanceRecord
    event: Optional[LateUpdateEvent] = None
    totals: Optional[DayTotals] = None

    def confirmation(self) -> str:
        r = self.record
        if self.kind == OutcomeKind.CREATED:
            return f"✅ {r.class_name} davomad qabul qilindi: {r.total_count}/{r.present_count}"
        if self.kind == OutcomeKind.UPDATED:
            return f"✅ {r.class_name} yangilandi: {r.total_count}/{r.present_count}"

        verb = "keldi" if self.event and self.event.action == LateAction.ARRIVED else "ketdi"
        name = self.event.student_name if self.event else ""
        text = f"{r.class_name} yangilandi: {name} {verb}"
        if self.totals is not None:
            text += f"\nBugun jami {self.totals.total} dan {self.totals.present} kishi keldi"
        return text

    def recipient_notice(self) -> str:
        r = self.record
        if self.kind == OutcomeKind.CREATED:
            return f"✅ {r.class_name} davomad qabul qilindi: {r.total_count}/{r.present_count}"
        return f"✅ {r.class_name} yangilandi: {r.total_count}/{r.present_count}"


def totals_of(records: Sequence[AttendanceRecord]) -> DayTotals:
    return DayTotals(
        total=sum(r.total_count for r in records),
        present=sum(r.present_count for r in records),
    )


class AttendanceService:
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

    @property
    def catalog(self) -> ClassCatalog:
        return self._catalog

    def today(self, *, now: datetime | None = None) -> date:
        return today_local(self._tz_name, now=now)

    def process_text(
        self,
        text: str,
        *,
        now: datetime | None = None,
        allow_late_updates: bool = True,
    ) -> Optional[AttendanceOutcome]:
        """Parse and apply one chat message. None means "not applied"."""

        now = now or now_local(self._tz_name)
        parsed = parse_message(text, catalog=self._catalog)
        if parsed is None:
            return None

        if isinstance(parsed, Submission):
            return self.submit(parsed, now=now)

        if not allow_late_updates:
            logger.debug("Late update for %s outside its window, ignored", parsed.class_name)
            return None
        return self.apply_late_update(parsed, now=now)

    def submit(self, submission: Submission, *, now: datetime | None = None) -> AttendanceOutcome:
        now = now or now_local(self._tz_name)
        work_date = self.today(now=now)

        existing = self._attendance.get(submission.class_name, work_date)
        roster_total = self._rosters.get_roster_total(submission.class_name)
        record = apply_submission(
            existing,
            submission,
            work_date=work_date,
            roster_total=roster_total,
            now=now,
        )
        saved = self._save(record)
        self._remember_students(saved.class_name, saved.present_names, source="attendance_message")

        logger.info(
            "Attendance %s %s stored: %s/%s",
            saved.class_name,
            work_date.isoformat(),
            saved.total_count,
            saved.present_count,
        )
        kind = OutcomeKind.UPDATED if existing is not None else OutcomeKind.CREATED
        return AttendanceOutcome(kind=kind, record=saved)

    def apply_late_update(self, event: LateUpdateEvent, *, now: datetime | None = None) -> Optional[AttendanceOutcome]:
        now = now or now_local(self._tz_name)
        work_date = self.today(now=now)

        existing = self._attendance.get(event.class_name, work_date)
        record = apply_late_update(existing, event, now=now)
        if record is None:
            logger.debug("No submission for %s on %s, late update dropped", event.class_name, work_date)
            return None

        saved = self._save(record)
        if event.action == LateAction.ARRIVED:
            self._remember_students(saved.class_name, [event.student_name], source="late_update")

        logger.info("Late update %s: %s %s", saved.class_name, event.student_name, event.action.value)
        return AttendanceOutcome(
            kind=OutcomeKind.LATE_UPDATE,
            record=saved,
            event=event,
            totals=self.totals(work_date),
        )

    def totals(self, work_date: date) -> DayTotals:
        return totals_of(self._attendance.list_for_date(work_date))

    def purge(self, work_date: date) -> int:
        deleted = self._attendance.delete_for_date(work_date)
        logger.warning("Purged %s attendance records for %s", deleted, work_date.isoformat())
        return deleted

    def _save(self, record: AttendanceRecord) -> AttendanceRecord:
        return self._attendance.upsert(
            class_name=record.class_name,
            work_date=record.work_date,
            total_count=record.total_count,
            present_count=record.present_count,
            present_names=record.present_names,
            updated_at=record.updated_at,
        )

    def _remember_students(self, class_name: str, names: Sequence[str], *, source: str) -> None:
        if not names:
            return
        try:
            self._rosters.add_students(class_name, names, source=source)
        except StoreError:
            logger.exception("Could not store student names for %s", class_name)
