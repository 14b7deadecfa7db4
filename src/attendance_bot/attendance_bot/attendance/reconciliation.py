"""Pure state transitions over an AttendanceRecord.

Nothing here talks to the store: callers read the existing record, apply a
transition and write the result back as a full upsert.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from .factory import LateUpdateStrategyFactory
from .model import AttendanceRecord, LateUpdateEvent, Submission

_factory = LateUpdateStrategyFactory()


def unique_names(names: Iterable[str]) -> tuple[str, ...]:
    """Keep the first occurrence of every name, in order."""
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return tuple(out)


def resolve_total(submission: Submission, roster_total: Optional[int] = None) -> int:
    if roster_total is not None and int(roster_total) > 0:
        return int(roster_total)
    return submission.total_count


def apply_submission(
    existing: Optional[AttendanceRecord],
    submission: Submission,
    *,
    work_date: date,
    roster_total: Optional[int] = None,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    """A resubmission is authoritative: the prior record is replaced, not merged."""

    if existing is not None:
        work_date = existing.work_date

    return AttendanceRecord(
        class_name=submission.class_name,
        work_date=work_date,
        total_count=resolve_total(submission, roster_total),
        present_count=max(0, submission.present_count),
        present_names=unique_names(submission.student_names),
        updated_at=now,
    )


def apply_late_update(
    existing: Optional[AttendanceRecord],
    event: LateUpdateEvent,
    *,
    now: Optional[datetime] = None,
) -> Optional[AttendanceRecord]:
    """Return the patched record, or None when there is no base submission."""

    if existing is None:
        return None

    strategy = _factory.for_action(event.action)
    decision = strategy.apply(
        present_names=tuple(existing.present_names),
        present_count=existing.present_count,
        student_name=event.student_name,
    )
    return AttendanceRecord(
        class_name=existing.class_name,
        work_date=existing.work_date,
        total_count=existing.total_count,
        present_count=decision.present_count,
        present_names=decision.present_names,
        updated_at=now if decision.changed else existing.updated_at,
    )
