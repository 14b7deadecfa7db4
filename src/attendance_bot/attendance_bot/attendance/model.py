from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import LateAction


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one class on one calendar date.

    `present_count` is tracked separately from `present_names`; a submission
    may declare a count without naming every attendee.
    """

    class_name: str
    work_date: date
    total_count: int
    present_count: int
    present_names: tuple[str, ...] = ()
    updated_at: Optional[datetime] = None

    @property
    def absent_count(self) -> int:
        return max(0, self.total_count - self.present_count)


@dataclass(frozen=True)
class Submission:
    """A parsed `<class> <total>/<present> [names]` message."""

    class_name: str
    total_count: int
    present_count: int
    student_names: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LateUpdateEvent:
    """A parsed `<class> <name> keldi|ketdi` message. Never persisted."""

    class_name: str
    student_name: str
    action: LateAction
