from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        class_name: str,
        work_date: date,
        total_count: int,
        present_count: int,
        present_names: Sequence[str],
        updated_at: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Insert or fully overwrite the record keyed by (class_name, work_date)."""

        raise NotImplementedError

    def get(self, class_name: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_range(self, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Records with start_date <= work_date <= end_date."""

        raise NotImplementedError

    def delete_for_date(self, work_date: date) -> int:
        """Administrative purge. Returns number of deleted records."""

        raise NotImplementedError
