from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_names, fetchall, fetchone, load_names
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "class_name, log_date, total_students, present_count, student_names, updated_at"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        class_name=r["class_name"],
        work_date=r["log_date"],
        total_count=int(r.get("total_students") or 0),
        present_count=int(r.get("present_count") or 0),
        present_names=load_names(r.get("student_names")),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        stamp = updated_at or datetime.now()
        if stamp.tzinfo is not None:
            # DATETIME column holds school-local wall-clock time
            stamp = stamp.replace(tzinfo=None)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(class_name, log_date, total_students, present_count, student_names, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    total_students=VALUES(total_students),
                    present_count=VALUES(present_count),
                    student_names=VALUES(student_names),
                    updated_at=VALUES(updated_at)
                """,
                (
                    class_name,
                    work_date,
                    int(total_count),
                    int(present_count),
                    dump_names(present_names),
                    stamp,
                ),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs WHERE class_name=%s AND log_date=%s",
                (class_name, work_date),
            )
            r = fetchone(cur)
            if not r:
                raise StoreError(f"Upsert of {class_name} {work_date} returned no row")
            return _to_record(r)

    def get(self, class_name: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs WHERE class_name=%s AND log_date=%s",
                (class_name, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs WHERE log_date=%s ORDER BY class_name",
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_range(self, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE log_date BETWEEN %s AND %s
                ORDER BY log_date ASC, class_name ASC
                """,
                (start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete_for_date(self, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_logs WHERE log_date=%s", (work_date,))
            return int(cur.rowcount or 0)
