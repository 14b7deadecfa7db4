from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassRoster
from .repository import RosterRepository


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_roster_total(self, class_name: str) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT total_students FROM class_rosters WHERE class_name=%s", (class_name,))
            r = fetchone(cur)
            if not r or r.get("total_students") is None:
                return None
            return int(r["total_students"])

    def set_roster_total(self, class_name: str, total_students: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_rosters(class_name, total_students)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE total_students=VALUES(total_students)
                """,
                (class_name, int(total_students)),
            )

    def get_roster(self, class_name: str) -> ClassRoster:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT total_students FROM class_rosters WHERE class_name=%s", (class_name,))
            r = fetchone(cur)
            cur.execute(
                "SELECT student_name FROM students WHERE class_name=%s ORDER BY student_name ASC",
                (class_name,),
            )
            names = tuple(row["student_name"] for row in fetchall(cur))
            total = int(r["total_students"]) if r and r.get("total_students") is not None else None
            return ClassRoster(class_name=class_name, total_students=total, student_names=names)

    def add_students(self, class_name: str, student_names: Sequence[str], *, source: str) -> int:
        names = [n.strip() for n in student_names if n and n.strip()]
        if not names:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT IGNORE INTO students(class_name, student_name, source)
                VALUES(%s,%s,%s)
                """,
                [(class_name, name, source) for name in names],
            )
            return int(cur.rowcount or 0)

    def list_known_students(self) -> Mapping[str, Sequence[str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_name, student_name FROM students ORDER BY class_name, student_name")
            out: dict[str, list[str]] = {}
            for r in fetchall(cur):
                out.setdefault(r["class_name"], []).append(r["student_name"])
            return out
