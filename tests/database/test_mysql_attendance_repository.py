from datetime import date, datetime
from zoneinfo import ZoneInfo

import mysql.connector
import pytest

from src.attendance_bot.attendance_bot.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.attendance_bot.attendance_bot.core.exceptions import StoreError
from src.attendance_bot.attendance_bot.database.bootstrap import _iter_sql_statements
from src.attendance_bot.attendance_bot.database.mysql_base import dump_names, load_names

DAY = date(2026, 3, 2)


class FakeCursor:
    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.executed = []
        self.rowcount = len(self.rows)

    def execute(self, sql, params=None):
        if self.error:
            raise self.error
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, cursor):
        self.conn = FakeConnection(cursor)

    def connect(self):
        return self.conn


def test_get_decodes_json_names():
    row = {
        "class_name": "9A",
        "log_date": DAY,
        "total_students": 30,
        "present_count": 27,
        "student_names": '["Ali", "Bobur"]',
        "updated_at": None,
    }
    factory = FakeConnectionFactory(FakeCursor([row]))

    rec = MySQLAttendanceRepository(factory).get("9A", DAY)

    assert rec.present_names == ("Ali", "Bobur")
    assert (rec.total_count, rec.present_count) == (30, 27)
    assert factory.conn.committed


def test_delete_reports_rowcount():
    cursor = FakeCursor([{}, {}])
    repo = MySQLAttendanceRepository(FakeConnectionFactory(cursor))

    assert repo.delete_for_date(DAY) == 2
    assert cursor.executed[0] == ("DELETE FROM attendance_logs WHERE log_date=%s", (DAY,))


def test_driver_errors_become_store_errors():
    factory = FakeConnectionFactory(FakeCursor(error=mysql.connector.Error("gone away")))

    with pytest.raises(StoreError):
        MySQLAttendanceRepository(factory).list_for_date(DAY)
    assert factory.conn.rolled_back


def test_names_json_round_trip_keeps_unicode():
    assert dump_names(["O'g'iloy", "Зарина"]) == '["O\'g\'iloy", "Зарина"]'
    assert load_names(b'["Ali"]') == ("Ali",)
    assert load_names("") == ()
    assert load_names(None) == ()


def test_schema_splitter_ignores_semicolons_in_strings():
    sql = "CREATE TABLE a (x VARCHAR(5) DEFAULT ';');\nINSERT INTO a VALUES ('b');"

    assert list(_iter_sql_statements(sql)) == [
        "CREATE TABLE a (x VARCHAR(5) DEFAULT ';')",
        "INSERT INTO a VALUES ('b')",
    ]


def test_upsert_stores_school_local_time():
    row = {
        "class_name": "9A",
        "log_date": DAY,
        "total_students": 30,
        "present_count": 27,
        "student_names": "[]",
        "updated_at": None,
    }
    cursor = FakeCursor([row])
    stamp = datetime(2026, 3, 2, 9, 5, tzinfo=ZoneInfo("Asia/Tashkent"))

    MySQLAttendanceRepository(FakeConnectionFactory(cursor)).upsert(
        class_name="9A",
        work_date=DAY,
        total_count=30,
        present_count=27,
        present_names=(),
        updated_at=stamp,
    )

    _, params = cursor.executed[0]
    assert params[-1] == datetime(2026, 3, 2, 9, 5)
