from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

import pytest

from src.attendance_bot.attendance_bot.access.model import AccessRequest, AuthorizedUser
from src.attendance_bot.attendance_bot.attendance.model import AttendanceRecord
from src.attendance_bot.attendance_bot.core.enums import AccessStatus, RequestStatus
from src.attendance_bot.attendance_bot.core.exceptions import StoreError, TransportError
from src.attendance_bot.attendance_bot.roster.model import ClassRoster


class InMemoryAttendance:
    def __init__(self, records=()):
        self.records: dict[tuple[str, date], AttendanceRecord] = {}
        for r in records:
            self.records[(r.class_name, r.work_date)] = r
        self.fail = False
        self.upserts = 0

    def _check(self) -> None:
        if self.fail:
            raise StoreError("store unavailable")

    def upsert(self, *, class_name, work_date, total_count, present_count, present_names, updated_at=None):
        self._check()
        self.upserts += 1
        rec = AttendanceRecord(
            class_name=class_name,
            work_date=work_date,
            total_count=total_count,
            present_count=present_count,
            present_names=tuple(present_names),
            updated_at=updated_at,
        )
        self.records[(class_name, work_date)] = rec
        return rec

    def get(self, class_name: str, work_date: date) -> Optional[AttendanceRecord]:
        self._check()
        return self.records.get((class_name, work_date))

    def list_for_date(self, work_date: date):
        self._check()
        return sorted((r for r in self.records.values() if r.work_date == work_date), key=lambda r: r.class_name)

    def list_for_range(self, *, start_date: date, end_date: date):
        self._check()
        items = [r for r in self.records.values() if start_date <= r.work_date <= end_date]
        return sorted(items, key=lambda r: (r.work_date, r.class_name))

    def delete_for_date(self, work_date: date) -> int:
        self._check()
        keys = [k for k in self.records if k[1] == work_date]
        for k in keys:
            del self.records[k]
        return len(keys)


class InMemoryRosters:
    def __init__(self, totals=None, students=None):
        self.totals: dict[str, int] = dict(totals or {})
        self.students: dict[str, list[str]] = {k: list(v) for k, v in (students or {}).items()}
        self.fail_students = False

    def get_roster_total(self, class_name: str) -> Optional[int]:
        return self.totals.get(class_name)

    def set_roster_total(self, class_name: str, total_students: int) -> None:
        self.totals[class_name] = total_students

    def get_roster(self, class_name: str) -> ClassRoster:
        return ClassRoster(
            class_name=class_name,
            total_students=self.totals.get(class_name),
            student_names=tuple(sorted(self.students.get(class_name, []))),
        )

    def add_students(self, class_name, student_names, *, source: str) -> int:
        if self.fail_students:
            raise StoreError("students table unavailable")
        known = self.students.setdefault(class_name, [])
        added = 0
        for name in student_names:
            if name not in known:
                known.append(name)
                added += 1
        return added

    def list_known_students(self):
        if self.fail_students:
            raise StoreError("students table unavailable")
        return {k: sorted(v) for k, v in self.students.items()}


class InMemoryAccess:
    def __init__(self):
        self.authorized: dict[int, AuthorizedUser] = {}
        self.requests: list[AccessRequest] = []

    def get_authorized(self, *, user_id: int) -> Optional[AuthorizedUser]:
        return self.authorized.get(user_id)

    def list_authorized(self, *, status: AccessStatus = AccessStatus.ACTIVE):
        return [u for u in self.authorized.values() if u.status == status]

    def save_authorized(self, *, user_id, username, chat_id, authorized_by):
        user = AuthorizedUser(
            user_id=user_id,
            username=username,
            chat_id=chat_id,
            status=AccessStatus.ACTIVE,
            authorized_by=authorized_by,
        )
        self.authorized[user_id] = user
        return user

    def set_authorized_status(self, *, user_id: int, status: AccessStatus) -> bool:
        user = self.authorized.get(user_id)
        if user is None:
            return False
        self.authorized[user_id] = replace(user, status=status)
        return True

    def get_pending_request(self, *, user_id: int) -> Optional[AccessRequest]:
        for req in self.requests:
            if req.user_id == user_id and req.status == RequestStatus.PENDING:
                return req
        return None

    def create_request(self, *, user_id, username, chat_id) -> int:
        request_id = len(self.requests) + 1
        self.requests.append(
            AccessRequest(
                request_id=request_id,
                user_id=user_id,
                username=username,
                chat_id=chat_id,
                status=RequestStatus.PENDING,
            )
        )
        return request_id

    def decide_request(self, *, request_id: int, status: RequestStatus, decided_by: int) -> bool:
        for i, req in enumerate(self.requests):
            if req.request_id == request_id and req.status == RequestStatus.PENDING:
                self.requests[i] = replace(req, status=status, decided_by=decided_by)
                return True
        return False

    def list_requests(self, *, status=None, limit: int = 50):
        items = [r for r in self.requests if status is None or r.status == status]
        return items[:limit]


class InMemoryChatSettings:
    def __init__(self, chat_id: Optional[int] = None):
        self.chat_id = chat_id

    def get_target_chat_id(self) -> Optional[int]:
        return self.chat_id

    def set_target_chat_id(self, chat_id: int) -> None:
        self.chat_id = int(chat_id)


class FakeSender:
    """Records outgoing messages; chats listed in `failing` raise TransportError."""

    def __init__(self, failing=()):
        self.sent: list[tuple[int, str, Optional[dict]]] = []
        self.answers: list[tuple[str, Optional[str]]] = []
        self.failing = set(failing)

    def send_message(self, chat_id, text, *, reply_markup=None):
        if chat_id in self.failing:
            raise TransportError(f"chat {chat_id} unreachable")
        self.sent.append((chat_id, text, reply_markup))
        return {"message_id": len(self.sent)}

    def answer_callback_query(self, callback_query_id, text=None):
        self.answers.append((callback_query_id, text))
        return True

    def texts_to(self, chat_id: int) -> list[str]:
        return [text for cid, text, _ in self.sent if cid == chat_id]


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def roster_repo():
    return InMemoryRosters()


@pytest.fixture
def access_repo():
    return InMemoryAccess()


@pytest.fixture
def chat_settings():
    return InMemoryChatSettings()


@pytest.fixture
def sender():
    return FakeSender()
