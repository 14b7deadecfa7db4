from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AccessStatus, RequestStatus
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AccessRequest, AuthorizedUser
from .repository import AccessRepository


def _to_user(r: Dict[str, Any]) -> AuthorizedUser:
    return AuthorizedUser(
        user_id=int(r["user_id"]),
        username=r.get("username"),
        chat_id=int(r["chat_id"]),
        status=AccessStatus(r["status"]),
        authorized_by=r.get("authorized_by"),
        created_at=r.get("created_at"),
    )


def _to_request(r: Dict[str, Any]) -> AccessRequest:
    return AccessRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        username=r.get("username"),
        chat_id=int(r["chat_id"]),
        status=RequestStatus(r["status"]),
        requested_at=r.get("requested_at"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


class MySQLAccessRepository(AccessRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Authorized recipients --------
    def get_authorized(self, *, user_id: int) -> Optional[AuthorizedUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, username, chat_id, status, authorized_by, created_at
                FROM authorized_users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_authorized(self, *, status: AccessStatus = AccessStatus.ACTIVE) -> Sequence[AuthorizedUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, username, chat_id, status, authorized_by, created_at
                FROM authorized_users
                WHERE status=%s
                ORDER BY created_at ASC
                """,
                (status.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def save_authorized(
        self,
        *,
        user_id: int,
        username: Optional[str],
        chat_id: int,
        authorized_by: Optional[int],
    ) -> AuthorizedUser:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO authorized_users(user_id, username, chat_id, status, authorized_by)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    username=VALUES(username),
                    chat_id=VALUES(chat_id),
                    status=VALUES(status),
                    authorized_by=VALUES(authorized_by)
                """,
                (int(user_id), username, int(chat_id), AccessStatus.ACTIVE.value, authorized_by),
            )
            cur.execute(
                """
                SELECT user_id, username, chat_id, status, authorized_by, created_at
                FROM authorized_users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                raise StoreError(f"Authorized user {user_id} missing after save")
            return _to_user(r)

    def set_authorized_status(self, *, user_id: int, status: AccessStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE authorized_users SET status=%s WHERE user_id=%s",
                (status.value, int(user_id)),
            )
            return cur.rowcount > 0

    # -------- Pending requests --------
    def get_pending_request(self, *, user_id: int) -> Optional[AccessRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT request_id, user_id, username, chat_id, status, requested_at, decided_by, decided_at
                FROM pending_user_requests
                WHERE user_id=%s AND status=%s
                ORDER BY requested_at DESC
                LIMIT 1
                """,
                (int(user_id), RequestStatus.PENDING.value),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def create_request(self, *, user_id: int, username: Optional[str], chat_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pending_user_requests(user_id, username, chat_id, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), username, int(chat_id), RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def decide_request(self, *, request_id: int, status: RequestStatus, decided_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE pending_user_requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), datetime.now(), int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_requests(self, *, status: Optional[RequestStatus] = None, limit: int = 50) -> Sequence[AccessRequest]:
        clauses = []
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT request_id, user_id, username, chat_id, status, requested_at, decided_by, decided_at
                FROM pending_user_requests
                {where}
                ORDER BY requested_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]
