from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector

from ..core.exceptions import StoreError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise StoreError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_names(names: Sequence[str]) -> str:
    return json.dumps(list(names), ensure_ascii=False)


def load_names(value: Any) -> tuple[str, ...]:
    """Normalize the JSON name column across connector implementations.

    mysql-connector can return a JSON column as:
    - str
    - bytes / bytearray
    - an already decoded list (C extension with some server versions)
    """

    if value is None:
        return ()

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return ()
        value = json.loads(value)

    if isinstance(value, list):
        return tuple(str(v) for v in value)

    raise TypeError(f"Unsupported JSON names value type: {type(value)!r}")
