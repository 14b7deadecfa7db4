from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .settings_repository import TARGET_CHAT_KEY, ChatSettingsRepository


class MySQLChatSettingsRepository(ChatSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_target_chat_id(self) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_value FROM bot_settings WHERE setting_key=%s", (TARGET_CHAT_KEY,))
            r = fetchone(cur)
            return int(r["setting_value"]) if r else None

    def set_target_chat_id(self, chat_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO bot_settings(setting_key, setting_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                """,
                (TARGET_CHAT_KEY, str(int(chat_id))),
            )
