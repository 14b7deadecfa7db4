from __future__ import annotations

from typing import Optional, Protocol

TARGET_CHAT_KEY = "target_chat_id"


class ChatSettingsRepository(Protocol):
    """Persisted bot-level settings; the scheduler reads the target chat here."""

    def get_target_chat_id(self) -> Optional[int]:
        raise NotImplementedError

    def set_target_chat_id(self, chat_id: int) -> None:
        raise NotImplementedError
