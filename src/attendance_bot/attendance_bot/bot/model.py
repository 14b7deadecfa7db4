from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..core.enums import ChatType


@dataclass(frozen=True)
class InboundMessage:
    """A text message delivered by the chat transport."""

    chat_id: int
    chat_type: str
    sender_id: int
    sender_username: Optional[str]
    text: str
    timestamp: Optional[datetime] = None

    @property
    def is_group(self) -> bool:
        return self.chat_type in (ChatType.GROUP.value, ChatType.SUPERGROUP.value)

    @property
    def is_command(self) -> bool:
        return self.text.startswith("/")

    def command(self) -> tuple[str, list[str]]:
        """'/report@SomeBot 2026-01-05' -> ('report', ['2026-01-05'])."""
        head, *args = self.text.split()
        name = head[1:].split("@", 1)[0].lower()
        return name, args

    @classmethod
    def from_update(cls, update: dict) -> Optional["InboundMessage"]:
        message = update.get("message") or update.get("edited_message")
        if not message or "text" not in message:
            return None
        chat = message.get("chat") or {}
        sender = message.get("from") or {}
        stamp = message.get("date")
        return cls(
            chat_id=int(chat["id"]),
            chat_type=str(chat.get("type", ChatType.PRIVATE.value)),
            sender_id=int(sender.get("id", 0)),
            sender_username=sender.get("username"),
            text=str(message["text"]).strip(),
            timestamp=datetime.fromtimestamp(int(stamp), tz=timezone.utc) if stamp else None,
        )


@dataclass(frozen=True)
class ButtonPress:
    """An inline button press carrying an opaque `action:argument` token."""

    callback_id: str
    chat_id: Optional[int]
    sender_id: int
    token: str

    def action(self) -> tuple[str, str]:
        name, _, arg = self.token.partition(":")
        return name, arg

    @classmethod
    def from_update(cls, update: dict) -> Optional["ButtonPress"]:
        query = update.get("callback_query")
        if not query:
            return None
        chat = (query.get("message") or {}).get("chat") or {}
        return cls(
            callback_id=str(query["id"]),
            chat_id=int(chat["id"]) if "id" in chat else None,
            sender_id=int((query.get("from") or {}).get("id", 0)),
            token=str(query.get("data") or ""),
        )
