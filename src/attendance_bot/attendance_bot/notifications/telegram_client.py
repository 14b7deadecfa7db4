from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import requests

from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)

API_URL = "https://api.telegram.org"


def inline_keyboard(rows: Sequence[Sequence[tuple[str, str]]]) -> dict:
    """[[(label, callback_data), ...], ...] -> reply_markup payload."""
    return {
        "inline_keyboard": [
            [{"text": label, "callback_data": data} for label, data in row]
            for row in rows
        ]
    }


class TelegramClient:
    """Thin wrapper over the Telegram Bot HTTP API."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = API_URL,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ):
        if not token:
            raise ValueError("Bot token is required")
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = int(timeout)
        self._session = session or requests.Session()

    def _call(self, method: str, payload: Optional[dict] = None, *, timeout: Optional[int] = None) -> Any:
        url = f"{self._base_url}/bot{self._token}/{method}"
        try:
            response = self._session.post(url, json=payload or {}, timeout=timeout or self._timeout)
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TransportError(f"{method} failed: {e}") from e

        if not data.get("ok"):
            raise TransportError(f"{method} rejected: {data.get('description', response.status_code)}")
        return data.get("result")

    def send_message(self, chat_id: int, text: str, *, reply_markup: Optional[dict] = None) -> dict:
        payload: dict = {"chat_id": chat_id, "text": text}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        return self._call("sendMessage", payload)

    def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> bool:
        payload: dict = {"callback_query_id": callback_query_id}
        if text:
            payload["text"] = text
        return bool(self._call("answerCallbackQuery", payload))

    def set_webhook(self, url: str) -> bool:
        return bool(self._call("setWebhook", {"url": url}))

    def delete_webhook(self) -> bool:
        return bool(self._call("deleteWebhook", {"drop_pending_updates": False}))

    def get_webhook_info(self) -> dict:
        return self._call("getWebhookInfo") or {}

    def get_updates(self, *, offset: Optional[int] = None, timeout: int = 30) -> list[dict]:
        payload: dict = {"timeout": int(timeout), "allowed_updates": ["message", "callback_query"]}
        if offset is not None:
            payload["offset"] = int(offset)
        # HTTP timeout must outlive the long-poll timeout.
        return list(self._call("getUpdates", payload, timeout=int(timeout) + self._timeout) or [])
