from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)


class MessageSender(Protocol):
    def send_message(self, chat_id: int, text: str, *, reply_markup: Optional[dict] = None) -> dict:
        raise NotImplementedError

    def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> bool:
        raise NotImplementedError


@dataclass
class DeliveryReport:
    delivered: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def all_delivered(self) -> bool:
        return not self.failed


class Notifier:
    def __init__(self, sender: MessageSender):
        self._sender = sender

    def send(self, chat_id: int, text: str, *, reply_markup: Optional[dict] = None) -> None:
        """Single delivery; TransportError propagates to the caller."""
        self._sender.send_message(chat_id, text, reply_markup=reply_markup)

    def acknowledge(self, callback_id: str, text: Optional[str] = None) -> None:
        try:
            self._sender.answer_callback_query(callback_id, text)
        except TransportError:
            logger.warning("Could not answer callback %s", callback_id)

    def broadcast(self, recipients: Iterable[int], text: str) -> DeliveryReport:
        """Best-effort fan-out: one failed recipient never stops the rest."""

        report = DeliveryReport()
        for chat_id in dict.fromkeys(recipients):
            try:
                self._sender.send_message(chat_id, text)
            except TransportError:
                logger.exception("Delivery to %s failed", chat_id)
                report.failed.append(chat_id)
            else:
                report.delivered.append(chat_id)
        return report
