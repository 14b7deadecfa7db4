from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.exceptions import TransportError
from ..notifications.telegram_client import TelegramClient
from .service import BotService

logger = logging.getLogger(__name__)


def run_polling(
    client: TelegramClient,
    bot_service: BotService,
    *,
    stop_event: Optional[threading.Event] = None,
    timeout: int = 30,
    retry_delay: float = 5.0,
) -> None:
    """Long-polling loop used when no webhook URL is configured."""

    stop_event = stop_event or threading.Event()
    offset: Optional[int] = None

    try:
        client.delete_webhook()
    except TransportError:
        logger.warning("deleteWebhook failed, getUpdates may be refused while a webhook is set")
    logger.info("Long-polling started")

    while not stop_event.is_set():
        try:
            updates = client.get_updates(offset=offset, timeout=timeout)
        except TransportError:
            logger.exception("getUpdates failed, retrying in %ss", retry_delay)
            stop_event.wait(retry_delay)
            continue

        for update in updates:
            offset = int(update["update_id"]) + 1
            try:
                bot_service.handle_update(update)
            except Exception:
                logger.exception("Unhandled error for update %s", update.get("update_id"))

    logger.info("Long-polling stopped")
