"""Time-triggered jobs: reminders, summaries and the end-of-day message.

Each job reads the target chat from the store when it fires, logs and
swallows store/transport failures so later cycles still run.
"""
from __future__ import annotations

import functools
import logging
from datetime import datetime
from typing import Callable, Optional

from ..access.service import AccessService
from ..bot.settings_repository import ChatSettingsRepository
from ..common.datetime_utils import now_local, today_local
from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import DomainError, TransportError
from ..notifications.notifier import Notifier
from ..reports.service import ReportService

logger = logging.getLogger(__name__)

END_OF_DAY_TEXT = "Bot kunlik faoliyatini yakunladi"


def background_job(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DomainError:
            logger.exception("Scheduled job %s failed", func.__name__)
            return None

    return wrapper


class ScheduledJobs:
    def __init__(
        self,
        *,
        reports: ReportService,
        access: AccessService,
        chat_settings: ChatSettingsRepository,
        notifier: Notifier,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._reports = reports
        self._access = access
        self._chat_settings = chat_settings
        self._notifier = notifier
        self._tz_name = tz_name

    def _target_chat(self, job: str) -> Optional[int]:
        chat_id = self._chat_settings.get_target_chat_id()
        if chat_id is None:
            logger.warning("No target chat stored yet, %s skipped", job)
        return chat_id

    def _send_to_group(self, chat_id: int, text: str) -> None:
        try:
            self._notifier.send(chat_id, text)
        except TransportError:
            logger.exception("Delivery to target chat %s failed", chat_id)

    def _broadcast(self, text: str) -> None:
        recipients = self._access.recipients()
        if not recipients:
            return
        report = self._notifier.broadcast(recipients, text)
        logger.info("Broadcast to %s recipients, %s failed", len(recipients), len(report.failed))

    @background_job
    def send_reminder(self, *, now: datetime | None = None) -> None:
        chat_id = self._target_chat("reminder")
        if chat_id is None:
            return
        work_date = today_local(self._tz_name, now=now or now_local(self._tz_name))
        text = self._reports.reminder(work_date)
        if text is None:
            logger.info("All classes submitted for %s, no reminder", work_date.isoformat())
            return
        self._send_to_group(chat_id, text)

    @background_job
    def send_daily_summary(self, *, now: datetime | None = None) -> None:
        work_date = today_local(self._tz_name, now=now or now_local(self._tz_name))
        chat_id = self._target_chat("summary")
        if chat_id is not None:
            self._send_to_group(chat_id, self._reports.group_summary(work_date))
        self._broadcast(self._reports.recipient_summary(work_date))

    @background_job
    def send_end_of_day(self, *, now: datetime | None = None) -> None:
        work_date = today_local(self._tz_name, now=now or now_local(self._tz_name))
        chat_id = self._target_chat("end of day")
        if chat_id is not None:
            self._send_to_group(chat_id, END_OF_DAY_TEXT)
        self._broadcast(self._reports.daily_report(work_date))
