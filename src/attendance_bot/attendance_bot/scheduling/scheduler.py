from __future__ import annotations

import logging
from datetime import time
from typing import Callable, Iterable, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..core.settings import BotSettings
from .jobs import ScheduledJobs

logger = logging.getLogger(__name__)


def _add_daily(scheduler: BackgroundScheduler, func: Callable, at: time, *, name: str, tz: ZoneInfo) -> None:
    scheduler.add_job(
        func,
        CronTrigger(hour=at.hour, minute=at.minute, timezone=tz),
        id=f"{name}-{at.strftime('%H%M')}",
        name=name,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=300,
    )


def build_scheduler(
    jobs: ScheduledJobs,
    settings: BotSettings,
    *,
    scheduler: Optional[BackgroundScheduler] = None,
) -> BackgroundScheduler:
    """Register every daily job; the caller decides when to start()."""

    tz = ZoneInfo(settings.tz_name)
    scheduler = scheduler or BackgroundScheduler(timezone=tz)

    schedule: Iterable[tuple[str, Callable, tuple[time, ...]]] = (
        ("reminder", jobs.send_reminder, settings.reminder_times),
        ("summary", jobs.send_daily_summary, settings.summary_times),
        ("end-of-day", jobs.send_end_of_day, (settings.end_of_day,)),
    )
    for name, func, times in schedule:
        for at in times:
            _add_daily(scheduler, func, at, name=name, tz=tz)
            logger.info("Scheduled %s at %s (%s)", name, at.strftime("%H:%M"), settings.tz_name)
    return scheduler
