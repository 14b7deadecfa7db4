from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from types import ModuleType
from typing import Optional

from ..common.datetime_utils import parse_hhmm
from .constants import DEFAULT_CLASSES, DEFAULT_TIMEZONE


def _optional_int(value) -> Optional[int]:
    if value in (None, ""):
        return None
    return int(value)


@dataclass(frozen=True)
class BotSettings:
    """Runtime settings resolved from a `config.*` settings module."""

    bot_token: str
    tz_name: str = DEFAULT_TIMEZONE
    classes: tuple[str, ...] = DEFAULT_CLASSES
    active_start: time = time(8, 15)
    active_end: time = time(13, 0)
    late_update_start: time = time(9, 15)
    end_of_day: time = time(13, 0)
    summary_times: tuple[time, ...] = (time(9, 15), time(10, 10), time(11, 5), time(12, 0))
    reminder_times: tuple[time, ...] = (time(9, 30), time(9, 45), time(10, 0))
    owner_user_id: Optional[int] = None
    allowed_group_id: Optional[int] = None
    target_chat_id: Optional[int] = None
    webhook_url: str = ""
    scheduler_enabled: bool = True
    db_config: dict = field(default_factory=dict)

    @classmethod
    def from_module(cls, settings: ModuleType) -> "BotSettings":
        token = getattr(settings, "BOT_TOKEN", "") or ""
        if not token:
            raise RuntimeError("BOT_TOKEN is required (set it in the environment or .env)")

        active_start, active_end = (parse_hhmm(v) for v in getattr(settings, "ACTIVE_HOURS", ("08:15", "13:00")))
        return cls(
            bot_token=token,
            tz_name=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            classes=tuple(getattr(settings, "CLASSES", DEFAULT_CLASSES)),
            active_start=active_start,
            active_end=active_end,
            late_update_start=parse_hhmm(getattr(settings, "LATE_UPDATE_START", "09:15")),
            end_of_day=parse_hhmm(getattr(settings, "END_OF_DAY_TIME", "13:00")),
            summary_times=tuple(parse_hhmm(v) for v in getattr(settings, "SUMMARY_TIMES", ("09:15", "10:10", "11:05", "12:00"))),
            reminder_times=tuple(parse_hhmm(v) for v in getattr(settings, "REMINDER_TIMES", ("09:30", "09:45", "10:00"))),
            owner_user_id=_optional_int(getattr(settings, "OWNER_USER_ID", None)),
            allowed_group_id=_optional_int(getattr(settings, "ALLOWED_GROUP_ID", None)),
            target_chat_id=_optional_int(getattr(settings, "TARGET_CHAT_ID", None)),
            webhook_url=(getattr(settings, "WEBHOOK_URL", "") or "").rstrip("/"),
            scheduler_enabled=bool(getattr(settings, "SCHEDULER_ENABLED", True)),
            db_config=dict(getattr(settings, "DB_CONFIG", {})),
        )
