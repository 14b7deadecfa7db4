from datetime import time

from apscheduler.schedulers.background import BackgroundScheduler

from src.attendance_bot.attendance_bot.core.settings import BotSettings
from src.attendance_bot.attendance_bot.scheduling.scheduler import build_scheduler


class NoopJobs:
    def send_reminder(self, *, now=None):
        pass

    def send_daily_summary(self, *, now=None):
        pass

    def send_end_of_day(self, *, now=None):
        pass


def test_every_daily_job_is_registered():
    settings = BotSettings(bot_token="123:abc")

    scheduler = build_scheduler(NoopJobs(), settings, scheduler=BackgroundScheduler(timezone=settings.tz_name))

    ids = sorted(job.id for job in scheduler.get_jobs())
    assert ids == sorted(
        [
            "reminder-0930", "reminder-0945", "reminder-1000",
            "summary-0915", "summary-1010", "summary-1105", "summary-1200",
            "end-of-day-1300",
        ]
    )


def test_custom_times_replace_defaults():
    settings = BotSettings(bot_token="123:abc", summary_times=(time(9, 0),), reminder_times=())

    scheduler = build_scheduler(NoopJobs(), settings)

    assert sorted(job.id for job in scheduler.get_jobs()) == ["end-of-day-1300", "summary-0900"]
