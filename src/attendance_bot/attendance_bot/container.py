from __future__ import annotations

from dataclasses import dataclass

from .access.mysql_access_repository import MySQLAccessRepository
from .access.service import AccessService
from .attendance.classes import ClassCatalog
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .bot.mysql_settings_repository import MySQLChatSettingsRepository
from .bot.service import BotService
from .core.settings import BotSettings
from .database.connection import DBConfig, DatabaseConnection
from .notifications.notifier import Notifier
from .notifications.telegram_client import TelegramClient
from .reports.service import ReportService
from .roster.mysql_roster_repository import MySQLRosterRepository
from .scheduling.jobs import ScheduledJobs


@dataclass(frozen=True)
class Container:
    settings: BotSettings
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    roster_repo: MySQLRosterRepository
    access_repo: MySQLAccessRepository
    chat_settings_repo: MySQLChatSettingsRepository

    telegram: TelegramClient
    notifier: Notifier

    attendance_service: AttendanceService
    report_service: ReportService
    access_service: AccessService
    bot_service: BotService
    jobs: ScheduledJobs


def build_container(*, settings: BotSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.db_config))
    catalog = ClassCatalog.of(settings.classes)

    attendance_repo = MySQLAttendanceRepository(conn)
    roster_repo = MySQLRosterRepository(conn)
    access_repo = MySQLAccessRepository(conn)
    chat_settings_repo = MySQLChatSettingsRepository(conn)

    telegram = TelegramClient(settings.bot_token)
    notifier = Notifier(telegram)

    attendance_service = AttendanceService(attendance_repo, roster_repo, catalog=catalog, tz_name=settings.tz_name)
    report_service = ReportService(attendance_repo, roster_repo, catalog=catalog, tz_name=settings.tz_name)
    access_service = AccessService(access_repo, owner_user_id=settings.owner_user_id)
    bot_service = BotService(
        settings=settings,
        attendance=attendance_service,
        reports=report_service,
        access=access_service,
        rosters=roster_repo,
        chat_settings=chat_settings_repo,
        notifier=notifier,
    )
    jobs = ScheduledJobs(
        reports=report_service,
        access=access_service,
        chat_settings=chat_settings_repo,
        notifier=notifier,
        tz_name=settings.tz_name,
    )

    return Container(
        settings=settings,
        conn=conn,
        attendance_repo=attendance_repo,
        roster_repo=roster_repo,
        access_repo=access_repo,
        chat_settings_repo=chat_settings_repo,
        telegram=telegram,
        notifier=notifier,
        attendance_service=attendance_service,
        report_service=report_service,
        access_service=access_service,
        bot_service=bot_service,
        jobs=jobs,
    )
