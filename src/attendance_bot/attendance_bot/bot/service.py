from __future__ import annotations

import logging
from datetime import MAXYEAR, date, datetime
from typing import Callable

from ..access.service import AccessService
from ..attendance.service import AttendanceService
from ..common.datetime_utils import is_within, now_local, parse_iso_date
from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import AuthorizationError, DomainError, StoreError, TransportError, ValidationError
from ..core.settings import BotSettings
from ..notifications.notifier import Notifier
from ..notifications.telegram_client import inline_keyboard
from ..reports.service import ReportService
from ..roster.repository import RosterRepository
from .model import ButtonPress, InboundMessage
from .settings_repository import ChatSettingsRepository

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "Xatolik yuz berdi. Iltimos, qayta urinib ko'ring."

WELCOME_TEXT = """👋 Assalomu alaykum! Davomad botiga xush kelibsiz.

📝 Davomad yuborish formati (jami/kelganlar):
<Sinf> <jami>/<kelganlar>
<O'quvchi 1>
<O'quvchi 2>

Misol:
6A 21/18
Abubakr Valijanov
Alisher Oripov

✅ Kechikkan yoki ketgan o'quvchilar:
<Sinf> <Ism> keldi
<Sinf> <Ism> ketdi

⏰ Faol vaqt: {start} - {end}
🔑 Hisobotlarni olish uchun shaxsiy chatda /request yuboring."""


class BotService:
    """Routes transport updates to commands, button actions and attendance text."""

    def __init__(
        self,
        *,
        settings: BotSettings,
        attendance: AttendanceService,
        reports: ReportService,
        access: AccessService,
        rosters: RosterRepository,
        chat_settings: ChatSettingsRepository,
        notifier: Notifier,
    ):
        self._settings = settings
        self._attendance = attendance
        self._reports = reports
        self._access = access
        self._rosters = rosters
        self._chat_settings = chat_settings
        self._notifier = notifier

        self._commands: dict[str, Callable[[InboundMessage, list[str], datetime], None]] = {
            "start": self._cmd_start,
            "help": self._cmd_start,
            "setchat": self._cmd_setchat,
            "request": self._cmd_request,
            "pending": self._cmd_pending,
            "revoke": self._cmd_revoke,
            "summary": self._cmd_summary,
            "report": self._cmd_report,
            "weekly": self._cmd_weekly,
            "monthly": self._cmd_monthly,
            "roster": self._cmd_roster,
            "clean": self._cmd_clean,
        }

    # -------- Entry point --------
    def handle_update(self, update: dict, *, now: datetime | None = None) -> None:
        now = now or now_local(self._settings.tz_name)

        button = ButtonPress.from_update(update)
        if button is not None:
            self._handle_button(button)
            return

        message = InboundMessage.from_update(update)
        if message is None or not message.text:
            return

        try:
            if message.is_command:
                self._handle_command(message, now)
            else:
                self._handle_text(message, now)
        except (ValidationError, AuthorizationError) as e:
            self._notify_quietly(message.chat_id, f"⚠️ {e}")
        except StoreError:
            logger.exception("Store failure while handling message from chat %s", message.chat_id)
            self._notify_quietly(message.chat_id, FAILURE_NOTICE)
        except TransportError:
            logger.exception("Transport failure while answering chat %s", message.chat_id)

    # -------- Attendance text --------
    def _handle_text(self, message: InboundMessage, now: datetime) -> None:
        if not message.is_group:
            return
        if self._settings.allowed_group_id and message.chat_id != self._settings.allowed_group_id:
            logger.debug("Message from unauthorized group %s ignored", message.chat_id)
            return

        moment = now.time()
        if not is_within(moment, self._settings.active_start, self._settings.active_end):
            logger.debug("Outside active hours (%s), message ignored", moment.strftime("%H:%M"))
            return

        allow_late = self._settings.late_update_start <= moment < self._settings.end_of_day
        outcome = self._attendance.process_text(message.text, now=now, allow_late_updates=allow_late)
        if outcome is None:
            return

        self._notifier.send(message.chat_id, outcome.confirmation())
        self._fan_out(outcome.recipient_notice())

    def _fan_out(self, text: str) -> None:
        try:
            recipients = self._access.recipients()
        except StoreError:
            logger.exception("Could not load recipients, notification skipped")
            return
        report = self._notifier.broadcast(recipients, text)
        if report.failed:
            logger.warning("Notification failed for %s of %s recipients", len(report.failed), len(recipients))

    # -------- Commands --------
    def _handle_command(self, message: InboundMessage, now: datetime) -> None:
        name, args = message.command()
        handler = self._commands.get(name)
        if handler is None:
            logger.debug("Unknown command /%s ignored", name)
            return
        handler(message, args, now)

    def _require_recipient(self, message: InboundMessage) -> None:
        if not self._access.is_authorized(message.sender_id):
            raise AuthorizationError("Sizda ruxsat yo'q. Shaxsiy chatda /request yuboring.")

    def _require_owner(self, message: InboundMessage) -> None:
        if not self._access.is_owner(message.sender_id):
            raise AuthorizationError("Bu amal faqat bot egasi uchun")

    def _cmd_start(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        if message.is_group and self._chat_settings.get_target_chat_id() is None:
            self._chat_settings.set_target_chat_id(message.chat_id)
            logger.info("Target chat set to %s", message.chat_id)
        self._reply(
            message.chat_id,
            WELCOME_TEXT.format(
                start=self._settings.active_start.strftime("%H:%M"),
                end=self._settings.active_end.strftime("%H:%M"),
            ),
        )

    def _cmd_setchat(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        self._require_owner(message)
        if not message.is_group:
            raise ValidationError("Bu buyruqni guruhda yuboring")
        self._chat_settings.set_target_chat_id(message.chat_id)
        logger.info("Target chat set to %s by owner", message.chat_id)
        self._reply(message.chat_id, "✅ Bu guruh eslatma va hisobotlar uchun tanlandi")

    def _cmd_request(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        if message.is_group:
            raise ValidationError("Ruxsat so'rovini shaxsiy chatda yuboring")

        self._access.request_access(
            user_id=message.sender_id,
            username=message.sender_username,
            chat_id=message.chat_id,
        )
        self._reply(message.chat_id, "📨 So'rovingiz yuborildi. Tasdiqlanishini kuting.")

        owner = self._access.owner_user_id
        if owner:
            who = f"@{message.sender_username}" if message.sender_username else str(message.sender_id)
            keyboard = inline_keyboard(
                [[("✅ Tasdiqlash", f"approve:{message.sender_id}"), ("❌ Rad etish", f"reject:{message.sender_id}")]]
            )
            try:
                self._notifier.send(owner, f"🔔 Yangi ruxsat so'rovi: {who}", reply_markup=keyboard)
            except TransportError:
                logger.exception("Could not notify owner about request from %s", message.sender_id)

    def _cmd_pending(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        pending = self._access.list_pending(current_user_id=message.sender_id)
        if not pending:
            self._reply(message.chat_id, "Kutilayotgan so'rovlar yo'q")
            return
        for req in pending:
            keyboard = inline_keyboard(
                [[("✅ Tasdiqlash", f"approve:{req.user_id}"), ("❌ Rad etish", f"reject:{req.user_id}")]]
            )
            self._notifier.send(message.chat_id, f"🔔 {req.display_name}", reply_markup=keyboard)

    def _cmd_revoke(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        if not args:
            raise ValidationError("Foydalanish: /revoke <user_id>")
        user_id = require_positive_int(args[0], "user_id")
        self._access.revoke(current_user_id=message.sender_id, user_id=user_id)
        self._reply(message.chat_id, f"🚫 {user_id} uchun ruxsat bekor qilindi")

    def _cmd_summary(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        self._require_recipient(message)
        self._reply(message.chat_id, self._reports.live_summary(self._attendance.today(now=now)))

    def _cmd_report(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        self._require_recipient(message)
        work_date = self._parse_date(args[0]) if args else self._attendance.today(now=now)
        self._reply(message.chat_id, self._reports.daily_report(work_date))

    def _cmd_weekly(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        self._require_recipient(message)
        if len(args) >= 2:
            text = self._reports.range_report(self._parse_date(args[0]), self._parse_date(args[1]))
        else:
            text = self._reports.weekly_report(self._attendance.today(now=now))
        self._reply(message.chat_id, text)

    def _cmd_monthly(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        self._require_recipient(message)
        today = self._attendance.today(now=now)
        month, year = today.month, today.year
        if args:
            month = require_positive_int(args[0], "Oy")
            if month > 12:
                raise ValidationError("Oy 1 dan 12 gacha bo'lishi kerak")
        if len(args) >= 2:
            year = require_positive_int(args[1], "Yil")
            if year > MAXYEAR:
                raise ValidationError(f"Yil 1 dan {MAXYEAR} gacha bo'lishi kerak")
        self._reply(message.chat_id, self._reports.monthly_report(month, year))

    def _cmd_roster(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        self._require_owner(message)
        if not args:
            raise ValidationError("Foydalanish: /roster <sinf> [jami]")
        class_name = require_non_empty(args[0], "Sinf").upper()
        if class_name not in self._attendance.catalog:
            raise ValidationError(f"Noma'lum sinf: {class_name}")

        if len(args) >= 2:
            total = require_positive_int(args[1], "Jami")
            self._rosters.set_roster_total(class_name, total)
            self._reply(message.chat_id, f"✅ {class_name}: jami {total} ta o'quvchi")
            return

        roster = self._rosters.get_roster(class_name)
        total = roster.total_students if roster.total_students is not None else "-"
        lines = [f"{class_name}: jami {total}, ma'lum o'quvchilar {len(roster.student_names)}"]
        lines.extend(roster.student_names)
        self._reply(message.chat_id, "\n".join(lines))

    def _cmd_clean(self, message: InboundMessage, args: list[str], now: datetime) -> None:
        self._require_owner(message)
        work_date = self._attendance.today(now=now)
        deleted = self._attendance.purge(work_date)
        self._reply(message.chat_id, f"🧹 {work_date.isoformat()} uchun {deleted} ta yozuv o'chirildi")

    # -------- Buttons --------
    def _handle_button(self, button: ButtonPress) -> None:
        action, arg = button.action()
        try:
            if action not in ("approve", "reject"):
                self._notifier.acknowledge(button.callback_id)
                return
            user_id = require_positive_int(arg, "user_id")

            if action == "approve":
                user = self._access.approve(current_user_id=button.sender_id, user_id=user_id)
                self._notifier.acknowledge(button.callback_id, "Tasdiqlandi")
                self._notify_quietly(user.chat_id, "✅ So'rovingiz tasdiqlandi. Endi hisobotlarni olasiz.")
            else:
                req = self._access.reject(current_user_id=button.sender_id, user_id=user_id)
                self._notifier.acknowledge(button.callback_id, "Rad etildi")
                self._notify_quietly(req.chat_id, "❌ So'rovingiz rad etildi.")
        except DomainError as e:
            if isinstance(e, StoreError):
                logger.exception("Store failure on button %s", button.token)
                self._notifier.acknowledge(button.callback_id, FAILURE_NOTICE)
            else:
                self._notifier.acknowledge(button.callback_id, str(e))

    # -------- Helpers --------
    @staticmethod
    def _parse_date(value: str) -> date:
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("Sana formati: YYYY-MM-DD")

    def _reply(self, chat_id: int, text: str) -> None:
        self._notifier.send(chat_id, text)

    def _notify_quietly(self, chat_id: int, text: str) -> None:
        try:
            self._notifier.send(chat_id, text)
        except TransportError:
            logger.exception("Could not notify chat %s", chat_id)
