from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from src.attendance_bot.attendance_bot.access.service import AccessService
from src.attendance_bot.attendance_bot.attendance.service import AttendanceService
from src.attendance_bot.attendance_bot.bot.service import FAILURE_NOTICE, BotService
from src.attendance_bot.attendance_bot.core.enums import AccessStatus
from src.attendance_bot.attendance_bot.core.settings import BotSettings
from src.attendance_bot.attendance_bot.notifications.notifier import Notifier
from src.attendance_bot.attendance_bot.reports.service import ReportService

TZ = ZoneInfo("Asia/Tashkent")
DAY = date(2026, 3, 2)
GROUP = -1001
OWNER = 1000
CLASS_HEAD = 5


def at(hour, minute=0):
    return datetime(2026, 3, 2, hour, minute, tzinfo=TZ)


def group_message(text, *, chat_id=GROUP, user_id=CLASS_HEAD):
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "chat": {"id": chat_id, "type": "supergroup"},
            "from": {"id": user_id, "username": "sinf_rahbari"},
            "text": text,
        },
    }


def private_message(text, *, user_id, username="someone"):
    return {
        "update_id": 2,
        "message": {
            "message_id": 11,
            "chat": {"id": user_id, "type": "private"},
            "from": {"id": user_id, "username": username},
            "text": text,
        },
    }


def button(data, *, user_id=OWNER):
    return {
        "update_id": 3,
        "callback_query": {
            "id": "cb-1",
            "from": {"id": user_id},
            "message": {"chat": {"id": user_id}},
            "data": data,
        },
    }


@pytest.fixture
def make_bot(attendance_repo, roster_repo, access_repo, chat_settings, sender):
    def _make(**overrides):
        settings = BotSettings(bot_token="123:abc", owner_user_id=OWNER, **overrides)
        return BotService(
            settings=settings,
            attendance=AttendanceService(attendance_repo, roster_repo),
            reports=ReportService(attendance_repo, roster_repo),
            access=AccessService(access_repo, owner_user_id=OWNER),
            rosters=roster_repo,
            chat_settings=chat_settings,
            notifier=Notifier(sender),
        )

    return _make


@pytest.fixture
def bot(make_bot):
    return make_bot()


def _authorize(access_repo, user_id, chat_id):
    access_repo.save_authorized(user_id=user_id, username=None, chat_id=chat_id, authorized_by=OWNER)


def test_submission_in_window_is_stored_and_confirmed(bot, attendance_repo, access_repo, sender):
    _authorize(access_repo, 42, 4200)

    bot.handle_update(group_message("9A 30/27 Ali Olimov Bobur"), now=at(9))

    assert attendance_repo.get("9A", DAY).present_count == 27
    assert sender.texts_to(GROUP) == ["✅ 9A davomad qabul qilindi: 30/27"]
    assert sender.texts_to(4200) == ["✅ 9A davomad qabul qilindi: 30/27"]


@pytest.mark.parametrize("hour, minute", [(8, 15), (13, 0)])
def test_window_edges_are_inclusive(bot, attendance_repo, hour, minute):
    bot.handle_update(group_message("1A 20/20"), now=at(hour, minute))

    assert attendance_repo.get("1A", DAY) is not None


@pytest.mark.parametrize("hour, minute", [(8, 14), (13, 1), (20, 0)])
def test_messages_outside_window_are_ignored(bot, attendance_repo, sender, hour, minute):
    bot.handle_update(group_message("1A 20/20"), now=at(hour, minute))

    assert attendance_repo.records == {}
    assert sender.sent == []


def test_late_update_waits_for_its_window(bot, attendance_repo, sender):
    bot.handle_update(group_message("9A 30/1\nAli"), now=at(8, 30))

    bot.handle_update(group_message("9A Bobur keldi"), now=at(9, 14))
    assert attendance_repo.get("9A", DAY).present_count == 1

    bot.handle_update(group_message("9A Bobur keldi"), now=at(9, 15))
    assert attendance_repo.get("9A", DAY).present_names == ("Ali", "Bobur")
    assert sender.texts_to(GROUP)[-1] == "9A yangilandi: Bobur keldi\nBugun jami 30 dan 2 kishi keldi"


def test_late_update_closes_at_end_of_day(bot, attendance_repo):
    bot.handle_update(group_message("9A 30/1\nAli"), now=at(9))

    bot.handle_update(group_message("9A Ali ketdi"), now=at(13))

    assert attendance_repo.get("9A", DAY).present_count == 1


def test_other_groups_are_ignored_when_group_is_pinned(make_bot, attendance_repo):
    bot = make_bot(allowed_group_id=GROUP)

    bot.handle_update(group_message("1A 20/20", chat_id=-2002), now=at(9))
    assert attendance_repo.records == {}

    bot.handle_update(group_message("1A 20/20"), now=at(9))
    assert attendance_repo.get("1A", DAY) is not None


def test_private_text_is_not_attendance(bot, attendance_repo):
    bot.handle_update(private_message("1A 20/20", user_id=CLASS_HEAD), now=at(9))

    assert attendance_repo.records == {}


def test_store_failure_is_reported_to_sender(bot, attendance_repo, sender):
    attendance_repo.fail = True

    bot.handle_update(group_message("1A 20/20"), now=at(9))

    assert sender.texts_to(GROUP) == [FAILURE_NOTICE]


def test_recipient_failure_does_not_block_others(bot, access_repo, sender):
    _authorize(access_repo, 42, 4200)
    _authorize(access_repo, 43, 4300)
    sender.failing.add(4200)

    bot.handle_update(group_message("1A 20/20"), now=at(9))

    assert sender.texts_to(GROUP)
    assert sender.texts_to(4300) == ["✅ 1A davomad qabul qilindi: 20/20"]


def test_start_in_group_stores_target_chat_once(bot, chat_settings, sender):
    bot.handle_update(group_message("/start"), now=at(7))
    bot.handle_update(group_message("/start", chat_id=-3003), now=at(7))

    assert chat_settings.chat_id == GROUP
    assert "Davomad botiga xush kelibsiz" in sender.texts_to(GROUP)[0]


def test_setchat_is_owner_only(bot, chat_settings, sender):
    chat_settings.chat_id = GROUP

    bot.handle_update(group_message("/setchat", chat_id=-3003), now=at(7))
    assert chat_settings.chat_id == GROUP
    assert sender.texts_to(-3003)[0].startswith("⚠️")

    bot.handle_update(group_message("/setchat", chat_id=-3003, user_id=OWNER), now=at(7))
    assert chat_settings.chat_id == -3003


def test_reports_need_authorization(bot, sender):
    bot.handle_update(private_message("/summary", user_id=77), now=at(10))

    assert sender.texts_to(77)[0].startswith("⚠️")


def test_report_command_for_given_date(bot, attendance_repo, access_repo, sender):
    _authorize(access_repo, 42, 42)
    attendance_repo.upsert(class_name="9A", work_date=date(2026, 2, 27), total_count=30, present_count=29, present_names=())

    bot.handle_update(private_message("/report 2026-02-27", user_id=42), now=at(10))

    text = sender.texts_to(42)[0]
    assert text.startswith("📊 Kunlik hisobot (2026-02-27)")
    assert "9A: 30/29" in text


def test_report_command_rejects_bad_date(bot, sender):
    bot.handle_update(private_message("/report yesterday", user_id=OWNER), now=at(10))

    assert sender.texts_to(OWNER) == ["⚠️ Sana formati: YYYY-MM-DD"]


def test_monthly_command_validates_month(bot, sender):
    bot.handle_update(private_message("/monthly 13", user_id=OWNER), now=at(10))

    assert sender.texts_to(OWNER)[0].startswith("⚠️")


def test_monthly_command_validates_year(bot, sender):
    bot.handle_update(private_message("/monthly 1 10000", user_id=OWNER), now=at(10))

    assert sender.texts_to(OWNER) == ["⚠️ Yil 1 dan 9999 gacha bo'lishi kerak"]


def test_weekly_command_with_range(bot, sender):
    bot.handle_update(private_message("/weekly@SchoolBot 2026-03-01 2026-03-05", user_id=OWNER), now=at(10))

    assert sender.texts_to(OWNER)[0].startswith("📊 Haftalik hisobot (2026-03-01 - 2026-03-05)")


def test_request_notifies_owner_with_buttons(bot, access_repo, sender):
    bot.handle_update(private_message("/request", user_id=42, username="ustoz"), now=at(10))

    assert access_repo.get_pending_request(user_id=42) is not None
    owner_messages = [(text, markup) for cid, text, markup in sender.sent if cid == OWNER]
    text, markup = owner_messages[0]
    assert "@ustoz" in text
    assert markup["inline_keyboard"][0][0]["callback_data"] == "approve:42"


def test_request_in_group_is_refused(bot, access_repo):
    bot.handle_update(group_message("/request"), now=at(10))

    assert access_repo.requests == []


def test_approve_button_grants_access(bot, access_repo, sender):
    bot.handle_update(private_message("/request", user_id=42), now=at(10))

    bot.handle_update(button("approve:42"), now=at(10))

    assert access_repo.authorized[42].status == AccessStatus.ACTIVE
    assert sender.answers == [("cb-1", "Tasdiqlandi")]
    assert sender.texts_to(42)[-1].startswith("✅ So'rovingiz tasdiqlandi")


def test_reject_button_from_non_owner_is_refused(bot, access_repo, sender):
    bot.handle_update(private_message("/request", user_id=42), now=at(10))

    bot.handle_update(button("reject:42", user_id=42), now=at(10))

    assert access_repo.get_pending_request(user_id=42) is not None
    assert sender.answers == [("cb-1", "Bu amal faqat bot egasi uchun")]


def test_roster_command_sets_total(bot, roster_repo, sender):
    bot.handle_update(private_message("/roster 9a 32", user_id=OWNER), now=at(10))

    assert roster_repo.totals == {"9A": 32}
    assert sender.texts_to(OWNER) == ["✅ 9A: jami 32 ta o'quvchi"]


def test_clean_purges_today(bot, attendance_repo, sender):
    bot.handle_update(group_message("1A 20/20"), now=at(9))

    bot.handle_update(private_message("/clean", user_id=OWNER), now=at(14))

    assert attendance_repo.records == {}
    assert sender.texts_to(OWNER)[-1] == "🧹 2026-03-02 uchun 1 ta yozuv o'chirildi"


def test_unknown_command_is_ignored(bot, sender):
    bot.handle_update(private_message("/dance", user_id=OWNER), now=at(10))

    assert sender.sent == []
