from datetime import time
from types import SimpleNamespace

import pytest

import config.testing
from config import get_settings_module
from src.attendance_bot.attendance_bot.core.settings import BotSettings


@pytest.mark.parametrize(
    "env, module",
    [("production", "config.production"), ("test", "config.testing"), ("anything", "config.development")],
)
def test_settings_module_follows_app_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == module


def test_bot_settings_from_testing_module():
    settings = BotSettings.from_module(config.testing)

    assert settings.tz_name == "Asia/Tashkent"
    assert settings.classes[0] == "1A"
    assert settings.classes[-1] == "11A"
    assert (settings.active_start, settings.active_end) == (time(8, 15), time(13, 0))
    assert settings.summary_times == (time(9, 15), time(10, 10), time(11, 5), time(12, 0))
    assert settings.owner_user_id == 1000
    assert settings.allowed_group_id is None
    assert not settings.scheduler_enabled


def test_missing_token_is_fatal():
    with pytest.raises(RuntimeError):
        BotSettings.from_module(SimpleNamespace(BOT_TOKEN=""))


def test_webhook_url_trailing_slash_is_dropped():
    settings = BotSettings.from_module(SimpleNamespace(BOT_TOKEN="1:a", WEBHOOK_URL="https://bot.example.org/", TARGET_CHAT_ID="-100"))

    assert settings.webhook_url == "https://bot.example.org"
    assert settings.target_chat_id == -100
