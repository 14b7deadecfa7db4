from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .bot.controller import register as register_bot
from .container import Container, build_container
from .core.exceptions import StoreError
from .core.settings import BotSettings
from .database.bootstrap import apply_schema, list_tables
from .scheduling.scheduler import build_scheduler

logger = logging.getLogger(__name__)

CONTAINER_KEY = "attendance_bot.container"
SCHEDULER_KEY = "attendance_bot.scheduler"


def _configure_logging(settings) -> None:
    level = getattr(settings, "LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _persist_target_chat(container: Container) -> None:
    chat_id = container.settings.target_chat_id
    if chat_id is None:
        return
    try:
        container.chat_settings_repo.set_target_chat_id(chat_id)
    except StoreError:
        logger.exception("Could not persist configured target chat %s", chat_id)


def create_app(*, settings_module: Optional[str] = None, start_scheduler: Optional[bool] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(settings)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["HOST"] = getattr(settings, "HOST", "0.0.0.0")
    app.config["PORT"] = int(getattr(settings, "PORT", 3000))

    bot_settings = BotSettings.from_module(settings)
    db_config = bot_settings.db_config
    logger.info(
        "settings=%s db=%s@%s:%s/%s tz=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        bot_settings.tz_name,
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

    container = build_container(settings=bot_settings)
    _persist_target_chat(container)

    register_bot(app, container)
    app.extensions[CONTAINER_KEY] = container

    if start_scheduler is None:
        start_scheduler = bot_settings.scheduler_enabled
    if start_scheduler:
        scheduler = build_scheduler(container.jobs, bot_settings)
        scheduler.start()
        app.extensions[SCHEDULER_KEY] = scheduler

    return app
