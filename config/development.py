import os

from .config import Config

BOT_TOKEN = Config.BOT_TOKEN
WEBHOOK_URL = Config.WEBHOOK_URL
HOST = Config.HOST
PORT = Config.PORT

TIMEZONE = Config.TIMEZONE
CLASSES = Config.CLASSES
ACTIVE_HOURS = Config.ACTIVE_HOURS
LATE_UPDATE_START = Config.LATE_UPDATE_START
SUMMARY_TIMES = Config.SUMMARY_TIMES
REMINDER_TIMES = Config.REMINDER_TIMES
END_OF_DAY_TIME = Config.END_OF_DAY_TIME

OWNER_USER_ID = Config.OWNER_USER_ID
ALLOWED_GROUP_ID = Config.ALLOWED_GROUP_ID
TARGET_CHAT_ID = Config.TARGET_CHAT_ID

DB_CONFIG = Config.db_config()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
