import os

BOT_TOKEN = "123456:test-token"
WEBHOOK_URL = ""
HOST = "127.0.0.1"
PORT = 3000

TIMEZONE = "Asia/Tashkent"
CLASSES = ("1A", "1B", "2A", "2B", "3A", "4A", "5A", "5B", "6A", "6B", "7A", "8A", "8B", "9A", "9B", "10A", "10B", "11A")
ACTIVE_HOURS = ("08:15", "13:00")
LATE_UPDATE_START = "09:15"
SUMMARY_TIMES = ("09:15", "10:10", "11:05", "12:00")
REMINDER_TIMES = ("09:30", "09:45", "10:00")
END_OF_DAY_TIME = "13:00"

OWNER_USER_ID = 1000
ALLOWED_GROUP_ID = ""
TARGET_CHAT_ID = ""

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_bot_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
SCHEDULER_ENABLED = False
