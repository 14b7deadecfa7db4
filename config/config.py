import os


def _times(name: str, default: str) -> tuple:
    return tuple(v.strip() for v in os.environ.get(name, default).split(",") if v.strip())


class Config:
    BOT_TOKEN = os.environ.get("BOT_TOKEN", "")
    WEBHOOK_URL = os.environ.get("WEBHOOK_URL", "")
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "3000"))

    TIMEZONE = os.environ.get("TIMEZONE", "Asia/Tashkent")

    # Fixed class list; order here is the order of every report
    CLASSES = _times(
        "CLASSES",
        "1A,1B,2A,2B,3A,4A,5A,5B,6A,6B,7A,8A,8B,9A,9B,10A,10B,11A",
    )

    # Local wall-clock times in TIMEZONE
    ACTIVE_HOURS = _times("ACTIVE_HOURS", "08:15,13:00")
    LATE_UPDATE_START = os.environ.get("LATE_UPDATE_START", "09:15")
    SUMMARY_TIMES = _times("SUMMARY_TIMES", "09:15,10:10,11:05,12:00")
    REMINDER_TIMES = _times("REMINDER_TIMES", "09:30,09:45,10:00")
    END_OF_DAY_TIME = os.environ.get("END_OF_DAY_TIME", "13:00")

    OWNER_USER_ID = os.environ.get("OWNER_USER_ID", "")
    ALLOWED_GROUP_ID = os.environ.get("ALLOWED_GROUP_ID", "")
    TARGET_CHAT_ID = os.environ.get("TARGET_CHAT_ID", "")

    # DB
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "attendance_bot")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
