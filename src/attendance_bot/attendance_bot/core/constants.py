"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Tashkent"

# Canonical order used by every report; index in this tuple is the sort key.
DEFAULT_CLASSES = (
    "1A", "1B",
    "2A", "2B",
    "3A",
    "4A",
    "5A", "5B",
    "6A", "6B",
    "7A",
    "8A", "8B",
    "9A", "9B",
    "10A", "10B",
    "11A",
)

ARRIVED_KEYWORDS = ("keldi",)
DEPARTED_KEYWORDS = ("ketdi",)

NOT_SUBMITTED = "Topshirmadi"
TOTAL_LABEL = "Jami"
ABSENT_LABEL = "Kelmaganlar"
AVERAGE_LABEL = "O'rtacha"
NO_DATA = "Hech qanday ma'lumot topilmadi."

DAILY_REPORT_TITLE = "📊 Kunlik hisobot"
WEEKLY_REPORT_TITLE = "📊 Haftalik hisobot"
MONTHLY_REPORT_TITLE = "📊 Oylik hisobot"

DEFAULT_REPORT_DAYS = 7
DEFAULT_PENDING_LIMIT = 50
