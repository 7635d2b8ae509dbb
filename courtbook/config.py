import os

from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        return int(default)


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "1" if default else "0").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return bool(default)


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./courtbook.db")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    PLATFORM_TIME_ZONE = os.getenv("PLATFORM_TIME_ZONE", "America/Los_Angeles").strip()
    HOLIDAY_COUNTRY = os.getenv("HOLIDAY_COUNTRY", "US").strip().upper()
    HOLIDAY_SUBDIV = os.getenv("HOLIDAY_SUBDIV", "CA").strip().upper()

    DEFAULT_REVIEW_CADENCE_DAYS = _get_int("DEFAULT_REVIEW_CADENCE_DAYS", 30)
    CANCELLATION_NOTICE_HOURS = _get_int("CANCELLATION_NOTICE_HOURS", 48)
    RECURRING_WEEKLY_MAX_MONTHS = _get_int("RECURRING_WEEKLY_MAX_MONTHS", 3)
    RECURRING_MONTHLY_MAX_MONTHS = _get_int("RECURRING_MONTHLY_MAX_MONTHS", 6)

    SECURITY_HEADERS_ENABLED = _get_bool("SECURITY_HEADERS_ENABLED", True)


settings = Settings()
