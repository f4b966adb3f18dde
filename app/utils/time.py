"""UTC helpers for timestamps and default bill dates"""

from datetime import date, datetime, timezone


def get_utc_now() -> datetime:
    """
    Naive UTC datetime for DateTime columns (TIMESTAMP WITHOUT TIME ZONE).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_utc_today() -> date:
    return get_utc_now().date()
