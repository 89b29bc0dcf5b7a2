from datetime import datetime, date
from zoneinfo import ZoneInfo
from app.core.config import settings

# YYYY-MM with a real month
MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def tzinfo():
    return ZoneInfo(settings.default_timezone)


def format_month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_key_of(value) -> str | None:
    """
    Calendar month (YYYY-MM) a transaction date belongs to, or None if it can't be parsed.

    Date-only values are calendar dates already. Aware datetimes are shifted into the
    local timezone first, so 2024-03-31T20:00:00Z lands in April for UTC+5:30.
    Naive datetimes are taken as local wall time.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return format_month_key(value.year, value.month)
    else:
        s = str(value).strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None

    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone(tzinfo())
        except (OverflowError, ValueError):
            # parses, but the shift leaves the supported year range
            return None
    return format_month_key(dt.year, dt.month)


def current_month_key(now: datetime | None = None) -> str:
    now = now or datetime.now(tzinfo())
    return month_key_of(now)


def month_label(month_key: str) -> str:
    # "2024-03" -> "Mar 2024"
    y, m = month_key.split("-")
    return f"{_MONTH_ABBR[int(m) - 1]} {int(y)}"
