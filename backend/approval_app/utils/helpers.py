"""General-purpose utility helpers."""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def local_today(tz_name: str = "UTC") -> date:
    """Return the calendar date at the start of the current day in tz_name."""
    return datetime.now(ZoneInfo(tz_name)).date()


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by delta months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def mask_email(email: str) -> str:
    """Mask email for display: u***@example.com."""
    local, domain = email.split("@", 1)
    if len(local) <= 1:
        return f"*@{domain}"
    return f"{local[0]}{'*' * (len(local) - 1)}@{domain}"
