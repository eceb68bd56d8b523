from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from hrms.core.config import settings


def _zone() -> tzinfo:
    if settings.timezone.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(settings.timezone)


def now_local() -> datetime:
    """Naive wall-clock time in the configured zone; check-in times are stored this way."""
    return datetime.now(_zone()).replace(tzinfo=None)


def today() -> date:
    return now_local().date()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_wall_clock(value: datetime) -> datetime:
    """Convert an aware timestamp to naive wall-clock time in the configured zone."""
    if value.tzinfo is None:
        return value
    return value.astimezone(_zone()).replace(tzinfo=None)
