"""Calendar helpers: every "today" in the club is a date in ``club_timezone``."""
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from garden_club.config import get_settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def club_zone() -> ZoneInfo:
    return ZoneInfo(get_settings().club_timezone)


def _utc(dt: datetime) -> datetime:
    # naive values come back from SQLite and are stored as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_date(value: date | datetime) -> date:
    """Calendar date of ``value`` in the club's timezone."""
    if isinstance(value, datetime):
        return _utc(value).astimezone(club_zone()).date()
    return value


def club_today(now: datetime | None = None) -> date:
    return local_date(now or utcnow())


def day_window(day: date) -> tuple[datetime, datetime]:
    """UTC bounds ``[start, end)`` of a local calendar day."""
    zone = club_zone()
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
