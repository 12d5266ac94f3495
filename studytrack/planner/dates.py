from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str]

EPOCH = datetime(1970, 1, 1)


def to_datetime(value: Optional[DateLike]) -> Optional[datetime]:
    """Coerce a date, datetime or ISO string to a naive datetime.

    Aware values are converted to UTC before the offset is dropped so that
    everything compared inside the planner shares one clock.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def start_of_day(value: Union[date, datetime]) -> datetime:
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def add_days(value: Union[date, datetime], days: int):
    return value + timedelta(days=days)


def format_iso_date(value: Union[date, datetime]) -> str:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    return value.isoformat(timespec="milliseconds")
