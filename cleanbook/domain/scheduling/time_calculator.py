"""Time parsing and booking window calculations"""

import logging
import re
from datetime import date, datetime, time, timedelta

logger = logging.getLogger(__name__)

# Duration estimate per service name, used for calendar windows
SERVICE_DURATIONS = {
    "Basic House Cleaning": timedelta(hours=2),
    "Deep House Cleaning": timedelta(hours=4),
    "Office Cleaning": timedelta(hours=3),
}
DEFAULT_DURATION = timedelta(hours=2)
DEFAULT_START_TIME = time(9, 0)

# Legacy TIME columns serialized through a timestamp, e.g. "0000-01-01T09:00:00Z"
_TIMESTAMP_ARTIFACT = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ](\d{2}):(\d{2})(?::(\d{2}))?(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?$"
)


def parse_scheduled_time(value) -> time:
    """
    Normalize a scheduled time to a wall-clock value.

    Accepts time/datetime objects, "HH:MM", "HH:MM:SS" and the zero-date
    timestamp artifact ("0000-01-01T09:00:00Z").

    Raises:
        ValueError: If the value matches none of the known formats
    """
    if isinstance(value, datetime):
        return value.time().replace(microsecond=0)
    if isinstance(value, time):
        return value.replace(microsecond=0)
    if value is None:
        raise ValueError("Scheduled time is required")

    text = str(value).strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            pass

    match = _TIMESTAMP_ARTIFACT.match(text)
    if match:
        hour, minute, second = match.group(1), match.group(2), match.group(3) or "0"
        try:
            return time(int(hour), int(minute), int(second))
        except ValueError:
            pass

    raise ValueError(f"Invalid time format '{text}'. Use HH:MM or HH:MM:SS")


def coerce_stored_time(value) -> time:
    """Lenient variant for stored rows: unparseable values fall back to 09:00"""
    try:
        return parse_scheduled_time(value)
    except ValueError:
        logger.warning(f"⚠️ Unparseable stored time {value!r}, defaulting to 09:00")
        return DEFAULT_START_TIME


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def service_duration(service_name) -> timedelta:
    return SERVICE_DURATIONS.get(service_name, DEFAULT_DURATION)


def booking_window(day: date, start, service_name) -> tuple[datetime, datetime]:
    """Start and estimated end of a booking"""
    start_dt = datetime.combine(day, coerce_stored_time(start))
    return start_dt, start_dt + service_duration(service_name)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open interval intersection"""
    return a_start < b_end and a_end > b_start
