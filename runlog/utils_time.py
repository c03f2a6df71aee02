import math
from datetime import datetime, date, timedelta

METERS_PER_MILE = 1609.344
KM_TO_MILES = 0.621371

def parse_date(value: str | date | None) -> date | None:
    """Accept `YYYY-MM-DD` or a full ISO timestamp; None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    raw = str(value).strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        return None

def week_start(d: date | datetime) -> date:
    # Monday of the week containing d
    if isinstance(d, datetime):
        d = d.date()
    return d - timedelta(days=d.weekday())

def format_time_from_seconds(seconds: float | None) -> str:
    if not seconds:
        return "N/A"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"

def format_time_simple(seconds: float) -> str:
    if seconds == 0:
        return "0m"
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    if h > 0:
        return f"{h}h {m}m"
    return f"{m}m"

def format_time_from_hours(hours: float) -> str:
    h = math.floor(hours)
    m = math.floor((hours - h) * 60)
    if h > 0:
        return f"{h}h {m}m"
    return f"{m}m"

def format_duration(seconds: int) -> str:
    """Console style: `1h 2m 3s`, `2m 3s` or `3s`."""
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"

def format_date(d: date | datetime | None) -> str:
    if d is None:
        return "N/A"
    return f"{d.strftime('%b')} {d.day}, {d.year}"

def format_short_date(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"

def calculate_pace(miles: float, time_seconds: float) -> str | None:
    """Minutes per mile, seconds truncated. None when either side is zero."""
    if not miles or not time_seconds:
        return None
    seconds_per_mile = time_seconds / miles
    minutes = math.floor(seconds_per_mile / 60)
    seconds = math.floor(seconds_per_mile % 60)
    return f"{minutes}:{seconds:02d}"

def format_pace(average_speed: float | None) -> str | None:
    """Minutes per mile from meters/second, seconds rounded."""
    if not average_speed:
        return None
    pace_seconds = round(METERS_PER_MILE / average_speed)
    minutes, seconds = divmod(pace_seconds, 60)
    return f"{minutes}:{seconds:02d}"
