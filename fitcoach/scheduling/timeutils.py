from datetime import datetime

from fitcoach.errors import ValidationError

MINUTES_PER_DAY = 24 * 60


def parse_date(date_str) -> str:
    """Validate a calendar day and return it normalized as YYYY-MM-DD."""
    if not date_str or not isinstance(date_str, str):
        raise ValidationError("Date is required")
    try:
        return datetime.strptime(date_str.strip(), '%Y-%m-%d').date().isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date: {date_str}")


def parse_time(time_str) -> str:
    """Validate a wall-clock time and return it normalized as HH:MM."""
    if not time_str or not isinstance(time_str, str):
        raise ValidationError("Time is required")
    try:
        return datetime.strptime(time_str.strip(), '%H:%M').strftime('%H:%M')
    except ValueError:
        raise ValidationError(f"Invalid time: {time_str}")


def minutes_of_day(hhmm: str) -> int:
    h, m = hhmm.split(':')
    return int(h) * 60 + int(m)


def minutes_to_str(m: int) -> str:
    h = m // 60
    mi = m % 60
    return f"{h:02d}:{mi:02d}"


def session_end(start_time: str, duration: int) -> str:
    end = minutes_of_day(start_time) + duration
    if end >= MINUTES_PER_DAY:
        raise ValidationError("Session would end at or past midnight")
    return minutes_to_str(end)
