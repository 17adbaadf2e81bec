from __future__ import annotations

from datetime import date, datetime

_DATE_FORMATS = ("%Y/%m/%d %H:%M", "%Y/%m/%d")


def date_key(value: date | datetime) -> str:
    """Return the local-time ``YYYY-MM-DD`` key for a date.

    Aware datetimes are converted to the machine's local zone first so a
    tournament at 00:30 never lands on the previous UTC day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def today_key(today: date | None = None) -> str:
    return date_key(today or date.today())


def parse_local_datetime(text: str) -> datetime:
    """Parse the API's ``"YYYY/MM/DD HH:mm"`` local date-time string."""
    cleaned = " ".join((text or "").split())
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized tournament date: {text!r}")
