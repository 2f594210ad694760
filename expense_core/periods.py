from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """Normalise a date, datetime or ISO string to a local calendar date.

    Date-only strings keep their literal calendar day. Timezone-aware
    datetimes are converted to local time first; naive ones are taken as
    already local. Any time-of-day component is dropped.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    raise ValueError(f"Unsupported date value: {value!r}")


def period_key(value: DateLike) -> str:
    """Return the YYYY-MM bucket key for a date."""
    d = to_date(value)
    return f"{d.year:04d}-{d.month:02d}"
