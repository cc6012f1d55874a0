"""
ISO-8601 local date-time parsing and rendering.

Local date-times have no offset and always use the 'T' separator:
``2024-03-01T09:30``, ``2024-03-01T09:30:15``, ``2024-03-01T09:30:15.250``.
Fractions of up to nine digits are accepted; digits past microseconds are
truncated since ``datetime`` cannot hold them.
"""

from __future__ import annotations

import re
from datetime import datetime

_LOCAL_DATETIME = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?"
)


def parse_local_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 local date-time into a naive datetime.

    Raises:
        ValueError: text is not a local date-time or names an impossible instant.
    """
    m = _LOCAL_DATETIME.fullmatch(value)
    if m is None:
        raise ValueError(f"not an ISO-8601 local date-time: {value!r}")
    year, month, day, hour, minute, second, fraction = m.groups()
    micros = int((fraction or "0")[:6].ljust(6, "0"))
    return datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second or 0), micros,
    )


def format_local_datetime(value: datetime) -> str:
    """
    Render a naive datetime in the shortest ISO-8601 local form.

    Seconds are omitted when seconds and fraction are both zero; the
    fraction is written in groups of three digits.
    """
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}"
    )
    if value.second == 0 and value.microsecond == 0:
        return text
    text += f":{value.second:02d}"
    if value.microsecond:
        if value.microsecond % 1000 == 0:
            text += f".{value.microsecond // 1000:03d}"
        else:
            text += f".{value.microsecond:06d}"
    return text
