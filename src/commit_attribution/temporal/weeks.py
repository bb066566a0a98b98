"""ISO-8601 week and day bucketing for epoch-millisecond timestamps.

All bucket keys are integer epoch milliseconds at 00:00:00.000 UTC, the
shape stat records carry on the wire.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Union

MS_PER_DAY = 86_400_000
MS_PER_WEEK = 7 * MS_PER_DAY

_EPOCH = date(1970, 1, 1)
_EPOCH_DT = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _to_date(ts_ms: int) -> date:
    # Floor division keeps pre-1970 instants on the correct calendar day.
    return _EPOCH + timedelta(days=int(ts_ms) // MS_PER_DAY)


def _to_ms(day: date) -> int:
    return (day - _EPOCH).days * MS_PER_DAY


def day_start(ts_ms: int) -> int:
    """Midnight UTC of the day containing *ts_ms*."""
    return _to_ms(_to_date(ts_ms))


def week_start(ts_ms: int) -> int:
    """Monday 00:00:00.000 UTC of the ISO week containing *ts_ms*.

    ``isoweekday`` numbers Monday 1 through Sunday 7, so a Sunday steps back
    six days rather than forward one.
    """
    day = _to_date(ts_ms)
    monday = day - timedelta(days=day.isoweekday() - 1)
    return _to_ms(monday)


def week_label(week_start_ms: int) -> str:
    """ISO week label ``"YYYY-Www"`` for the week containing *week_start_ms*.

    The year is the ISO week-numbering year, i.e. the year of that week's
    Thursday, so Monday 2024-12-30 is ``"2025-W01"``.
    """
    iso_year, iso_week, _ = _to_date(week_start_ms).isocalendar()
    return f"{iso_year:04d}-W{iso_week:02d}"


def week_number(week_start_ms: int) -> int:
    return _to_date(week_start_ms).isocalendar()[1]


def parse_timestamp(value: Union[str, int, float, datetime, date]) -> int:
    """Coerce an ISO-8601 string, datetime, date or epoch ms to epoch ms.

    Naive datetimes are treated as UTC. Numeric strings are epoch ms.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        dt_value = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return (dt_value - _EPOCH_DT) // timedelta(milliseconds=1)
    if isinstance(value, date):
        return _to_ms(value)

    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Not an ISO-8601 timestamp: {value!r}") from None
    return parse_timestamp(parsed)


def format_ms(ts_ms: int) -> str:
    """``2021-12-27T00:00:00.000Z`` style rendering of epoch ms."""
    dt_value = _EPOCH_DT + timedelta(milliseconds=int(ts_ms))
    return dt_value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt_value.microsecond // 1000:03d}Z"
