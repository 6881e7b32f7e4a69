"""
Time arithmetic for bookings: duration parsing, start-instant parsing,
half-open time windows and overlap detection.
"""
import math
import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, NamedTuple, Optional, Union

from spa_booking.core.errors import ValidationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS_PER_MINUTE = 60_000

_DIGITS = re.compile(r"\d+")


class TimeWindow(NamedTuple):
    """Half-open interval [start_ms, end_ms) in epoch milliseconds."""
    start_ms: int
    end_ms: Union[int, float]


def parse_duration_minutes(value) -> Union[int, float]:
    """
    Minutes from a loosely typed duration value.

    Numbers are taken as minutes as-is. Strings yield their first run of
    digits ("90 min" -> 90). Anything else, or a string without digits,
    yields 0, which callers must treat as "unparsable".
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        match = _DIGITS.search(value)
        if match:
            return int(match.group(0))
    return 0


def parse_start_instant(value: Optional[str], default_tz: tzinfo) -> datetime:
    """
    Parses an ISO-8601 date/time into an aware datetime.
    A trailing 'Z' means UTC; values without an offset are read in `default_tz`.
    Raises ValidationError when the value cannot be parsed.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid datetime: {value!r}")

    text = value.strip()
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid datetime: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)

    # Offsets near year 1 or 9999 can push the instant out of datetime range
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        raise ValidationError(f"Datetime out of range: {value!r}")


def is_usable_duration(minutes) -> bool:
    """Positive and finite minutes."""
    return math.isfinite(minutes) and minutes > 0


def to_canonical(dt: datetime) -> str:
    """UTC with millisecond precision, e.g. '2024-01-01T10:00:00.000Z'."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis(dt: datetime) -> int:
    return (dt - EPOCH) // timedelta(milliseconds=1)


def window_of(start: datetime, duration_raw) -> TimeWindow:
    start_ms = epoch_millis(start)
    return TimeWindow(start_ms, start_ms + parse_duration_minutes(duration_raw) * MS_PER_MINUTE)


def windows_overlap(a: TimeWindow, b: TimeWindow) -> bool:
    # Touching endpoints do not overlap, so back-to-back bookings are fine
    return a.start_ms < b.end_ms and a.end_ms > b.start_ms


def has_conflict(existing: Iterable[TimeWindow], candidate: TimeWindow) -> bool:
    return any(windows_overlap(candidate, window) for window in existing)
