import pytest
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from spa_booking.core.errors import ValidationError
from spa_booking.services.scheduling import (
    TimeWindow,
    has_conflict,
    parse_duration_minutes,
    parse_start_instant,
    to_canonical,
    window_of,
    windows_overlap,
)

UTC = ZoneInfo("UTC")


@pytest.mark.parametrize("value, expected", [
    (60, 60),
    (45.5, 45.5),
    ("60min", 60),
    ("90 min", 90),
    ("Full body - 120 minutes", 120),
    ("1h30", 1),
    ("abc", 0),
    ("", 0),
    (None, 0),
    (True, 0),
    (["60"], 0),
])
def test_parse_duration_minutes(value, expected):
    assert parse_duration_minutes(value) == expected


def test_numbers_are_not_validated_by_the_parser():
    assert parse_duration_minutes(-30) == -30
    assert parse_duration_minutes(0) == 0


def test_parse_start_instant_utc_suffix():
    dt = parse_start_instant("2024-01-01T10:00:00Z", UTC)
    assert dt == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_parse_start_instant_keeps_explicit_offset():
    dt = parse_start_instant("2024-01-01T12:00:00+02:00", UTC)
    assert to_canonical(dt) == "2024-01-01T10:00:00.000Z"


def test_parse_start_instant_reads_naive_values_in_business_timezone():
    dt = parse_start_instant("2024-07-01T10:00:00", ZoneInfo("Europe/Prague"))
    assert to_canonical(dt) == "2024-07-01T08:00:00.000Z"


@pytest.mark.parametrize("value", [
    "tomorrow", "2024-13-01T10:00:00Z", "", "   ", None,
    "0001-01-01T00:00:00+01:00", "9999-12-31T23:30:00-01:00",
])
def test_parse_start_instant_rejects_garbage(value):
    with pytest.raises(ValidationError):
        parse_start_instant(value, UTC)


def test_to_canonical_has_millisecond_precision():
    dt = datetime(2024, 1, 1, 10, 0, 5, 123456, tzinfo=timezone.utc)
    assert to_canonical(dt) == "2024-01-01T10:00:05.123Z"


def test_window_of_adds_parsed_minutes():
    start = parse_start_instant("2024-01-01T10:00:00Z", UTC)
    window = window_of(start, "60min")
    assert window.end_ms - window.start_ms == 60 * 60_000
    assert window.start_ms == 1704103200000


def test_overlapping_windows_conflict():
    existing = TimeWindow(0, 60)
    assert windows_overlap(TimeWindow(30, 90), existing)
    assert windows_overlap(TimeWindow(-30, 10), existing)
    assert windows_overlap(TimeWindow(10, 20), existing)
    assert windows_overlap(TimeWindow(-10, 100), existing)


def test_touching_windows_do_not_conflict():
    existing = TimeWindow(0, 60)
    assert not windows_overlap(TimeWindow(60, 90), existing)
    assert not windows_overlap(TimeWindow(-30, 0), existing)


def test_has_conflict_checks_every_existing_window():
    existing = [TimeWindow(0, 60), TimeWindow(120, 180)]
    assert has_conflict(existing, TimeWindow(150, 200))
    assert not has_conflict(existing, TimeWindow(60, 120))
    assert not has_conflict([], TimeWindow(0, 60))
