import logging
from datetime import date, datetime, time, timedelta

import pytest

from cleanbook.domain.scheduling.time_calculator import (
    booking_window,
    coerce_stored_time,
    intervals_overlap,
    parse_scheduled_time,
    service_duration,
)


@pytest.mark.parametrize(
    "value",
    [
        "09:00",
        "09:00:00",
        "0000-01-01T09:00:00Z",
        " 09:00 ",
        time(9, 0),
        datetime(2030, 6, 3, 9, 0),
    ],
)
def test_known_formats_normalize_to_same_time(value):
    assert parse_scheduled_time(value) == time(9, 0)


def test_seconds_are_preserved():
    assert parse_scheduled_time("14:30:15") == time(14, 30, 15)


@pytest.mark.parametrize("value", ["9am", "25:00", "", "tomorrow", None])
def test_unknown_formats_fail_loudly(value):
    with pytest.raises(ValueError):
        parse_scheduled_time(value)


def test_stored_values_fall_back_to_nine(caplog):
    with caplog.at_level(logging.WARNING):
        assert coerce_stored_time("not a time") == time(9, 0)
    assert "defaulting to 09:00" in caplog.text


def test_durations_by_service_name():
    assert service_duration("Basic House Cleaning") == timedelta(hours=2)
    assert service_duration("Deep House Cleaning") == timedelta(hours=4)
    assert service_duration("Office Cleaning") == timedelta(hours=3)
    assert service_duration("Window Washing") == timedelta(hours=2)


def test_booking_window_uses_duration():
    start, end = booking_window(date(2030, 6, 3), "0000-01-01T13:00:00Z", "Deep House Cleaning")
    assert start == datetime(2030, 6, 3, 13, 0)
    assert end == datetime(2030, 6, 3, 17, 0)


def test_adjacent_intervals_do_not_overlap():
    ten, noon, two = datetime(2030, 1, 1, 10), datetime(2030, 1, 1, 12), datetime(2030, 1, 1, 14)
    assert not intervals_overlap(ten, noon, noon, two)
    assert intervals_overlap(ten, two, noon, two)
