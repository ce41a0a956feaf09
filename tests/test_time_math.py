"""Tests for time-of-day parsing and duration arithmetic."""

import pytest

from shiftguard.exceptions import ValidationError
from shiftguard.services.time_math import (
    duration_hours,
    format_hours,
    normalize_time_of_day,
    parse_time_of_day,
)


def test_parse_time_of_day():
    assert parse_time_of_day("00:00") == 0
    assert parse_time_of_day("09:30") == 570
    assert parse_time_of_day("9:30") == 570
    assert parse_time_of_day("23:59") == 23 * 60 + 59


@pytest.mark.parametrize("raw", ["24:00", "12:60", "9am", "", "12:5", "-1:00", "ab:cd", "12:00:00"])
def test_malformed_times_rejected(raw):
    with pytest.raises(ValidationError):
        parse_time_of_day(raw)


def test_non_string_rejected():
    with pytest.raises(ValidationError):
        parse_time_of_day(900)


def test_normalize_pads_hour():
    assert normalize_time_of_day("7:05") == "07:05"


def test_day_shift_duration():
    assert duration_hours("09:00", "17:00") == 8.0
    assert duration_hours("09:15", "10:00") == 0.75


@pytest.mark.parametrize("t", ["00:00", "08:30", "23:59"])
def test_zero_length_is_zero_not_24(t):
    assert duration_hours(t, t) == 0


@pytest.mark.parametrize(
    "start,end,expected",
    [("22:00", "06:00", 8.0), ("23:30", "00:15", 0.75), ("18:00", "17:00", 23.0)],
)
def test_overnight_wraps_past_midnight(start, end, expected):
    assert duration_hours(start, end) == expected


def test_duration_propagates_validation_error():
    with pytest.raises(ValidationError):
        duration_hours("09:00", "25:00")


def test_format_hours():
    assert format_hours(46.0) == "46"
    assert format_hours(42.5) == "42.5"
    assert format_hours(0) == "0"


def test_format_hours_round_up():
    assert format_hours(40.004, round_up=True) == "40.01"
    assert format_hours(46.0, round_up=True) == "46"
    assert format_hours(42.5, round_up=True) == "42.5"
