"""Time-of-day parsing and shift duration arithmetic.

Every overnight-aware calculation in the engine goes through this module: a
window whose end is earlier than its start runs past midnight into the next
calendar day.
"""

from __future__ import annotations

import math
import re
from datetime import date

from shiftguard.exceptions import ValidationError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")


def parse_time_of_day(value: str) -> int:
    """Return minutes since midnight for an ``"HH:MM"`` string.

    Raises ValidationError for anything that is not a valid wall-clock time.
    """
    if not isinstance(value, str):
        raise ValidationError(f"Time of day must be a string, got {type(value).__name__}")
    m = _TIME_RE.match(value.strip())
    if m is None:
        raise ValidationError(f"Malformed time of day: {value!r} (expected HH:MM)")
    hour, minute = int(m.group(1)), int(m.group(2))
    if not 0 <= hour <= 23:
        raise ValidationError(f"Hour out of range in {value!r}: {hour}")
    if not 0 <= minute <= 59:
        raise ValidationError(f"Minute out of range in {value!r}: {minute}")
    return hour * 60 + minute


def normalize_time_of_day(value: str) -> str:
    minutes = parse_time_of_day(value)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def span_minutes(start: str, end: str) -> tuple[int, int]:
    """Return ``(start, end)`` in minutes from the start date's midnight.

    ``end`` is pushed into the next day when it falls before ``start``.
    A zero-length span is returned as is.
    """
    start_min = parse_time_of_day(start)
    end_min = parse_time_of_day(end)
    if end_min < start_min:
        end_min += MINUTES_PER_DAY
    return start_min, end_min


def duration_hours(start: str, end: str) -> float:
    """Elapsed hours between two times of day.

    ``duration_hours("22:00", "06:00") == 8.0``; equal times give ``0.0``.
    """
    start_min, end_min = span_minutes(start, end)
    return (end_min - start_min) / 60


def absolute_span(day: date, start: str, end: str) -> tuple[int, int]:
    """Like :func:`span_minutes`, offset by the ordinal of ``day``.

    Spans on different dates become comparable on one continuous timeline.
    """
    start_min, end_min = span_minutes(start, end)
    base = day.toordinal() * MINUTES_PER_DAY
    return base + start_min, base + end_min


def format_hours(hours: float, round_up: bool = False) -> str:
    """Render an hour figure to 2 decimals without a trailing ``.0`` (``46.0 -> "46"``).

    With ``round_up`` the figure is rounded towards +inf, so a value just over
    a limit never prints as equal to it (``40.004 -> "40.01"``).
    """
    if round_up:
        hours = math.ceil(round(hours * 100, 6)) / 100
    text = f"{hours:.2f}".rstrip("0").rstrip(".")
    return text or "0"
