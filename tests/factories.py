"""Builders for guards, sites and shifts used across the test suite."""

from __future__ import annotations

from datetime import date

from shiftguard.domain.models import (
    AvailabilityEntry,
    CandidateShift,
    ExistingShift,
    Guard,
    ShiftWindow,
    Site,
)

DAY = date(2026, 3, 2)


def make_window(start: str = "09:00", end: str = "17:00", day: date = DAY) -> ShiftWindow:
    return ShiftWindow(date=day, start=start, end=end)


def make_guard(**overrides) -> Guard:
    defaults = dict(
        id="guard_1",
        name="John Smith",
        skills={"patrol", "access_control"},
        max_hours_per_week=40,
        current_week_hours=24,
        availability={DAY: AvailabilityEntry(available=True)},
    )
    defaults.update(overrides)
    return Guard(**defaults)


def make_site(**overrides) -> Site:
    defaults = dict(
        id="site_1",
        name="Central Office",
        required_skills={"patrol"},
        max_concurrent_guards=2,
    )
    defaults.update(overrides)
    return Site(**defaults)


def make_candidate(start: str = "09:00", end: str = "17:00", **overrides) -> CandidateShift:
    defaults = dict(guard_id="guard_1", site_id="site_1", window=make_window(start, end))
    defaults.update(overrides)
    return CandidateShift(**defaults)


def make_shift(start: str = "09:00", end: str = "17:00", **overrides) -> ExistingShift:
    defaults = dict(guard_id="guard_2", site_id="site_1", window=make_window(start, end))
    defaults.update(overrides)
    return ExistingShift(**defaults)


