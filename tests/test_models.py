"""Validation behaviour of the domain models."""

from datetime import date

import pydantic
import pytest

from shiftguard.domain.models import Guard, ShiftWindow
from tests.factories import make_guard, make_site, make_window


def test_window_normalizes_times():
    window = ShiftWindow(date=date(2026, 3, 2), start="7:00", end="15:30")
    assert window.start == "07:00"
    assert window.hours == 8.5
    assert not window.is_overnight


def test_overnight_window():
    window = make_window("22:00", "06:00")
    assert window.is_overnight
    assert window.hours == 8.0


@pytest.mark.parametrize("start", ["24:00", "09:75", "nine", ""])
def test_malformed_window_time_rejected(start):
    with pytest.raises(pydantic.ValidationError):
        ShiftWindow(date=date(2026, 3, 2), start=start, end="17:00")


def test_blank_skill_tag_rejected():
    with pytest.raises(pydantic.ValidationError):
        make_guard(skills={"patrol", " "})
    with pytest.raises(pydantic.ValidationError):
        make_site(required_skills={""})


def test_site_needs_room_for_a_guard():
    with pytest.raises(pydantic.ValidationError):
        make_site(max_concurrent_guards=0)


def test_negative_hours_rejected():
    with pytest.raises(pydantic.ValidationError):
        make_guard(current_week_hours=-1)


def test_snapshots_are_frozen():
    guard = make_guard()
    with pytest.raises(pydantic.ValidationError):
        guard.current_week_hours = 10


def test_skills_serialize_sorted():
    guard = make_guard(skills={"patrol", "cctv", "access_control"})
    assert guard.model_dump(mode="json")["skills"] == ["access_control", "cctv", "patrol"]


def test_availability_keys_parse_from_json():
    guard = Guard.model_validate(
        {
            "id": "guard_7",
            "max_hours_per_week": 40,
            "availability": {"2026-03-02": {"available": False, "reason": "Training"}},
        }
    )
    assert guard.availability[date(2026, 3, 2)].reason == "Training"
