"""Tests for the shift lifecycle handlers wired to the event bus."""

from __future__ import annotations

import pytest

from shiftguard.domain.bus import EventBus
from shiftguard.domain.events import ShiftCancelled, ShiftRejected, ShiftScheduled
from shiftguard.domain.handlers import HandlerRegistry
from shiftguard.domain.models import (
    Conflict,
    ConflictKind,
    Severity,
    ShiftStatus,
    TimelineEntryType,
)
from shiftguard.repos.memory import GuardRepository, ShiftRepository, TimelineRepository
from tests.factories import make_guard, make_shift


@pytest.fixture()
def env():
    """Fresh bus + repos + registry for each test."""
    bus = EventBus()
    guard_repo = GuardRepository()
    shift_repo = ShiftRepository()
    timeline_repo = TimelineRepository()

    registry = HandlerRegistry(
        bus=bus,
        guard_repo=guard_repo,
        shift_repo=shift_repo,
        timeline_repo=timeline_repo,
    )

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.guard_repo = guard_repo
    e.shift_repo = shift_repo
    e.timeline_repo = timeline_repo
    e.registry = registry
    return e


def _warning() -> Conflict:
    return Conflict(
        kind=ConflictKind.SKILL_MISMATCH,
        message="Guard missing required skills: cctv",
        severity=Severity.WARNING,
    )


def test_scheduled_adds_hours_and_timeline(env):
    env.guard_repo.add(make_guard(current_week_hours=24))
    shift = make_shift("22:00", "06:00", guard_id="guard_1")
    env.shift_repo.add(shift)

    env.bus.publish(ShiftScheduled(shift_id=shift.id))

    assert env.guard_repo.get("guard_1").current_week_hours == 32
    entries = env.timeline_repo.list_for_shift(shift.id)
    assert [e.type for e in entries] == [TimelineEntryType.SCHEDULED]


def test_scheduled_with_warnings_is_flagged(env):
    env.guard_repo.add(make_guard())
    shift = make_shift(guard_id="guard_1")
    env.shift_repo.add(shift)

    env.bus.publish(ShiftScheduled(shift_id=shift.id, warnings=[_warning()]))

    entry = env.timeline_repo.list_for_shift(shift.id)[0]
    assert entry.type == TimelineEntryType.SCHEDULED_WITH_WARNINGS
    assert entry.payload["warnings"] == ["Guard missing required skills: cctv"]


def test_unknown_shift_is_ignored(env):
    env.bus.publish(ShiftScheduled(shift_id="missing"))
    env.bus.publish(ShiftCancelled(shift_id="missing"))
    assert env.timeline_repo.list_for_shift("missing") == []


def test_cancel_marks_shift_and_returns_hours(env):
    env.guard_repo.add(make_guard(current_week_hours=32))
    shift = make_shift(guard_id="guard_1")
    env.shift_repo.add(shift)

    env.bus.publish(ShiftCancelled(shift_id=shift.id, reason="Client request"))

    assert env.shift_repo.get(shift.id).status == ShiftStatus.CANCELLED
    assert env.guard_repo.get("guard_1").current_week_hours == 24
    entry = env.timeline_repo.list_for_shift(shift.id)[-1]
    assert entry.type == TimelineEntryType.CANCELLED
    assert entry.payload == {"reason": "Client request"}


def test_cancel_twice_only_counts_once(env):
    env.guard_repo.add(make_guard(current_week_hours=32))
    shift = make_shift(guard_id="guard_1")
    env.shift_repo.add(shift)

    env.bus.publish(ShiftCancelled(shift_id=shift.id))
    env.bus.publish(ShiftCancelled(shift_id=shift.id))

    assert env.guard_repo.get("guard_1").current_week_hours == 24
    assert len(env.timeline_repo.list_for_shift(shift.id)) == 1


def test_week_hours_never_negative(env):
    env.guard_repo.add(make_guard(current_week_hours=2))
    shift = make_shift(guard_id="guard_1")
    env.shift_repo.add(shift)

    env.bus.publish(ShiftCancelled(shift_id=shift.id))

    assert env.guard_repo.get("guard_1").current_week_hours == 0


def test_rejection_leaves_stores_untouched(env):
    env.guard_repo.add(make_guard(current_week_hours=24))
    error = Conflict(kind=ConflictKind.SITE_OVERLAP, message="full", severity=Severity.ERROR)

    env.bus.publish(ShiftRejected(guard_id="guard_1", site_id="site_1", conflicts=[error]))

    assert env.guard_repo.get("guard_1").current_week_hours == 24
    assert env.shift_repo.list_all() == []


def test_bus_delivers_in_subscription_order():
    bus = EventBus()
    seen: list[str] = []
    bus.subscribe(ShiftCancelled, lambda e: seen.append("first"))
    bus.subscribe(ShiftCancelled, lambda e: seen.append("second"))
    bus.publish(ShiftCancelled(shift_id="s1"))
    bus.publish(ShiftScheduled(shift_id="s1"))
    assert seen == ["first", "second"]
