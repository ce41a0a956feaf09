"""In-memory stand-ins for the guard/site directories and the shift store."""

from __future__ import annotations

from datetime import date

from shiftguard.domain.models import (
    ExistingShift,
    Guard,
    ShiftStatus,
    Site,
    TimelineEntry,
)


class GuardRepository:
    """Dict-backed guard directory, keyed by id.

    Stored guards are immutable snapshots; updates replace the record.
    """

    def __init__(self) -> None:
        self._store: dict[str, Guard] = {}

    def add(self, guard: Guard) -> None:
        self._store[guard.id] = guard

    def get(self, guard_id: str) -> Guard | None:
        return self._store.get(guard_id)

    def list_all(self) -> list[Guard]:
        return list(self._store.values())

    def adjust_week_hours(self, guard_id: str, delta: float) -> Guard | None:
        """Add ``delta`` to the guard's running weekly total (floored at 0)."""
        guard = self._store.get(guard_id)
        if guard is None:
            return None
        updated = guard.model_copy(
            update={"current_week_hours": max(0.0, guard.current_week_hours + delta)}
        )
        self._store[guard_id] = updated
        return updated


class SiteRepository:
    """Dict-backed site directory, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Site] = {}

    def add(self, site: Site) -> None:
        self._store[site.id] = site

    def get(self, site_id: str) -> Site | None:
        return self._store.get(site_id)

    def list_all(self) -> list[Site]:
        return list(self._store.values())


class ShiftRepository:
    """Dict-backed shift store, keyed by shift id."""

    def __init__(self) -> None:
        self._store: dict[str, ExistingShift] = {}

    def add(self, shift: ExistingShift) -> None:
        self._store[shift.id] = shift

    def get(self, shift_id: str) -> ExistingShift | None:
        return self._store.get(shift_id)

    def list_all(self) -> list[ExistingShift]:
        return list(self._store.values())

    def list_for_site_date(self, site_id: str, day: date) -> list[ExistingShift]:
        """All shifts at a site on a date, cancelled ones included."""
        return [
            s
            for s in self._store.values()
            if s.site_id == site_id and s.window.date == day
        ]

    def list_for_guard_between(
        self, guard_id: str, first: date, last: date
    ) -> list[ExistingShift]:
        return [
            s
            for s in self._store.values()
            if s.guard_id == guard_id and first <= s.window.date <= last
        ]

    def update_status(self, shift_id: str, status: ShiftStatus) -> ExistingShift | None:
        shift = self._store.get(shift_id)
        if shift is None:
            return None
        updated = shift.model_copy(update={"status": status})
        self._store[shift_id] = updated
        return updated


class TimelineRepository:
    """List-backed store for TimelineEntry instances."""

    def __init__(self) -> None:
        self._entries: list[TimelineEntry] = []

    def add(self, entry: TimelineEntry) -> None:
        self._entries.append(entry)

    def list_for_shift(self, shift_id: str) -> list[TimelineEntry]:
        return sorted(
            [e for e in self._entries if e.shift_id == shift_id],
            key=lambda e: e.timestamp,
        )
