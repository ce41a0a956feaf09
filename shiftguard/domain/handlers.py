"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from shiftguard.domain.bus import EventBus
from shiftguard.domain.events import ShiftCancelled, ShiftRejected, ShiftScheduled
from shiftguard.domain.models import (
    Severity,
    ShiftStatus,
    TimelineEntry,
    TimelineEntryType,
)
from shiftguard.logging_utils import get_logger, log_event
from shiftguard.repos.memory import GuardRepository, ShiftRepository, TimelineRepository


class HandlerRegistry:
    """Wires shift lifecycle handlers to the bus with access to the stores."""

    def __init__(
        self,
        bus: EventBus,
        guard_repo: GuardRepository,
        shift_repo: ShiftRepository,
        timeline_repo: TimelineRepository,
        logger: logging.Logger | None = None,
    ) -> None:
        self.bus = bus
        self.guard_repo = guard_repo
        self.shift_repo = shift_repo
        self.timeline_repo = timeline_repo
        self.logger = logger or get_logger()
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(ShiftScheduled, self.on_shift_scheduled)
        self.bus.subscribe(ShiftRejected, self.on_shift_rejected)
        self.bus.subscribe(ShiftCancelled, self.on_shift_cancelled)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_shift_scheduled(self, event: ShiftScheduled) -> None:
        stored = self.shift_repo.get(event.shift_id)
        if stored is None:
            return

        # 1. Timeline, flagging accepted warnings
        entry_type = (
            TimelineEntryType.SCHEDULED_WITH_WARNINGS
            if event.warnings
            else TimelineEntryType.SCHEDULED
        )
        self.timeline_repo.add(
            TimelineEntry(
                shift_id=stored.id,
                type=entry_type,
                payload={"warnings": [w.message for w in event.warnings]},
            )
        )

        # 2. Keep the directory's weekly total in step
        self.guard_repo.adjust_week_hours(stored.guard_id, stored.window.hours)

        log_event(
            self.logger,
            "INFO",
            "shift.scheduled",
            shift_id=stored.id,
            guard_id=stored.guard_id,
            site_id=stored.site_id,
            warnings=len(event.warnings),
        )

    def on_shift_rejected(self, event: ShiftRejected) -> None:
        log_event(
            self.logger,
            "WARN",
            "shift.rejected",
            guard_id=event.guard_id,
            site_id=event.site_id,
            conflicts=[c.kind.value for c in event.conflicts if c.severity == Severity.ERROR],
        )

    def on_shift_cancelled(self, event: ShiftCancelled) -> None:
        stored = self.shift_repo.get(event.shift_id)
        if stored is None or stored.status == ShiftStatus.CANCELLED:
            return

        self.shift_repo.update_status(stored.id, ShiftStatus.CANCELLED)
        self.guard_repo.adjust_week_hours(stored.guard_id, -stored.window.hours)
        self.timeline_repo.add(
            TimelineEntry(
                shift_id=stored.id,
                type=TimelineEntryType.CANCELLED,
                payload={"reason": event.reason},
            )
        )
        log_event(self.logger, "INFO", "shift.cancelled", shift_id=stored.id)
