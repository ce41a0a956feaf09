"""Domain events emitted by the scheduling service."""

from __future__ import annotations

from pydantic import BaseModel

from shiftguard.domain.models import Conflict


class ShiftScheduled(BaseModel):
    """Fired when an accepted candidate has been persisted."""

    shift_id: str
    warnings: list[Conflict] = []


class ShiftRejected(BaseModel):
    """Fired when a candidate is refused because of error-level conflicts."""

    guard_id: str
    site_id: str
    conflicts: list[Conflict]


class ShiftCancelled(BaseModel):
    """Fired when a stored shift is cancelled."""

    shift_id: str
    reason: str | None = None
