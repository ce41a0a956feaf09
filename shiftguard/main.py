"""FastAPI application — entry point for the shift scheduling service."""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import FastAPI, HTTPException

from shiftguard.config import load_policy
from shiftguard.domain.bus import EventBus
from shiftguard.domain.events import ShiftCancelled, ShiftRejected, ShiftScheduled
from shiftguard.domain.handlers import HandlerRegistry
from shiftguard.domain.models import (
    CandidateShift,
    ExistingShift,
    Guard,
    ScheduleShiftResponse,
    SchedulingDecision,
    ShiftStatus,
    Site,
    TimelineEntry,
)
from shiftguard.exceptions import HTTP_STATUS, NotFoundError, SchedulingError, ValidationError
from shiftguard.logging_utils import get_logger, log_event
from shiftguard.repos.memory import (
    GuardRepository,
    ShiftRepository,
    SiteRepository,
    TimelineRepository,
)
from shiftguard.services.decision import evaluate

app = FastAPI(title="Shift Scheduling Service")
logger = get_logger()
policy = load_policy()

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus(logger)
guard_repo = GuardRepository()
site_repo = SiteRepository()
shift_repo = ShiftRepository()
timeline_repo = TimelineRepository()

handler_registry = HandlerRegistry(
    bus=event_bus,
    guard_repo=guard_repo,
    shift_repo=shift_repo,
    timeline_repo=timeline_repo,
    logger=logger,
)

# Guard-wide rules look this many days either side of the candidate date.
_GUARD_LOOKAROUND = timedelta(days=2)


def _http_error(exc: SchedulingError) -> HTTPException:
    return HTTPException(status_code=HTTP_STATUS.get(type(exc), 400), detail=str(exc))


def _existing_shifts_for(candidate: CandidateShift) -> list[ExistingShift]:
    """Snapshot of stored shifts the enabled rules need to see."""
    day = candidate.window.date
    shifts = {s.id: s for s in shift_repo.list_for_site_date(candidate.site_id, day)}
    if policy.check_guard_double_booking or policy.check_rest_period:
        nearby = shift_repo.list_for_guard_between(
            candidate.guard_id, day - _GUARD_LOOKAROUND, day + _GUARD_LOOKAROUND
        )
        for s in nearby:
            shifts.setdefault(s.id, s)
    if candidate.replaces_shift_id:
        replaced = shift_repo.get(candidate.replaces_shift_id)
        if replaced is not None:
            shifts.setdefault(replaced.id, replaced)
    return list(shifts.values())


def _evaluate(candidate: CandidateShift) -> SchedulingDecision:
    guard = guard_repo.get(candidate.guard_id)
    if guard is None:
        raise NotFoundError(f"Guard {candidate.guard_id!r} not found")
    site = site_repo.get(candidate.site_id)
    if site is None:
        raise NotFoundError(f"Site {candidate.site_id!r} not found")
    if candidate.replaces_shift_id:
        replaced = shift_repo.get(candidate.replaces_shift_id)
        if replaced is None:
            raise NotFoundError(f"Shift {candidate.replaces_shift_id!r} not found")
        if replaced.status in (ShiftStatus.CANCELLED, ShiftStatus.COMPLETED):
            raise ValidationError(
                f"Shift {replaced.id!r} is already {replaced.status} and cannot be replaced"
            )
    return evaluate(candidate, guard, site, _existing_shifts_for(candidate), policy)


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.put("/guards/{guard_id}", response_model=Guard)
def put_guard(guard_id: str, guard: Guard) -> Guard:
    """Create or replace a guard record in the directory."""
    if guard.id != guard_id:
        raise HTTPException(status_code=422, detail="Guard id does not match the path")
    guard_repo.add(guard)
    return guard


@app.get("/guards", response_model=list[Guard])
def list_guards() -> list[Guard]:
    return guard_repo.list_all()


@app.get("/guards/{guard_id}", response_model=Guard)
def get_guard(guard_id: str) -> Guard:
    guard = guard_repo.get(guard_id)
    if guard is None:
        raise HTTPException(status_code=404, detail="Guard not found")
    return guard


@app.put("/sites/{site_id}", response_model=Site)
def put_site(site_id: str, site: Site) -> Site:
    """Create or replace a site record in the directory."""
    if site.id != site_id:
        raise HTTPException(status_code=422, detail="Site id does not match the path")
    site_repo.add(site)
    return site


@app.get("/sites", response_model=list[Site])
def list_sites() -> list[Site]:
    return site_repo.list_all()


@app.get("/sites/{site_id}", response_model=Site)
def get_site(site_id: str) -> Site:
    site = site_repo.get(site_id)
    if site is None:
        raise HTTPException(status_code=404, detail="Site not found")
    return site


@app.post("/shifts/evaluate", response_model=SchedulingDecision)
def evaluate_shift(candidate: CandidateShift) -> SchedulingDecision:
    """Check a candidate shift without storing anything."""
    log_event(
        logger,
        "INFO",
        "shift.evaluate.received",
        guard_id=candidate.guard_id,
        site_id=candidate.site_id,
        date=candidate.window.date.isoformat(),
    )
    try:
        return _evaluate(candidate)
    except SchedulingError as exc:
        raise _http_error(exc) from exc


@app.post("/shifts", response_model=ScheduleShiftResponse, status_code=201)
def schedule_shift(candidate: CandidateShift) -> ScheduleShiftResponse:
    """Evaluate a candidate and store it unless the verdict is ``reject``.

    Accepted warnings are kept on the stored shift. When the candidate
    replaces an existing shift, that shift is cancelled.
    """
    try:
        decision = _evaluate(candidate)
    except SchedulingError as exc:
        raise _http_error(exc) from exc

    if decision.is_blocking:
        event_bus.publish(
            ShiftRejected(
                guard_id=candidate.guard_id,
                site_id=candidate.site_id,
                conflicts=decision.conflicts,
            )
        )
        raise HTTPException(status_code=409, detail=decision.model_dump(mode="json"))

    if candidate.replaces_shift_id:
        event_bus.publish(
            ShiftCancelled(shift_id=candidate.replaces_shift_id, reason="rescheduled")
        )

    shift = ExistingShift(
        guard_id=candidate.guard_id,
        site_id=candidate.site_id,
        window=candidate.window,
        shift_type=candidate.shift_type,
        notes=candidate.notes,
        conflicts=decision.conflicts,
    )
    shift_repo.add(shift)
    event_bus.publish(ShiftScheduled(shift_id=shift.id, warnings=decision.warnings))
    return ScheduleShiftResponse(shift=shift, decision=decision)


@app.get("/shifts", response_model=list[ExistingShift])
def list_shifts(site_id: str | None = None, date: date | None = None) -> list[ExistingShift]:
    """Return stored shifts, optionally narrowed to a site and/or date."""
    return [
        s
        for s in shift_repo.list_all()
        if (site_id is None or s.site_id == site_id)
        and (date is None or s.window.date == date)
    ]


@app.get("/shifts/{shift_id}", response_model=ExistingShift)
def get_shift(shift_id: str) -> ExistingShift:
    shift = shift_repo.get(shift_id)
    if shift is None:
        raise HTTPException(status_code=404, detail="Shift not found")
    return shift


@app.post("/shifts/{shift_id}/cancel", response_model=ExistingShift)
def cancel_shift(shift_id: str, reason: str | None = None) -> ExistingShift:
    shift = shift_repo.get(shift_id)
    if shift is None:
        raise HTTPException(status_code=404, detail="Shift not found")
    if shift.status in (ShiftStatus.CANCELLED, ShiftStatus.COMPLETED):
        raise HTTPException(status_code=400, detail=f"Shift is already {shift.status}")
    event_bus.publish(ShiftCancelled(shift_id=shift_id, reason=reason))
    return shift_repo.get(shift_id)


@app.get("/shifts/{shift_id}/timeline", response_model=list[TimelineEntry])
def shift_timeline(shift_id: str) -> list[TimelineEntry]:
    if shift_repo.get(shift_id) is None:
        raise HTTPException(status_code=404, detail="Shift not found")
    return timeline_repo.list_for_shift(shift_id)
