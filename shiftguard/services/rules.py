"""Conflict rules evaluated against a candidate shift.

Each rule is a pure function of ``(candidate, guard, site, existing_shifts,
policy)`` returning zero or more Conflict records. Rules never read each
other's output and never mutate their inputs.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from shiftguard.config import DEFAULT_POLICY, ConflictPolicy
from shiftguard.domain.models import (
    CandidateShift,
    Conflict,
    ConflictKind,
    ExistingShift,
    Guard,
    Severity,
    ShiftStatus,
    Site,
)
from shiftguard.services.overlap import overlaps, spans_overlap, window_span
from shiftguard.services.time_math import format_hours

Rule = Callable[
    [CandidateShift, Guard, Site, Sequence[ExistingShift], ConflictPolicy],
    list[Conflict],
]


def _active_shifts(
    candidate: CandidateShift, existing_shifts: Sequence[ExistingShift]
) -> list[ExistingShift]:
    """Drop cancelled shifts and the shift being replaced, if any."""
    return [
        s
        for s in existing_shifts
        if s.status != ShiftStatus.CANCELLED and s.id != candidate.replaces_shift_id
    ]


def _replaced_shift(
    candidate: CandidateShift, existing_shifts: Sequence[ExistingShift]
) -> ExistingShift | None:
    """The live shift of the same guard that ``candidate`` replaces, if supplied."""
    if candidate.replaces_shift_id is None:
        return None
    for s in existing_shifts:
        if (
            s.id == candidate.replaces_shift_id
            and s.guard_id == candidate.guard_id
            and s.status != ShiftStatus.CANCELLED
        ):
            return s
    return None


# ---------------------------------------------------------------------------
# Core rules
# ---------------------------------------------------------------------------


def check_availability(
    candidate: CandidateShift,
    guard: Guard,
    site: Site,
    existing_shifts: Sequence[ExistingShift],
    policy: ConflictPolicy = DEFAULT_POLICY,
) -> list[Conflict]:
    day = candidate.window.date
    entry = guard.availability.get(day)
    if entry is None:
        message = f"Guard has no availability recorded for {day.isoformat()}"
    elif not entry.available:
        message = f"Guard is not available on {day.isoformat()}"
        if entry.reason:
            message += f": {entry.reason}"
    else:
        return []
    return [
        Conflict(
            kind=ConflictKind.GUARD_UNAVAILABLE,
            message=message,
            severity=Severity.ERROR,
        )
    ]


def check_overtime(
    candidate: CandidateShift,
    guard: Guard,
    site: Site,
    existing_shifts: Sequence[ExistingShift],
    policy: ConflictPolicy = DEFAULT_POLICY,
) -> list[Conflict]:
    projected = guard.current_week_hours + candidate.window.hours
    # The replaced shift is already part of the weekly total.
    replaced = _replaced_shift(candidate, existing_shifts)
    if replaced is not None:
        projected = max(0.0, projected - replaced.window.hours)
    if projected <= guard.max_hours_per_week:
        return []

    if projected > guard.max_hours_per_week + policy.overtime_error_margin_hours:
        severity = Severity.ERROR
    else:
        severity = policy.overtime_severity
    return [
        Conflict(
            kind=ConflictKind.OVERTIME_LIMIT,
            message=(
                "Shift would exceed weekly hour limit "
                f"({format_hours(projected, round_up=True)}/{format_hours(guard.max_hours_per_week)} hours)"
            ),
            severity=severity,
        )
    ]


def check_site_capacity(
    candidate: CandidateShift,
    guard: Guard,
    site: Site,
    existing_shifts: Sequence[ExistingShift],
    policy: ConflictPolicy = DEFAULT_POLICY,
) -> list[Conflict]:
    concurrent = [
        s
        for s in _active_shifts(candidate, existing_shifts)
        if s.site_id == candidate.site_id
        and s.window.date == candidate.window.date
        and overlaps(s.window, candidate.window)
    ]
    observed = len(concurrent) + 1
    if observed <= site.max_concurrent_guards:
        return []
    return [
        Conflict(
            kind=ConflictKind.SITE_OVERLAP,
            message=f"Site capacity exceeded ({observed}/{site.max_concurrent_guards} guards)",
            severity=Severity.ERROR,
        )
    ]


def check_skills(
    candidate: CandidateShift,
    guard: Guard,
    site: Site,
    existing_shifts: Sequence[ExistingShift],
    policy: ConflictPolicy = DEFAULT_POLICY,
) -> list[Conflict]:
    missing = sorted(site.required_skills - guard.skills)
    if not missing:
        return []
    return [
        Conflict(
            kind=ConflictKind.SKILL_MISMATCH,
            message=f"Guard missing required skills: {', '.join(missing)}",
            severity=policy.skill_mismatch_severity,
        )
    ]


# ---------------------------------------------------------------------------
# Opt-in rules (enabled through ConflictPolicy)
# ---------------------------------------------------------------------------


def check_guard_double_booking(
    candidate: CandidateShift,
    guard: Guard,
    site: Site,
    existing_shifts: Sequence[ExistingShift],
    policy: ConflictPolicy = DEFAULT_POLICY,
) -> list[Conflict]:
    span = window_span(candidate.window)
    clashes = [
        s
        for s in _active_shifts(candidate, existing_shifts)
        if s.guard_id == candidate.guard_id and spans_overlap(window_span(s.window), span)
    ]
    if not clashes:
        return []
    return [
        Conflict(
            kind=ConflictKind.GUARD_DOUBLE_BOOKED,
            message=f"Guard has {len(clashes)} overlapping shift(s) at this time",
            severity=Severity.ERROR,
            conflicting_shift_id=clashes[0].id,
        )
    ]


def check_rest_period(
    candidate: CandidateShift,
    guard: Guard,
    site: Site,
    existing_shifts: Sequence[ExistingShift],
    policy: ConflictPolicy = DEFAULT_POLICY,
) -> list[Conflict]:
    start, end = window_span(candidate.window)
    min_rest_minutes = policy.min_rest_hours * 60

    previous: tuple[int, ExistingShift] | None = None
    following: tuple[int, ExistingShift] | None = None
    for s in _active_shifts(candidate, existing_shifts):
        if s.guard_id != candidate.guard_id:
            continue
        s_start, s_end = window_span(s.window)
        if s_end <= start and (previous is None or s_end > previous[0]):
            previous = (s_end, s)
        elif s_start >= end and (following is None or s_start < following[0]):
            following = (s_start, s)

    conflicts: list[Conflict] = []
    if previous is not None and start - previous[0] < min_rest_minutes:
        conflicts.append(
            Conflict(
                kind=ConflictKind.REST_PERIOD,
                message=(
                    f"Insufficient rest period: only {format_hours((start - previous[0]) / 60)} "
                    f"hours between shifts (minimum {format_hours(policy.min_rest_hours)}h required)"
                ),
                severity=Severity.WARNING,
                conflicting_shift_id=previous[1].id,
            )
        )
    if following is not None and following[0] - end < min_rest_minutes:
        conflicts.append(
            Conflict(
                kind=ConflictKind.REST_PERIOD,
                message=(
                    f"Insufficient rest period: only {format_hours((following[0] - end) / 60)} "
                    f"hours before next shift (minimum {format_hours(policy.min_rest_hours)}h required)"
                ),
                severity=Severity.WARNING,
                conflicting_shift_id=following[1].id,
            )
        )
    return conflicts


# Evaluation order is fixed; it is also the order conflicts are reported in.
CORE_RULES: tuple[Rule, ...] = (
    check_availability,
    check_overtime,
    check_site_capacity,
    check_skills,
)


def rules_for(policy: ConflictPolicy) -> tuple[Rule, ...]:
    """Return the rules enabled by ``policy``, in reporting order."""
    rules = CORE_RULES
    if policy.check_guard_double_booking:
        rules += (check_guard_double_booking,)
    if policy.check_rest_period:
        rules += (check_rest_period,)
    return rules


def has_blocking_conflicts(conflicts: Sequence[Conflict]) -> bool:
    return any(c.severity == Severity.ERROR for c in conflicts)
