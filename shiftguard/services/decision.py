"""Single entry point for validating a candidate shift."""

from __future__ import annotations

from collections.abc import Sequence

from shiftguard.config import DEFAULT_POLICY, ConflictPolicy
from shiftguard.domain.models import (
    CandidateShift,
    Conflict,
    ExistingShift,
    Guard,
    SchedulingDecision,
    Site,
)
from shiftguard.exceptions import ValidationError
from shiftguard.logging_utils import get_logger, log_event
from shiftguard.services.rules import rules_for

logger = get_logger()


def evaluate(
    candidate: CandidateShift,
    guard: Guard,
    site: Site,
    existing_shifts: Sequence[ExistingShift],
    policy: ConflictPolicy | None = None,
) -> SchedulingDecision:
    """Run every enabled rule against ``candidate`` and derive a verdict.

    All rules always run; their conflicts are concatenated in rule order.
    The verdict is ``reject`` if any conflict is an error,
    ``accept_with_warnings`` if there are only warnings, else ``accept``.

    Raises ValidationError if ``guard`` or ``site`` is not the one the
    candidate names. Inputs are never modified.
    """
    if candidate.guard_id != guard.id:
        raise ValidationError(
            f"Candidate is for guard {candidate.guard_id!r} but guard {guard.id!r} was supplied"
        )
    if candidate.site_id != site.id:
        raise ValidationError(
            f"Candidate is for site {candidate.site_id!r} but site {site.id!r} was supplied"
        )

    policy = policy or DEFAULT_POLICY
    conflicts: list[Conflict] = []
    for rule in rules_for(policy):
        conflicts.extend(rule(candidate, guard, site, existing_shifts, policy))

    decision = SchedulingDecision.from_conflicts(conflicts)
    log_event(
        logger,
        "DEBUG",
        "shift.evaluated",
        guard_id=candidate.guard_id,
        site_id=candidate.site_id,
        date=candidate.window.date.isoformat(),
        verdict=decision.verdict.value,
        conflicts=[c.kind.value for c in decision.conflicts],
    )
    return decision
