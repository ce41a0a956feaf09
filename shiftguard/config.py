"""Conflict policy: the tunable thresholds and toggles used by the rules."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from shiftguard.domain.models import Severity

ENV_PREFIX = "SHIFTGUARD_"


class ConflictPolicy(BaseModel):
    # Projected hours beyond max + margin escalate overtime to an error.
    overtime_error_margin_hours: float = Field(8, ge=0)
    overtime_severity: Severity = Severity.WARNING
    skill_mismatch_severity: Severity = Severity.WARNING
    check_guard_double_booking: bool = False
    check_rest_period: bool = False
    min_rest_hours: float = Field(8, ge=0, le=24)


DEFAULT_POLICY = ConflictPolicy()


def load_policy(environ: Mapping[str, str] | None = None) -> ConflictPolicy:
    """Build a ConflictPolicy from ``SHIFTGUARD_*`` environment variables.

    ``SHIFTGUARD_MIN_REST_HOURS=10`` sets ``min_rest_hours``; unset fields keep
    their defaults. Bad values raise pydantic's ValidationError.
    """
    env = os.environ if environ is None else environ
    overrides = {}
    for name in ConflictPolicy.model_fields:
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is not None and raw.strip():
            overrides[name] = raw.strip()
    return ConflictPolicy.model_validate(overrides)
