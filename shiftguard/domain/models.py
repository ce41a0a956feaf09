"""Domain models for the shift-scheduling conflict engine."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from shiftguard.services.time_math import duration_hours, normalize_time_of_day


class SitePriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ShiftStatus(StrEnum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ShiftType(StrEnum):
    REGULAR = "regular"
    OVERTIME = "overtime"
    EMERGENCY = "emergency"
    REPLACEMENT = "replacement"


class ConflictKind(StrEnum):
    GUARD_UNAVAILABLE = "guard_unavailable"
    OVERTIME_LIMIT = "overtime_limit"
    SITE_OVERLAP = "site_overlap"
    SKILL_MISMATCH = "skill_mismatch"
    GUARD_DOUBLE_BOOKED = "guard_double_booked"
    REST_PERIOD = "rest_period"


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


class Verdict(StrEnum):
    ACCEPT = "accept"
    ACCEPT_WITH_WARNINGS = "accept_with_warnings"
    REJECT = "reject"


class TimelineEntryType(StrEnum):
    SCHEDULED = "scheduled"
    SCHEDULED_WITH_WARNINGS = "scheduled_with_warnings"
    CANCELLED = "cancelled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


CalendarDate = date


def _check_skill_tags(tags: frozenset[str]) -> frozenset[str]:
    for tag in tags:
        if not tag.strip():
            raise ValueError("Skill tags must be non-blank")
    return tags


# ---------------------------------------------------------------------------
# Time windows
# ---------------------------------------------------------------------------


class ShiftWindow(BaseModel):
    """A shift's time span on a calendar date.

    ``end`` earlier than ``start`` means the shift runs past midnight into
    ``date + 1``.
    """

    model_config = ConfigDict(frozen=True)

    date: CalendarDate
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _valid_time_of_day(cls, value: str) -> str:
        return normalize_time_of_day(value)

    @property
    def is_overnight(self) -> bool:
        return self.end < self.start

    @property
    def hours(self) -> float:
        return duration_hours(self.start, self.end)


# ---------------------------------------------------------------------------
# Directory snapshots (read-only to the engine)
# ---------------------------------------------------------------------------


class AvailabilityEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    available: bool
    window: ShiftWindow | None = None
    reason: str | None = None


class Guard(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str | None = None
    skills: frozenset[str] = frozenset()
    max_hours_per_week: float = Field(ge=0)
    current_week_hours: float = Field(default=0, ge=0)
    availability: dict[CalendarDate, AvailabilityEntry] = Field(default_factory=dict)

    @field_validator("skills")
    @classmethod
    def _non_blank_skills(cls, value: frozenset[str]) -> frozenset[str]:
        return _check_skill_tags(value)

    @field_serializer("skills")
    def _sorted_skills(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class Site(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str | None = None
    required_skills: frozenset[str] = frozenset()
    max_concurrent_guards: int = Field(ge=1)
    priority: SitePriority = SitePriority.MEDIUM

    @field_validator("required_skills")
    @classmethod
    def _non_blank_skills(cls, value: frozenset[str]) -> frozenset[str]:
        return _check_skill_tags(value)

    @field_serializer("required_skills")
    def _sorted_skills(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class Conflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ConflictKind
    message: str
    severity: Severity
    conflicting_shift_id: str | None = None


class ExistingShift(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    guard_id: str
    site_id: str
    window: ShiftWindow
    status: ShiftStatus = ShiftStatus.SCHEDULED
    shift_type: ShiftType = ShiftType.REGULAR
    notes: str | None = None
    conflicts: list[Conflict] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Evaluation input / output
# ---------------------------------------------------------------------------


class CandidateShift(BaseModel):
    guard_id: str = Field(min_length=1)
    site_id: str = Field(min_length=1)
    window: ShiftWindow
    shift_type: ShiftType = ShiftType.REGULAR
    replaces_shift_id: str | None = None
    notes: str | None = None


class SchedulingDecision(BaseModel):
    conflicts: list[Conflict] = Field(default_factory=list)
    verdict: Verdict

    @classmethod
    def from_conflicts(cls, conflicts: list[Conflict]) -> SchedulingDecision:
        if any(c.severity == Severity.ERROR for c in conflicts):
            verdict = Verdict.REJECT
        elif conflicts:
            verdict = Verdict.ACCEPT_WITH_WARNINGS
        else:
            verdict = Verdict.ACCEPT
        return cls(conflicts=list(conflicts), verdict=verdict)

    @property
    def errors(self) -> list[Conflict]:
        return [c for c in self.conflicts if c.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Conflict]:
        return [c for c in self.conflicts if c.severity == Severity.WARNING]

    @property
    def is_blocking(self) -> bool:
        return self.verdict == Verdict.REJECT


class TimelineEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    shift_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    type: TimelineEntryType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class ScheduleShiftResponse(BaseModel):
    shift: ExistingShift
    decision: SchedulingDecision

