"""Domain models for TalentMetrics."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from talentmetrics.exceptions import InvalidTimestampError


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Criticality(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Toughness(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    TOUGH = "Tough"


class Role(str, Enum):
    RECRUITER = "recruiter"
    TEAM_LEADER = "team_leader"
    ADMIN = "admin"
    CLIENT = "client"


class ScopeType(str, Enum):
    RECRUITER = "recruiter"
    TEAM = "team"
    ORGANIZATION = "organization"


class AssignmentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


# ---- boundary normalisation ----


def normalize_timestamp(value: datetime | str) -> datetime:
    """Return *value* as an aware UTC datetime.

    Strings must be ISO-8601 (``2025-03-14T09:30:00Z`` or a bare date).
    Naive datetimes are taken to be UTC already.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidTimestampError(f"Not an ISO-8601 timestamp: {value!r}") from exc
    if not isinstance(value, datetime):
        raise InvalidTimestampError(f"Unsupported timestamp type: {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def as_day(value: date | datetime | str) -> date:
    """Coerce a query day (``date`` or ``YYYY-MM-DD``) to a ``date``."""
    if isinstance(value, datetime):
        return normalize_timestamp(value).date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidTimestampError(f"Not an ISO-8601 date: {value!r}") from exc


# ---- persisted records ----


@dataclass
class Requirement:
    """An open hiring position."""

    position: str
    criticality: str
    toughness: str
    talent_advisor_id: str | None = None
    team_lead: str | None = None
    is_archived: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class RequirementAssignment:
    requirement_id: str
    recruiter_id: str
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    assigned_date: date = field(default_factory=lambda: utc_now().date())
    id: str = field(default_factory=new_id)

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE


@dataclass(frozen=True)
class ResumeSubmission:
    """One delivered resume; never edited after it is recorded."""

    requirement_id: str
    recruiter_id: str
    submitted_at: datetime
    status: str = "submitted"
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "submitted_at", normalize_timestamp(self.submitted_at))

    @property
    def submitted_on(self) -> date:
        return self.submitted_at.date()


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    role: Role
    reporting_to: str | None = None


@dataclass
class TargetMapping:
    """Quarter-scoped target a team lead sets for a team member."""

    team_lead_id: str
    team_member_id: str
    quarter: str
    year: int
    minimum_target: int
    target_achieved: int | None = 0
    incentives: int | None = 0
    closures: int | None = 0
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class DailyMetricsSnapshot:
    date: date
    scope_type: ScopeType
    scope_id: str | None
    delivered: int = 0
    defaulted: int = 0
    requirement_count: int = 0
    scope_name: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime | None = None


# ---- derived values ----


@dataclass(frozen=True)
class DailyMetrics:
    """Delivery against requirement for one scope on one day."""

    delivered: int = 0
    defaulted: int = 0
    required: int = 0
    requirement_count: int = 0

    @property
    def performance_ratio(self) -> float:
        """Delivered as a percentage of required (100 when nothing is due)."""
        if self.required <= 0:
            return 100.0
        return round(self.delivered / self.required * 100, 1)

    @property
    def overall_performance(self) -> str:
        return "G" if self.delivered >= self.required else "R"

    def to_dict(self) -> dict[str, int]:
        return {
            "delivered": self.delivered,
            "defaulted": self.defaulted,
            "required": self.required,
            "requirement_count": self.requirement_count,
        }


@dataclass
class QuarterTotals:
    quarter: str
    year: int
    minimum_target: int = 0
    target_achieved: int = 0
    incentive_earned: int = 0
    closures: int = 0

    @property
    def key(self) -> str:
        return f"{self.quarter}-{self.year}"


@dataclass
class QuarterStatusRow(QuarterTotals):
    status: str = "Pending"


@dataclass
class TargetSummary:
    current_quarter: QuarterTotals
    all_quarters: list[QuarterStatusRow] = field(default_factory=list)


@dataclass(frozen=True)
class QuarterPerformance:
    quarter: str  # e.g. "Q3 2025"
    resumes_delivered: int = 0
    closures: int = 0
