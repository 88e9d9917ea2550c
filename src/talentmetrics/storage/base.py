"""Protocol definitions for the repositories the metrics core reads and writes."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Protocol, runtime_checkable

from talentmetrics.models import (
    DailyMetricsSnapshot,
    Employee,
    Requirement,
    RequirementAssignment,
    ResumeSubmission,
    Role,
    ScopeType,
    TargetMapping,
)


@runtime_checkable
class RequirementRepository(Protocol):
    """Requirements and their recruiter assignments."""

    def add_requirement(self, requirement: Requirement) -> Requirement:
        ...

    def get_requirement(self, requirement_id: str) -> Requirement | None:
        ...

    def archive_requirement(self, requirement_id: str) -> Requirement:
        """Soft-delete a requirement; raises ``RecordNotFoundError`` if absent."""
        ...

    def add_assignment(self, assignment: RequirementAssignment) -> RequirementAssignment:
        ...

    def active_assignments(self, recruiter_id: str) -> list[RequirementAssignment]:
        """Return the recruiter's assignments with status ``active``."""
        ...


@runtime_checkable
class SubmissionRepository(Protocol):
    """Append-only log of delivered resumes."""

    def add_submission(self, submission: ResumeSubmission) -> ResumeSubmission:
        ...

    def count_submissions(self, recruiter_id: str, day: date) -> int:
        """Count submissions by *recruiter_id* whose UTC date equals *day*."""
        ...

    def submission_days(self, recruiter_id: str) -> list[date]:
        """Return the UTC date of every submission by *recruiter_id*."""
        ...


@runtime_checkable
class EmployeeRepository(Protocol):
    def add_employee(self, employee: Employee) -> Employee:
        ...

    def get_employee(self, employee_id: str) -> Employee | None:
        ...

    def employees_reporting_to(self, team_lead_id: str) -> list[Employee]:
        ...

    def employees_with_roles(self, roles: Iterable[Role]) -> list[Employee]:
        ...


@runtime_checkable
class TargetMappingRepository(Protocol):
    def add_target_mapping(self, mapping: TargetMapping) -> TargetMapping:
        ...

    def update_target_mapping(self, mapping: TargetMapping) -> TargetMapping:
        """Persist changed achievement fields; raises ``RecordNotFoundError``."""
        ...

    def target_mappings_for_lead(self, team_lead_id: str) -> list[TargetMapping]:
        ...

    def target_mappings_for_member(self, team_member_id: str) -> list[TargetMapping]:
        ...


@runtime_checkable
class SnapshotRepository(Protocol):
    def upsert_snapshot(
        self,
        day: date,
        scope_type: ScopeType,
        scope_id: str | None,
        delivered: int,
        defaulted: int,
        requirement_count: int,
        scope_name: str | None,
        now: datetime,
    ) -> DailyMetricsSnapshot:
        """Insert or update the single row keyed by (day, scope_type, scope_id).

        A ``None`` scope id only ever matches another ``None``.
        """
        ...

    def get_snapshot(
        self, day: date, scope_type: ScopeType, scope_id: str | None
    ) -> DailyMetricsSnapshot | None:
        ...

    def snapshots_between(
        self,
        start: date,
        end: date,
        scope_type: ScopeType,
        scope_id: str | None,
    ) -> list[DailyMetricsSnapshot]:
        """Return rows with start <= date <= end for the scope, newest first."""
        ...


@runtime_checkable
class MetricsStore(
    RequirementRepository,
    SubmissionRepository,
    EmployeeRepository,
    TargetMappingRepository,
    SnapshotRepository,
    Protocol,
):
    """Everything the metrics services need from persistence."""

    def close(self) -> None:
        ...
