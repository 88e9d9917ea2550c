"""Dict-backed store for tests and demos."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from typing import Iterable

from talentmetrics.exceptions import RecordNotFoundError
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

logger = logging.getLogger(__name__)

_SnapshotKey = tuple[date, ScopeType, "str | None"]


class InMemoryStore:
    """Implements :class:`~talentmetrics.storage.base.MetricsStore` on plain dicts."""

    def __init__(self) -> None:
        self._requirements: dict[str, Requirement] = {}
        self._assignments: dict[str, RequirementAssignment] = {}
        self._submissions: list[ResumeSubmission] = []
        self._employees: dict[str, Employee] = {}
        self._target_mappings: dict[str, TargetMapping] = {}
        self._snapshots: dict[_SnapshotKey, DailyMetricsSnapshot] = {}

    # ---- requirements ----

    def add_requirement(self, requirement: Requirement) -> Requirement:
        self._requirements[requirement.id] = requirement
        return requirement

    def get_requirement(self, requirement_id: str) -> Requirement | None:
        return self._requirements.get(requirement_id)

    def archive_requirement(self, requirement_id: str) -> Requirement:
        requirement = self._requirements.get(requirement_id)
        if requirement is None:
            raise RecordNotFoundError(f"Requirement {requirement_id} not found.")
        requirement.is_archived = True
        return requirement

    def add_assignment(self, assignment: RequirementAssignment) -> RequirementAssignment:
        self._assignments[assignment.id] = assignment
        return assignment

    def active_assignments(self, recruiter_id: str) -> list[RequirementAssignment]:
        return [
            a
            for a in self._assignments.values()
            if a.recruiter_id == recruiter_id and a.is_active
        ]

    # ---- submissions ----

    def add_submission(self, submission: ResumeSubmission) -> ResumeSubmission:
        self._submissions.append(submission)
        return submission

    def count_submissions(self, recruiter_id: str, day: date) -> int:
        return sum(
            1
            for s in self._submissions
            if s.recruiter_id == recruiter_id and s.submitted_on == day
        )

    def submission_days(self, recruiter_id: str) -> list[date]:
        return [s.submitted_on for s in self._submissions if s.recruiter_id == recruiter_id]

    # ---- employees ----

    def add_employee(self, employee: Employee) -> Employee:
        self._employees[employee.id] = employee
        return employee

    def get_employee(self, employee_id: str) -> Employee | None:
        return self._employees.get(employee_id)

    def employees_reporting_to(self, team_lead_id: str) -> list[Employee]:
        return [e for e in self._employees.values() if e.reporting_to == team_lead_id]

    def employees_with_roles(self, roles: Iterable[Role]) -> list[Employee]:
        wanted = set(roles)
        return [e for e in self._employees.values() if e.role in wanted]

    # ---- target mappings ----

    def add_target_mapping(self, mapping: TargetMapping) -> TargetMapping:
        self._target_mappings[mapping.id] = mapping
        return mapping

    def update_target_mapping(self, mapping: TargetMapping) -> TargetMapping:
        if mapping.id not in self._target_mappings:
            raise RecordNotFoundError(f"Target mapping {mapping.id} not found.")
        self._target_mappings[mapping.id] = mapping
        return mapping

    def target_mappings_for_lead(self, team_lead_id: str) -> list[TargetMapping]:
        return [m for m in self._target_mappings.values() if m.team_lead_id == team_lead_id]

    def target_mappings_for_member(self, team_member_id: str) -> list[TargetMapping]:
        return [
            m for m in self._target_mappings.values() if m.team_member_id == team_member_id
        ]

    # ---- snapshots ----

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
        key = (day, scope_type, scope_id)
        existing = self._snapshots.get(key)
        if existing is not None:
            updated = dataclasses.replace(
                existing,
                delivered=delivered,
                defaulted=defaulted,
                requirement_count=requirement_count,
                scope_name=scope_name if scope_name is not None else existing.scope_name,
                updated_at=now,
            )
        else:
            updated = DailyMetricsSnapshot(
                date=day,
                scope_type=scope_type,
                scope_id=scope_id,
                delivered=delivered,
                defaulted=defaulted,
                requirement_count=requirement_count,
                scope_name=scope_name,
                created_at=now,
            )
        self._snapshots[key] = updated
        return updated

    def get_snapshot(
        self, day: date, scope_type: ScopeType, scope_id: str | None
    ) -> DailyMetricsSnapshot | None:
        return self._snapshots.get((day, scope_type, scope_id))

    def snapshots_between(
        self,
        start: date,
        end: date,
        scope_type: ScopeType,
        scope_id: str | None,
    ) -> list[DailyMetricsSnapshot]:
        rows = [
            s
            for (day, stype, sid), s in self._snapshots.items()
            if start <= day <= end and stype == scope_type and sid == scope_id
        ]
        rows.sort(key=lambda s: s.date, reverse=True)
        return rows

    def close(self) -> None:
        logger.debug("In-memory store closed.")
