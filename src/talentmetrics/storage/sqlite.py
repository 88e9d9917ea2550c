"""SQLite-backed metrics store."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Iterable

from talentmetrics.exceptions import RecordNotFoundError
from talentmetrics.models import (
    AssignmentStatus,
    DailyMetricsSnapshot,
    Employee,
    Requirement,
    RequirementAssignment,
    ResumeSubmission,
    Role,
    ScopeType,
    TargetMapping,
    new_id,
    normalize_timestamp,
)

logger = logging.getLogger(__name__)

# Organisation-scope snapshots store '' as scope_id so the UNIQUE key can
# never match a real recruiter or team id; it is mapped back to None on read.
_ORG_SCOPE_ID = ""

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS requirements (
    id                  TEXT PRIMARY KEY,
    position            TEXT NOT NULL,
    criticality         TEXT NOT NULL,
    toughness           TEXT NOT NULL DEFAULT 'Medium',
    talent_advisor_id   TEXT,
    team_lead           TEXT,
    is_archived         INTEGER NOT NULL DEFAULT 0,
    created_at          TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS requirement_assignments (
    id              TEXT PRIMARY KEY,
    requirement_id  TEXT NOT NULL REFERENCES requirements(id),
    recruiter_id    TEXT NOT NULL,
    status          TEXT NOT NULL DEFAULT 'active',
    assigned_date   TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_assignments_recruiter
    ON requirement_assignments(recruiter_id, status);

CREATE TABLE IF NOT EXISTS resume_submissions (
    id              TEXT PRIMARY KEY,
    requirement_id  TEXT NOT NULL,
    recruiter_id    TEXT NOT NULL,
    submitted_at    TEXT NOT NULL,
    submitted_on    TEXT NOT NULL,
    status          TEXT NOT NULL DEFAULT 'submitted'
);
CREATE INDEX IF NOT EXISTS idx_submissions_recruiter_day
    ON resume_submissions(recruiter_id, submitted_on);

CREATE TABLE IF NOT EXISTS employees (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    role            TEXT NOT NULL,
    reporting_to    TEXT
);

CREATE TABLE IF NOT EXISTS target_mappings (
    id              TEXT PRIMARY KEY,
    team_lead_id    TEXT NOT NULL,
    team_member_id  TEXT NOT NULL,
    quarter         TEXT NOT NULL,
    year            INTEGER NOT NULL,
    minimum_target  INTEGER NOT NULL,
    target_achieved INTEGER DEFAULT 0,
    incentives      INTEGER DEFAULT 0,
    closures        INTEGER DEFAULT 0,
    created_at      TEXT NOT NULL,
    CHECK (team_lead_id <> team_member_id)
);

CREATE TABLE IF NOT EXISTS daily_metrics_snapshots (
    id                  TEXT PRIMARY KEY,
    date                TEXT NOT NULL,
    scope_type          TEXT NOT NULL,
    scope_id            TEXT NOT NULL DEFAULT '',
    scope_name          TEXT,
    delivered           INTEGER NOT NULL DEFAULT 0,
    defaulted           INTEGER NOT NULL DEFAULT 0,
    requirement_count   INTEGER NOT NULL DEFAULT 0,
    created_at          TEXT NOT NULL,
    updated_at          TEXT,
    UNIQUE(date, scope_type, scope_id)
);
"""


def _scope_key(scope_id: str | None) -> str:
    return _ORG_SCOPE_ID if scope_id is None else scope_id


def _text(value: object) -> str:
    return str(getattr(value, "value", value))


def _parse_dt(value: str | None) -> datetime | None:
    return normalize_timestamp(value) if value else None


class SqliteStore:
    """Persistent metrics store backed by a single SQLite database file."""

    def __init__(self, db_path: str | Path) -> None:
        if str(db_path) != ":memory:":
            db_path = Path(db_path)
            db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        logger.info("Metrics database ready at %s.", db_path)

    # ---- requirements ----

    def add_requirement(self, requirement: Requirement) -> Requirement:
        self._conn.execute(
            "INSERT INTO requirements (id, position, criticality, toughness, "
            "talent_advisor_id, team_lead, is_archived, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                requirement.id,
                requirement.position,
                _text(requirement.criticality),
                _text(requirement.toughness),
                requirement.talent_advisor_id,
                requirement.team_lead,
                int(requirement.is_archived),
                normalize_timestamp(requirement.created_at).isoformat(),
            ),
        )
        self._conn.commit()
        return requirement

    def get_requirement(self, requirement_id: str) -> Requirement | None:
        cur = self._conn.execute("SELECT * FROM requirements WHERE id=?", (requirement_id,))
        row = cur.fetchone()
        if row is None:
            return None
        return Requirement(
            id=row["id"],
            position=row["position"],
            criticality=row["criticality"],
            toughness=row["toughness"],
            talent_advisor_id=row["talent_advisor_id"],
            team_lead=row["team_lead"],
            is_archived=bool(row["is_archived"]),
            created_at=normalize_timestamp(row["created_at"]),
        )

    def archive_requirement(self, requirement_id: str) -> Requirement:
        cur = self._conn.execute(
            "UPDATE requirements SET is_archived=1 WHERE id=?", (requirement_id,)
        )
        self._conn.commit()
        if cur.rowcount == 0:
            raise RecordNotFoundError(f"Requirement {requirement_id} not found.")
        return self.get_requirement(requirement_id)  # type: ignore[return-value]

    def add_assignment(self, assignment: RequirementAssignment) -> RequirementAssignment:
        self._conn.execute(
            "INSERT INTO requirement_assignments (id, requirement_id, recruiter_id, "
            "status, assigned_date) VALUES (?, ?, ?, ?, ?)",
            (
                assignment.id,
                assignment.requirement_id,
                assignment.recruiter_id,
                AssignmentStatus(assignment.status).value,
                assignment.assigned_date.isoformat(),
            ),
        )
        self._conn.commit()
        return assignment

    def active_assignments(self, recruiter_id: str) -> list[RequirementAssignment]:
        cur = self._conn.execute(
            "SELECT * FROM requirement_assignments WHERE recruiter_id=? AND status=?",
            (recruiter_id, AssignmentStatus.ACTIVE.value),
        )
        return [
            RequirementAssignment(
                id=r["id"],
                requirement_id=r["requirement_id"],
                recruiter_id=r["recruiter_id"],
                status=AssignmentStatus(r["status"]),
                assigned_date=date.fromisoformat(r["assigned_date"]),
            )
            for r in cur.fetchall()
        ]

    # ---- submissions ----

    def add_submission(self, submission: ResumeSubmission) -> ResumeSubmission:
        self._conn.execute(
            "INSERT INTO resume_submissions (id, requirement_id, recruiter_id, "
            "submitted_at, submitted_on, status) VALUES (?, ?, ?, ?, ?, ?)",
            (
                submission.id,
                submission.requirement_id,
                submission.recruiter_id,
                submission.submitted_at.isoformat(),
                submission.submitted_on.isoformat(),
                submission.status,
            ),
        )
        self._conn.commit()
        return submission

    def count_submissions(self, recruiter_id: str, day: date) -> int:
        cur = self._conn.execute(
            "SELECT COUNT(*) FROM resume_submissions WHERE recruiter_id=? AND submitted_on=?",
            (recruiter_id, day.isoformat()),
        )
        row = cur.fetchone()
        return row[0] if row else 0

    def submission_days(self, recruiter_id: str) -> list[date]:
        cur = self._conn.execute(
            "SELECT submitted_on FROM resume_submissions WHERE recruiter_id=?",
            (recruiter_id,),
        )
        return [date.fromisoformat(r["submitted_on"]) for r in cur.fetchall()]

    # ---- employees ----

    def add_employee(self, employee: Employee) -> Employee:
        self._conn.execute(
            "INSERT INTO employees (id, name, role, reporting_to) VALUES (?, ?, ?, ?)",
            (employee.id, employee.name, Role(employee.role).value, employee.reporting_to),
        )
        self._conn.commit()
        return employee

    @staticmethod
    def _employee(row: sqlite3.Row) -> Employee:
        return Employee(
            id=row["id"],
            name=row["name"],
            role=Role(row["role"]),
            reporting_to=row["reporting_to"],
        )

    def get_employee(self, employee_id: str) -> Employee | None:
        cur = self._conn.execute("SELECT * FROM employees WHERE id=?", (employee_id,))
        row = cur.fetchone()
        return self._employee(row) if row else None

    def employees_reporting_to(self, team_lead_id: str) -> list[Employee]:
        cur = self._conn.execute(
            "SELECT * FROM employees WHERE reporting_to=? ORDER BY name", (team_lead_id,)
        )
        return [self._employee(r) for r in cur.fetchall()]

    def employees_with_roles(self, roles: Iterable[Role]) -> list[Employee]:
        values = sorted({Role(r).value for r in roles})
        if not values:
            return []
        placeholders = ", ".join("?" for _ in values)
        cur = self._conn.execute(
            f"SELECT * FROM employees WHERE role IN ({placeholders}) ORDER BY name",
            values,
        )
        return [self._employee(r) for r in cur.fetchall()]

    # ---- target mappings ----

    def add_target_mapping(self, mapping: TargetMapping) -> TargetMapping:
        self._conn.execute(
            "INSERT INTO target_mappings (id, team_lead_id, team_member_id, quarter, year, "
            "minimum_target, target_achieved, incentives, closures, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                mapping.id,
                mapping.team_lead_id,
                mapping.team_member_id,
                mapping.quarter,
                mapping.year,
                mapping.minimum_target,
                mapping.target_achieved,
                mapping.incentives,
                mapping.closures,
                normalize_timestamp(mapping.created_at).isoformat(),
            ),
        )
        self._conn.commit()
        return mapping

    def update_target_mapping(self, mapping: TargetMapping) -> TargetMapping:
        cur = self._conn.execute(
            "UPDATE target_mappings SET minimum_target=?, target_achieved=?, "
            "incentives=?, closures=? WHERE id=?",
            (
                mapping.minimum_target,
                mapping.target_achieved,
                mapping.incentives,
                mapping.closures,
                mapping.id,
            ),
        )
        self._conn.commit()
        if cur.rowcount == 0:
            raise RecordNotFoundError(f"Target mapping {mapping.id} not found.")
        return mapping

    @staticmethod
    def _mapping(row: sqlite3.Row) -> TargetMapping:
        return TargetMapping(
            id=row["id"],
            team_lead_id=row["team_lead_id"],
            team_member_id=row["team_member_id"],
            quarter=row["quarter"],
            year=row["year"],
            minimum_target=row["minimum_target"],
            target_achieved=row["target_achieved"],
            incentives=row["incentives"],
            closures=row["closures"],
            created_at=normalize_timestamp(row["created_at"]),
        )

    def target_mappings_for_lead(self, team_lead_id: str) -> list[TargetMapping]:
        cur = self._conn.execute(
            "SELECT * FROM target_mappings WHERE team_lead_id=? "
            "ORDER BY year DESC, quarter DESC",
            (team_lead_id,),
        )
        return [self._mapping(r) for r in cur.fetchall()]

    def target_mappings_for_member(self, team_member_id: str) -> list[TargetMapping]:
        cur = self._conn.execute(
            "SELECT * FROM target_mappings WHERE team_member_id=? "
            "ORDER BY year DESC, quarter DESC",
            (team_member_id,),
        )
        return [self._mapping(r) for r in cur.fetchall()]

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
        stamp = normalize_timestamp(now).isoformat()
        self._conn.execute(
            "INSERT INTO daily_metrics_snapshots (id, date, scope_type, scope_id, scope_name, "
            "delivered, defaulted, requirement_count, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(date, scope_type, scope_id) DO UPDATE SET "
            "delivered=excluded.delivered, defaulted=excluded.defaulted, "
            "requirement_count=excluded.requirement_count, "
            "scope_name=COALESCE(excluded.scope_name, scope_name), "
            "updated_at=?",
            (
                new_id(),
                day.isoformat(),
                ScopeType(scope_type).value,
                _scope_key(scope_id),
                scope_name,
                delivered,
                defaulted,
                requirement_count,
                stamp,
                stamp,
            ),
        )
        self._conn.commit()
        return self.get_snapshot(day, scope_type, scope_id)  # type: ignore[return-value]

    @staticmethod
    def _snapshot(row: sqlite3.Row) -> DailyMetricsSnapshot:
        return DailyMetricsSnapshot(
            id=row["id"],
            date=date.fromisoformat(row["date"]),
            scope_type=ScopeType(row["scope_type"]),
            scope_id=row["scope_id"] or None,
            scope_name=row["scope_name"],
            delivered=row["delivered"],
            defaulted=row["defaulted"],
            requirement_count=row["requirement_count"],
            created_at=normalize_timestamp(row["created_at"]),
            updated_at=_parse_dt(row["updated_at"]),
        )

    def get_snapshot(
        self, day: date, scope_type: ScopeType, scope_id: str | None
    ) -> DailyMetricsSnapshot | None:
        cur = self._conn.execute(
            "SELECT * FROM daily_metrics_snapshots WHERE date=? AND scope_type=? AND scope_id=?",
            (day.isoformat(), ScopeType(scope_type).value, _scope_key(scope_id)),
        )
        row = cur.fetchone()
        return self._snapshot(row) if row else None

    def snapshots_between(
        self,
        start: date,
        end: date,
        scope_type: ScopeType,
        scope_id: str | None,
    ) -> list[DailyMetricsSnapshot]:
        cur = self._conn.execute(
            "SELECT * FROM daily_metrics_snapshots "
            "WHERE date >= ? AND date <= ? AND scope_type=? AND scope_id=? "
            "ORDER BY date DESC",
            (start.isoformat(), end.isoformat(), ScopeType(scope_type).value, _scope_key(scope_id)),
        )
        return [self._snapshot(r) for r in cur.fetchall()]

    def close(self) -> None:
        self._conn.close()
