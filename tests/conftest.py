"""Shared test fixtures."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from talentmetrics.models import (
    Employee,
    Requirement,
    RequirementAssignment,
    ResumeSubmission,
    Role,
)
from talentmetrics.storage.memory import InMemoryStore
from talentmetrics.storage.sqlite import SqliteStore

DAY = date(2025, 3, 14)


def fixed_clock(when: datetime):
    """Return a clock callable pinned to *when*."""
    return lambda: when


def add_requirement(store, recruiter_id: str, criticality: str, toughness: str, **kw) -> Requirement:
    """Create a requirement and an active assignment for *recruiter_id*."""
    req = store.add_requirement(
        Requirement(
            position=kw.pop("position", "Backend Developer"),
            criticality=criticality,
            toughness=toughness,
            talent_advisor_id=recruiter_id,
            **kw,
        )
    )
    store.add_assignment(RequirementAssignment(requirement_id=req.id, recruiter_id=recruiter_id))
    return req


def submit(store, recruiter_id: str, requirement_id: str, when: str, count: int = 1) -> None:
    for _ in range(count):
        store.add_submission(
            ResumeSubmission(
                requirement_id=requirement_id,
                recruiter_id=recruiter_id,
                submitted_at=when,
            )
        )


def seed_org(store) -> None:
    """Two teams: lead-1 (rec-a, rec-b) and lead-2 (rec-c); one admin."""
    store.add_employee(Employee(id="admin-1", name="Asha", role=Role.ADMIN))
    store.add_employee(Employee(id="lead-1", name="Arun", role=Role.TEAM_LEADER, reporting_to="admin-1"))
    store.add_employee(Employee(id="lead-2", name="Anusha", role=Role.TEAM_LEADER, reporting_to="admin-1"))
    store.add_employee(Employee(id="rec-a", name="Mel", role=Role.RECRUITER, reporting_to="lead-1"))
    store.add_employee(Employee(id="rec-b", name="Robert", role=Role.RECRUITER, reporting_to="lead-1"))
    store.add_employee(Employee(id="rec-c", name="David", role=Role.RECRUITER, reporting_to="lead-2"))

    x = add_requirement(store, "rec-a", "HIGH", "Tough")  # 1
    y = add_requirement(store, "rec-a", "LOW", "Easy")  # 5
    z = add_requirement(store, "rec-b", "MEDIUM", "Medium")  # 3
    w = add_requirement(store, "rec-c", "MEDIUM", "Tough")  # 2
    add_requirement(store, "lead-1", "HIGH", "Easy")  # 3

    submit(store, "rec-a", x.id, "2025-03-14T09:00:00Z")
    submit(store, "rec-a", y.id, "2025-03-14T16:30:00Z")
    submit(store, "rec-a", y.id, "2025-03-13T10:00:00Z")
    submit(store, "rec-b", z.id, "2025-03-14T11:00:00Z", count=4)
    submit(store, "rec-c", w.id, "2025-03-15T08:00:00Z")


@pytest.fixture()
def memory_store():
    store = InMemoryStore()
    yield store
    store.close()


@pytest.fixture()
def sqlite_store(tmp_path):
    store = SqliteStore(tmp_path / "metrics.db")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each store implementation in turn."""
    if request.param == "memory":
        s = InMemoryStore()
    else:
        s = SqliteStore(tmp_path / "metrics.db")
    yield s
    s.close()


@pytest.fixture()
def seeded_store(store):
    seed_org(store)
    return store


@pytest.fixture()
def tmp_settings_yaml(tmp_path):
    """Write a minimal settings.yaml and return its path."""
    content = """\
storage_backend: "SQLite"
state_dir: "{state}"
database_file: "test.db"
strict_target_policy: false
fallback_resume_target: 2
fiscal_year_start_month: 4
history_days: 14
""".format(state=str(tmp_path / ".state"))
    p = tmp_path / "settings.yaml"
    p.write_text(content)
    return p
