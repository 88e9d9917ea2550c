"""Tests for recruiter, team and organisation delivery metrics."""

from __future__ import annotations

from datetime import date

import pytest

from conftest import DAY, add_requirement, submit
from talentmetrics.exceptions import InvalidTimestampError, UnknownTargetPolicyError
from talentmetrics.metrics.daily import DeliveryCalculator
from talentmetrics.models import (
    AssignmentStatus,
    DailyMetrics,
    Employee,
    RequirementAssignment,
    Role,
)
from talentmetrics.policy.targets import TargetPolicy


def test_recruiter_end_to_end(store):
    x = add_requirement(store, "rec-r", "HIGH", "Tough")
    y = add_requirement(store, "rec-r", "LOW", "Easy")
    submit(store, "rec-r", x.id, "2025-03-14T09:00:00Z")
    submit(store, "rec-r", y.id, "2025-03-14T17:45:10+00:00")

    metrics = DeliveryCalculator(store).recruiter_daily_metrics("rec-r", DAY)
    assert metrics == DailyMetrics(delivered=2, defaulted=4, required=6, requirement_count=2)


def test_accepts_iso_string_day(seeded_store):
    calc = DeliveryCalculator(seeded_store)
    assert calc.recruiter_daily_metrics("rec-a", "2025-03-14") == calc.recruiter_daily_metrics(
        "rec-a", DAY
    )


def test_bad_day_string_rejected(seeded_store):
    with pytest.raises(InvalidTimestampError):
        DeliveryCalculator(seeded_store).recruiter_daily_metrics("rec-a", "14/03/2025")


def test_no_assignments_is_all_zero(store):
    metrics = DeliveryCalculator(store).recruiter_daily_metrics("nobody", DAY)
    assert metrics == DailyMetrics()


def test_submissions_matched_by_utc_date(store):
    req = add_requirement(store, "rec-r", "MEDIUM", "Medium")
    # 23:30 at UTC-5 is 04:30 the next UTC day
    submit(store, "rec-r", req.id, "2025-03-13T23:30:00-05:00")
    submit(store, "rec-r", req.id, "2025-03-14T00:00:00")
    calc = DeliveryCalculator(store)
    assert calc.recruiter_daily_metrics("rec-r", DAY).delivered == 2
    assert calc.recruiter_daily_metrics("rec-r", date(2025, 3, 13)).delivered == 0


def test_over_delivery_never_negative(store):
    req = add_requirement(store, "rec-r", "HIGH", "Tough")
    submit(store, "rec-r", req.id, "2025-03-14T10:00:00Z", count=9)
    metrics = DeliveryCalculator(store).recruiter_daily_metrics("rec-r", DAY)
    assert metrics.required == 1
    assert metrics.delivered == 9
    assert metrics.defaulted == 0


def test_inactive_and_archived_are_ignored(store):
    active = add_requirement(store, "rec-r", "LOW", "Easy")
    archived = add_requirement(store, "rec-r", "LOW", "Easy")
    store.archive_requirement(archived.id)
    store.add_assignment(
        RequirementAssignment(
            requirement_id=active.id,
            recruiter_id="rec-r",
            status=AssignmentStatus.INACTIVE,
        )
    )
    metrics = DeliveryCalculator(store).recruiter_daily_metrics("rec-r", DAY)
    assert metrics.required == 5
    assert metrics.requirement_count == 1


def test_strict_policy_propagates(store):
    add_requirement(store, "rec-r", "SEVERE", "Easy")
    with pytest.raises(UnknownTargetPolicyError):
        DeliveryCalculator(store, TargetPolicy(fallback=None)).recruiter_daily_metrics("rec-r", DAY)


def test_team_includes_lead(seeded_store):
    metrics = DeliveryCalculator(seeded_store).team_daily_metrics("lead-1", DAY)
    assert metrics == DailyMetrics(delivered=6, defaulted=6, required=12, requirement_count=4)


def test_unknown_team_lead_is_empty(seeded_store):
    assert DeliveryCalculator(seeded_store).team_daily_metrics("ghost", DAY) == DailyMetrics()


def test_clamp_at_aggregate(store):
    store.add_employee(Employee(id="lead", name="Lead", role=Role.TEAM_LEADER))
    store.add_employee(Employee(id="a", name="A", role=Role.RECRUITER, reporting_to="lead"))
    store.add_employee(Employee(id="b", name="B", role=Role.RECRUITER, reporting_to="lead"))
    ra = add_requirement(store, "a", "LOW", "Easy")  # 5
    add_requirement(store, "b", "LOW", "Easy")  # 5
    submit(store, "a", ra.id, "2025-03-14T09:00:00Z", count=10)

    calc = DeliveryCalculator(store)
    a = calc.recruiter_daily_metrics("a", DAY)
    b = calc.recruiter_daily_metrics("b", DAY)
    assert (a.defaulted, b.defaulted) == (0, 5)

    team = calc.team_daily_metrics("lead", DAY)
    assert team.required == 10
    assert team.delivered == 10
    assert team.defaulted == 0
    assert calc.org_daily_metrics(DAY).defaulted == 0


def test_org_totals(seeded_store):
    metrics = DeliveryCalculator(seeded_store).org_daily_metrics(DAY)
    assert metrics == DailyMetrics(delivered=6, defaulted=8, required=14, requirement_count=5)


def test_org_required_equals_sum_of_members(seeded_store):
    calc = DeliveryCalculator(seeded_store)
    members = seeded_store.employees_with_roles([Role.RECRUITER, Role.TEAM_LEADER])
    assert {e.id for e in members} == {"rec-a", "rec-b", "rec-c", "lead-1", "lead-2"}
    for day in (DAY, date(2025, 3, 15)):
        org = calc.org_daily_metrics(day)
        per_member = [calc.recruiter_daily_metrics(e.id, day) for e in members]
        assert org.required == sum(m.required for m in per_member)
        assert org.delivered == sum(m.delivered for m in per_member)
        assert org.defaulted == max(0, org.required - org.delivered)


def test_performance_ratio():
    assert DailyMetrics(delivered=3, required=4).performance_ratio == 75.0
    assert DailyMetrics().performance_ratio == 100.0
    assert DailyMetrics(delivered=4, required=4).overall_performance == "G"
    assert DailyMetrics(delivered=1, required=4).overall_performance == "R"
