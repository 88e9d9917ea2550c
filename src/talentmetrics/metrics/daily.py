"""Daily delivery vs. requirement, per recruiter and rolled up the hierarchy.

Per-member results are summed first and ``defaulted`` is clamped once on
the totals, so one recruiter's over-delivery offsets another's shortfall.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from talentmetrics.models import DailyMetrics, Role, as_day
from talentmetrics.policy.targets import TargetPolicy
from talentmetrics.storage.base import MetricsStore

logger = logging.getLogger(__name__)

DELIVERY_ROLES = (Role.RECRUITER, Role.TEAM_LEADER)


def _defaulted(required: int, delivered: int) -> int:
    return max(0, required - delivered)


class DeliveryCalculator:
    """Computes :class:`DailyMetrics` from the current persisted state.

    ``requirement_count`` only counts active assignments whose requirement
    exists and is not archived, the same set that contributes to ``required``.
    """

    def __init__(self, store: MetricsStore, policy: TargetPolicy | None = None) -> None:
        self._store = store
        self._policy = policy or TargetPolicy()

    def recruiter_daily_metrics(self, recruiter_id: str, day: date | str) -> DailyMetrics:
        day = as_day(day)
        required = 0
        requirement_count = 0
        for assignment in self._store.active_assignments(recruiter_id):
            requirement = self._store.get_requirement(assignment.requirement_id)
            if requirement is None or requirement.is_archived:
                continue
            required += self._policy.required_resumes(
                requirement.criticality, requirement.toughness
            )
            requirement_count += 1

        delivered = self._store.count_submissions(recruiter_id, day)
        return DailyMetrics(
            delivered=delivered,
            defaulted=_defaulted(required, delivered),
            required=required,
            requirement_count=requirement_count,
        )

    def team_daily_metrics(self, team_lead_id: str, day: date | str) -> DailyMetrics:
        """Sum over everyone reporting to *team_lead_id*, plus the lead."""
        member_ids = [e.id for e in self._store.employees_reporting_to(team_lead_id)]
        if team_lead_id not in member_ids:
            member_ids.append(team_lead_id)
        return self._aggregate(member_ids, as_day(day))

    def org_daily_metrics(self, day: date | str) -> DailyMetrics:
        members = self._store.employees_with_roles(DELIVERY_ROLES)
        return self._aggregate((e.id for e in members), as_day(day))

    def _aggregate(self, member_ids: Iterable[str], day: date) -> DailyMetrics:
        delivered = required = requirement_count = 0
        members = 0
        for member_id in member_ids:
            m = self.recruiter_daily_metrics(member_id, day)
            logger.debug("Member %s on %s: %s", member_id, day, m)
            delivered += m.delivered
            required += m.required
            requirement_count += m.requirement_count
            members += 1
        logger.debug("Aggregated %d member(s) for %s.", members, day)
        return DailyMetrics(
            delivered=delivered,
            defaulted=_defaulted(required, delivered),
            required=required,
            requirement_count=requirement_count,
        )
