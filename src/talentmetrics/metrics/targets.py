"""Quarter-bucketed target, achievement and incentive summaries."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from typing import Callable, Iterable

from talentmetrics.exceptions import SelfAssignedTargetError
from talentmetrics.models import (
    QuarterPerformance,
    QuarterStatusRow,
    QuarterTotals,
    Role,
    TargetMapping,
    TargetSummary,
    utc_now,
)
from talentmetrics.policy.quarters import (
    QUARTER_LABELS,
    QuarterStrategy,
    calendar_quarter,
    quarter_period,
    quarter_sort_key,
)
from talentmetrics.storage.base import MetricsStore

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "Completed"
STATUS_IN_PROGRESS = "In Progress"
STATUS_PENDING = "Pending"


def quarter_status(totals: QuarterTotals, current_key: str) -> str:
    """Derive the status label; the checks are order-sensitive."""
    achieved = totals.target_achieved
    minimum = totals.minimum_target
    if minimum > 0 and achieved >= minimum:
        return STATUS_COMPLETED
    if 0 < achieved < minimum:
        return STATUS_IN_PROGRESS
    if totals.key == current_key and minimum > 0:
        return STATUS_IN_PROGRESS
    return STATUS_PENDING


def group_by_quarter(mappings: Iterable[TargetMapping]) -> dict[str, QuarterTotals]:
    """Sum mappings per ``"<quarter>-<year>"`` key."""
    groups: dict[str, QuarterTotals] = {}
    for mapping in mappings:
        key = f"{mapping.quarter}-{mapping.year}"
        entry = groups.get(key)
        if entry is None:
            entry = groups[key] = QuarterTotals(quarter=mapping.quarter, year=mapping.year)
        entry.minimum_target += mapping.minimum_target or 0
        entry.target_achieved += mapping.target_achieved or 0
        entry.incentive_earned += mapping.incentives or 0
        entry.closures += mapping.closures or 0
    return groups


def summarize(
    mappings: Iterable[TargetMapping],
    today: date,
    strategy: QuarterStrategy = calendar_quarter,
) -> TargetSummary:
    """Build a :class:`TargetSummary`; the current quarter is always present."""
    current_year, current_label = quarter_period(today, strategy)
    current = QuarterTotals(quarter=current_label, year=current_year)
    groups = group_by_quarter(mappings)

    rows = [
        QuarterStatusRow(
            quarter=q.quarter,
            year=q.year,
            minimum_target=q.minimum_target,
            target_achieved=q.target_achieved,
            incentive_earned=q.incentive_earned,
            closures=q.closures,
            status=quarter_status(q, current.key),
        )
        for q in groups.values()
    ]
    rows.sort(key=lambda r: (r.year, quarter_sort_key(r.quarter)), reverse=True)

    return TargetSummary(
        current_quarter=groups.get(current.key, current),
        all_quarters=rows,
    )


class TargetSummaryService:
    """Reads and maintains target mappings for team leads and their members."""

    def __init__(
        self,
        store: MetricsStore,
        *,
        strategy: QuarterStrategy = calendar_quarter,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._strategy = strategy
        self._clock = clock

    def _today(self) -> date:
        return self._clock().date()

    # ---- summaries ----

    def get_target_summary(self, person_id: str, role: Role | str) -> TargetSummary:
        """Team leaders see the targets they set; everyone else their own."""
        if Role(role) is Role.TEAM_LEADER:
            return self.team_lead_summary(person_id)
        return self.recruiter_summary(person_id)

    def team_lead_summary(self, team_lead_id: str) -> TargetSummary:
        mappings = self._store.target_mappings_for_lead(team_lead_id)
        return summarize(mappings, self._today(), self._strategy)

    def recruiter_summary(self, recruiter_id: str) -> TargetSummary:
        mappings = self._store.target_mappings_for_member(recruiter_id)
        return summarize(mappings, self._today(), self._strategy)

    # ---- maintenance ----

    def assign_target(
        self,
        team_lead_id: str,
        team_member_id: str,
        quarter: str,
        year: int,
        minimum_target: int,
    ) -> TargetMapping:
        if team_lead_id == team_member_id:
            raise SelfAssignedTargetError(
                f"Team lead {team_lead_id} cannot set a target for themself."
            )
        if quarter not in QUARTER_LABELS:
            raise ValueError(f"quarter must be one of {QUARTER_LABELS}, got {quarter!r}")
        if minimum_target < 0:
            raise ValueError("minimum_target must be non-negative")
        mapping = self._store.add_target_mapping(
            TargetMapping(
                team_lead_id=team_lead_id,
                team_member_id=team_member_id,
                quarter=quarter,
                year=year,
                minimum_target=minimum_target,
            )
        )
        logger.info(
            "Target %d set for %s by %s in %s %d.",
            minimum_target,
            team_member_id,
            team_lead_id,
            quarter,
            year,
        )
        return mapping

    def record_achievement(
        self,
        mapping: TargetMapping,
        *,
        target_achieved: int | None = None,
        incentives: int | None = None,
        closures: int | None = None,
    ) -> TargetMapping:
        """Persist a copy of *mapping* with whichever achievement fields are given.

        *mapping* itself is left untouched; use the returned record.
        """
        changes = {
            name: value
            for name, value in (
                ("target_achieved", target_achieved),
                ("incentives", incentives),
                ("closures", closures),
            )
            if value is not None
        }
        return self._store.update_target_mapping(dataclasses.replace(mapping, **changes))

    # ---- per-quarter delivery ----

    def quarterly_performance(self, recruiter_id: str) -> list[QuarterPerformance]:
        """Resumes delivered and closures per quarter, oldest first.

        Covers the earliest year with data through the current quarter; only
        quarters with data are listed, except the current one, which always is.
        """
        current_year, current_label = quarter_period(self._today(), self._strategy)
        days = self._store.submission_days(recruiter_id)
        mappings = self._store.target_mappings_for_member(recruiter_id)

        delivered: dict[tuple[int, str], int] = {}
        for day in days:
            key = quarter_period(day, self._strategy)
            delivered[key] = delivered.get(key, 0) + 1
        closures: dict[tuple[int, str], int] = {}
        for m in mappings:
            key = (m.year, m.quarter)
            closures[key] = closures.get(key, 0) + (m.closures or 0)

        years = [current_year] + [key[0] for key in delivered] + [m.year for m in mappings]
        result: list[QuarterPerformance] = []
        for year in range(min(years), current_year + 1):
            for label in QUARTER_LABELS:
                is_current = year == current_year and label == current_label
                if year == current_year and quarter_sort_key(label) > quarter_sort_key(
                    current_label
                ):
                    break
                count = delivered.get((year, label), 0)
                closed = closures.get((year, label), 0)
                if count or closed or is_current:
                    result.append(
                        QuarterPerformance(
                            quarter=f"{label} {year}",
                            resumes_delivered=count,
                            closures=closed,
                        )
                    )
        return result
