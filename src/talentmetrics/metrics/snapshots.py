"""Daily metrics history: one snapshot per (date, scope type, scope id)."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable

from talentmetrics.exceptions import InvalidScopeError
from talentmetrics.metrics.daily import DELIVERY_ROLES, DeliveryCalculator
from talentmetrics.models import (
    DailyMetrics,
    DailyMetricsSnapshot,
    Role,
    ScopeType,
    as_day,
    utc_now,
)
from talentmetrics.storage.base import MetricsStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DAYS = 30


def _check_scope(scope_type: ScopeType | str, scope_id: str | None) -> ScopeType:
    try:
        scope_type = ScopeType(scope_type)
    except ValueError as exc:
        raise InvalidScopeError(f"Unknown scope type {scope_type!r}.") from exc
    if scope_type is ScopeType.ORGANIZATION:
        if scope_id is not None:
            raise InvalidScopeError("Organization snapshots take no scope id.")
    elif not scope_id:
        raise InvalidScopeError(f"A {scope_type.value} snapshot needs a scope id.")
    return scope_type


class SnapshotRecorder:
    """Writes and reads :class:`DailyMetricsSnapshot` rows."""

    def __init__(
        self,
        store: MetricsStore,
        calculator: DeliveryCalculator | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        history_days: int = DEFAULT_HISTORY_DAYS,
    ) -> None:
        self._store = store
        self._calculator = calculator or DeliveryCalculator(store)
        self._clock = clock
        self._history_days = history_days

    # ---- writes ----

    def upsert_snapshot(
        self,
        day: date | str,
        scope_type: ScopeType | str,
        scope_id: str | None,
        delivered: int,
        defaulted: int,
        requirement_count: int,
        scope_name: str | None = None,
    ) -> DailyMetricsSnapshot:
        """Insert the snapshot for the key, or update the existing one in place."""
        scope_type = _check_scope(scope_type, scope_id)
        snapshot = self._store.upsert_snapshot(
            as_day(day),
            scope_type,
            scope_id,
            delivered,
            defaulted,
            requirement_count,
            scope_name,
            self._clock(),
        )
        logger.info(
            "Snapshot %s/%s on %s: delivered=%d defaulted=%d requirements=%d.",
            scope_type.value,
            scope_id or "-",
            snapshot.date,
            delivered,
            defaulted,
            requirement_count,
        )
        return snapshot

    def _store_metrics(
        self,
        day: date,
        scope_type: ScopeType,
        scope_id: str | None,
        metrics: DailyMetrics,
        scope_name: str | None,
    ) -> DailyMetricsSnapshot:
        return self.upsert_snapshot(
            day,
            scope_type,
            scope_id,
            metrics.delivered,
            metrics.defaulted,
            metrics.requirement_count,
            scope_name,
        )

    def record_recruiter(self, recruiter_id: str, day: date | str) -> DailyMetricsSnapshot:
        day = as_day(day)
        employee = self._store.get_employee(recruiter_id)
        metrics = self._calculator.recruiter_daily_metrics(recruiter_id, day)
        return self._store_metrics(
            day, ScopeType.RECRUITER, recruiter_id, metrics, employee.name if employee else None
        )

    def record_team(self, team_lead_id: str, day: date | str) -> DailyMetricsSnapshot:
        day = as_day(day)
        lead = self._store.get_employee(team_lead_id)
        metrics = self._calculator.team_daily_metrics(team_lead_id, day)
        return self._store_metrics(
            day, ScopeType.TEAM, team_lead_id, metrics, lead.name if lead else None
        )

    def record_org(self, day: date | str) -> DailyMetricsSnapshot:
        day = as_day(day)
        metrics = self._calculator.org_daily_metrics(day)
        return self._store_metrics(day, ScopeType.ORGANIZATION, None, metrics, None)

    def record_all(self, day: date | str | None = None) -> list[DailyMetricsSnapshot]:
        """Snapshot every recruiter, every team and the organisation for *day*.

        Intended for a nightly job; it runs the writes one after another.
        """
        day = as_day(day) if day is not None else self._clock().date()
        written: list[DailyMetricsSnapshot] = []
        for employee in self._store.employees_with_roles(DELIVERY_ROLES):
            written.append(self.record_recruiter(employee.id, day))
        for lead in self._store.employees_with_roles([Role.TEAM_LEADER]):
            written.append(self.record_team(lead.id, day))
        written.append(self.record_org(day))
        logger.info("Recorded %d snapshot(s) for %s.", len(written), day)
        return written

    # ---- reads ----

    def get_snapshot(
        self, day: date | str, scope_type: ScopeType | str, scope_id: str | None = None
    ) -> DailyMetricsSnapshot | None:
        scope_type = _check_scope(scope_type, scope_id)
        return self._store.get_snapshot(as_day(day), scope_type, scope_id)

    def snapshots_between(
        self,
        start: date | str,
        end: date | str,
        scope_type: ScopeType | str,
        scope_id: str | None = None,
    ) -> list[DailyMetricsSnapshot]:
        """Snapshots with ``start <= date <= end`` for one scope, newest first."""
        scope_type = _check_scope(scope_type, scope_id)
        return self._store.snapshots_between(as_day(start), as_day(end), scope_type, scope_id)

    def history(
        self,
        scope_type: ScopeType | str,
        scope_id: str | None = None,
        start: date | str | None = None,
        end: date | str | None = None,
    ) -> list[DailyMetricsSnapshot]:
        """Like :meth:`snapshots_between`, defaulting to the last ``history_days``."""
        end_day = as_day(end) if end is not None else self._clock().date()
        if start is not None:
            start_day = as_day(start)
        else:
            start_day = end_day - timedelta(days=self._history_days)
        return self.snapshots_between(start_day, end_day, scope_type, scope_id)
