"""Month-to-quarter label strategies."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from talentmetrics.settings import AppSettings

QUARTER_LABELS = ("Q1", "Q2", "Q3", "Q4")

# month (1-12) -> "Q1".."Q4"
QuarterStrategy = Callable[[int], str]


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")


def calendar_quarter(month: int) -> str:
    """Jan-Mar is Q1, Apr-Jun Q2, Jul-Sep Q3, Oct-Dec Q4."""
    _check_month(month)
    return QUARTER_LABELS[(month - 1) // 3]


calendar_quarter.start_month = 1


def fiscal_quarter_strategy(start_month: int) -> QuarterStrategy:
    """Build a strategy where Q1 begins in *start_month*."""
    _check_month(start_month)
    if start_month == 1:
        return calendar_quarter

    def fiscal_quarter(month: int) -> str:
        _check_month(month)
        return QUARTER_LABELS[((month - start_month) % 12) // 3]

    fiscal_quarter.start_month = start_month
    return fiscal_quarter


def quarter_period(day: date, strategy: QuarterStrategy = calendar_quarter) -> tuple[int, str]:
    """Return ``(year, label)`` for *day* under *strategy*.

    A fiscal year is named by the calendar year it starts in, so with an
    April start February 2025 is ``(2024, "Q4")``. Strategies without a
    ``start_month`` attribute are treated as calendar-aligned.
    """
    start = getattr(strategy, "start_month", 1)
    year = day.year if day.month >= start else day.year - 1
    return year, strategy(day.month)


def quarter_months(label: str, strategy: QuarterStrategy = calendar_quarter) -> list[int]:
    """Return the months (1-12) that *strategy* maps to *label*."""
    return [m for m in range(1, 13) if strategy(m) == label]


def quarter_sort_key(label: str) -> int:
    try:
        return QUARTER_LABELS.index(label)
    except ValueError:
        return -1


def strategy_from_settings(settings: "AppSettings") -> QuarterStrategy:
    return fiscal_quarter_strategy(settings.fiscal_year_start_month)
