"""Rich-powered console output."""

from __future__ import annotations

from datetime import date

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from talentmetrics.models import (
    DailyMetrics,
    DailyMetricsSnapshot,
    QuarterPerformance,
    TargetSummary,
)

_console = Console()

_STATUS_STYLES = {
    "Completed": "bold green",
    "In Progress": "bold yellow",
    "Pending": "dim",
}


def print_banner() -> None:
    """Display the startup banner."""
    _console.print(
        Panel.fit(
            "[bold cyan]TalentMetrics[/bold cyan]  |  Delivery and Target Reporting",
            border_style="cyan",
        )
    )


def print_daily_metrics(title: str, day: date, metrics: DailyMetrics) -> None:
    """Display one scope's delivery for a day."""
    style = "bold green" if metrics.overall_performance == "G" else "bold red"
    table = Table(title=f"{title}  ({day.isoformat()})", header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Requirements", str(metrics.requirement_count))
    table.add_row("Required", str(metrics.required))
    table.add_row("Delivered", str(metrics.delivered))
    table.add_row("Defaulted", str(metrics.defaulted))
    table.add_row("Performance", f"[{style}]{metrics.performance_ratio:.1f}%[/{style}]")

    _console.print()
    _console.print(table)
    _console.print()


def print_snapshot_history(snapshots: list[DailyMetricsSnapshot]) -> None:
    table = Table(title="Daily Metrics History", header_style="bold magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Scope")
    table.add_column("Delivered", justify="right")
    table.add_column("Defaulted", justify="right")
    table.add_column("Requirements", justify="right")

    for s in snapshots:
        scope = s.scope_name or s.scope_id or s.scope_type.value
        table.add_row(
            s.date.isoformat(),
            scope,
            str(s.delivered),
            str(s.defaulted),
            str(s.requirement_count),
        )
    if not snapshots:
        table.add_row("(none)", "", "", "", "")

    _console.print(table)


def print_target_summary(summary: TargetSummary) -> None:
    """Display the current quarter and every quarter with a status."""
    cur = summary.current_quarter
    _console.print(
        f"[bold]Current quarter:[/bold] {cur.quarter} {cur.year}  "
        f"minimum {cur.minimum_target}  achieved {cur.target_achieved}  "
        f"incentives {cur.incentive_earned}  closures {cur.closures}"
    )

    table = Table(title="Quarterly Targets", header_style="bold magenta")
    table.add_column("Quarter", style="cyan")
    table.add_column("Minimum", justify="right")
    table.add_column("Achieved", justify="right")
    table.add_column("Incentives", justify="right")
    table.add_column("Closures", justify="right")
    table.add_column("Status")

    for row in summary.all_quarters:
        style = _STATUS_STYLES.get(row.status, "")
        table.add_row(
            f"{row.quarter} {row.year}",
            str(row.minimum_target),
            str(row.target_achieved),
            str(row.incentive_earned),
            str(row.closures),
            f"[{style}]{row.status}[/{style}]" if style else row.status,
        )

    _console.print(table)


def print_quarterly_performance(rows: list[QuarterPerformance]) -> None:
    table = Table(title="Quarterly Performance", header_style="bold magenta")
    table.add_column("Quarter", style="cyan")
    table.add_column("Resumes delivered", justify="right")
    table.add_column("Closures", justify="right")
    for row in rows:
        table.add_row(row.quarter, str(row.resumes_delivered), str(row.closures))
    _console.print(table)
