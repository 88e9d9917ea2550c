"""JSON / CSV export of snapshot history for UI consumption."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from talentmetrics.models import DailyMetricsSnapshot

logger = logging.getLogger(__name__)

_COLUMNS = (
    "date",
    "scope_type",
    "scope_id",
    "scope_name",
    "delivered",
    "defaulted",
    "requirement_count",
    "created_at",
    "updated_at",
)


def snapshot_rows(snapshots: list[DailyMetricsSnapshot]) -> list[dict]:
    rows = []
    for s in snapshots:
        rows.append(
            {
                "date": s.date.isoformat(),
                "scope_type": s.scope_type.value,
                "scope_id": s.scope_id,
                "scope_name": s.scope_name,
                "delivered": s.delivered,
                "defaulted": s.defaulted,
                "requirement_count": s.requirement_count,
                "created_at": s.created_at.isoformat(),
                "updated_at": s.updated_at.isoformat() if s.updated_at else None,
            }
        )
    return rows


def export_json(snapshots: list[DailyMetricsSnapshot]) -> str:
    return json.dumps(snapshot_rows(snapshots), indent=2)


def export_csv(snapshots: list[DailyMetricsSnapshot]) -> str:
    """Export snapshots as a CSV string (empty when there is nothing to export)."""
    rows = snapshot_rows(snapshots)
    if not rows:
        return ""
    lines = [",".join(_COLUMNS)]
    for row in rows:
        lines.append(
            ",".join(
                "" if row[c] is None else str(row[c]).replace(",", ";") for c in _COLUMNS
            )
        )
    return "\n".join(lines)


def export_to_file(
    snapshots: list[DailyMetricsSnapshot],
    output_dir: str | Path,
    fmt: str = "json",
    stem: str = "daily_metrics_export",
) -> Path:
    """Write an export file and return its path.

    *fmt* is ``"json"`` or ``"csv"``.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if fmt == "csv":
        content = export_csv(snapshots)
        suffix = ".csv"
    else:
        content = export_json(snapshots)
        suffix = ".json"

    dest = output_dir / f"{stem}{suffix}"
    dest.write_text(content, encoding="utf-8")
    logger.info("Exported %s to %s.", fmt.upper(), dest)
    return dest
