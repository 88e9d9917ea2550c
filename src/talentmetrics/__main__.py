"""Entry point: ``python -m talentmetrics``."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from talentmetrics.exceptions import ConfigurationError, TalentMetricsError
from talentmetrics.metrics.daily import DeliveryCalculator
from talentmetrics.metrics.snapshots import SnapshotRecorder
from talentmetrics.metrics.targets import TargetSummaryService
from talentmetrics.models import Role, ScopeType, as_day, utc_now
from talentmetrics.policy.quarters import strategy_from_settings
from talentmetrics.policy.targets import TargetPolicy
from talentmetrics.reporting.console import (
    print_banner,
    print_daily_metrics,
    print_quarterly_performance,
    print_snapshot_history,
    print_target_summary,
)
from talentmetrics.reporting.data_export import export_to_file
from talentmetrics.settings import AppSettings
from talentmetrics.storage.factory import open_store

logger = logging.getLogger("talentmetrics")

_SCOPES = [s.value for s in ScopeType]


def _configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="talentmetrics")
    parser.add_argument("--config", help="path to settings.yaml")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    daily = sub.add_parser("daily", help="live delivery metrics for one scope")
    daily.add_argument("--scope", choices=_SCOPES, default=ScopeType.ORGANIZATION.value)
    daily.add_argument("--id", dest="scope_id")
    daily.add_argument("--date")

    snap = sub.add_parser("snapshot", help="record snapshots for every scope")
    snap.add_argument("--date")

    hist = sub.add_parser("history", help="show recorded snapshots")
    hist.add_argument("--scope", choices=_SCOPES, default=ScopeType.ORGANIZATION.value)
    hist.add_argument("--id", dest="scope_id")
    hist.add_argument("--start")
    hist.add_argument("--end")

    exp = sub.add_parser("export", help="write snapshot history to a file")
    exp.add_argument("--scope", choices=_SCOPES, default=ScopeType.ORGANIZATION.value)
    exp.add_argument("--id", dest="scope_id")
    exp.add_argument("--start")
    exp.add_argument("--end")
    exp.add_argument("--format", choices=["json", "csv"], default="json")

    targets = sub.add_parser("targets", help="quarterly target summary")
    targets.add_argument("--person", required=True)
    targets.add_argument("--role", choices=[r.value for r in Role], default=Role.RECRUITER.value)
    targets.add_argument("--performance", action="store_true")
    return parser


def _load_settings(path: str | None) -> AppSettings:
    try:
        return AppSettings.from_yaml(path)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def _run(args: argparse.Namespace) -> None:
    settings = _load_settings(args.config)
    store = open_store(settings)
    try:
        calculator = DeliveryCalculator(store, TargetPolicy.from_settings(settings))
        recorder = SnapshotRecorder(store, calculator, history_days=settings.history_days)

        if args.command == "daily":
            day = as_day(args.date) if args.date else utc_now().date()
            scope = ScopeType(args.scope)
            if scope is ScopeType.ORGANIZATION:
                metrics = calculator.org_daily_metrics(day)
            elif not args.scope_id:
                raise ConfigurationError(f"--id is required for scope {scope.value}.")
            elif scope is ScopeType.TEAM:
                metrics = calculator.team_daily_metrics(args.scope_id, day)
            else:
                metrics = calculator.recruiter_daily_metrics(args.scope_id, day)
            print_daily_metrics(scope.value.title(), day, metrics)

        elif args.command == "snapshot":
            written = recorder.record_all(args.date)
            logger.info("Wrote %d snapshot(s).", len(written))

        elif args.command in ("history", "export"):
            snapshots = recorder.history(args.scope, args.scope_id, args.start, args.end)
            if args.command == "history":
                print_snapshot_history(snapshots)
            else:
                export_to_file(snapshots, settings.export_dir, args.format)

        elif args.command == "targets":
            service = TargetSummaryService(store, strategy=strategy_from_settings(settings))
            print_target_summary(service.get_target_summary(args.person, args.role))
            if args.performance:
                print_quarterly_performance(service.quarterly_performance(args.person))
    finally:
        store.close()


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    print_banner()
    try:
        _run(args)
    except TalentMetricsError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
