"""Tests for the command-line entry point."""

from __future__ import annotations

import pytest

from conftest import seed_org
from talentmetrics import __main__ as cli
from talentmetrics.storage.sqlite import SqliteStore


@pytest.fixture()
def config(tmp_path):
    state = tmp_path / ".state"
    store = SqliteStore(state / "metrics.db")
    try:
        seed_org(store)
    finally:
        store.close()
    path = tmp_path / "settings.yaml"
    path.write_text(
        f'state_dir: "{state}"\nexport_dir: "{tmp_path / "exports"}"\n'
    )
    return path


def test_daily_org(config, capsys):
    cli.main(["--config", str(config), "daily", "--date", "2025-03-14"])
    out = capsys.readouterr().out
    assert "Required" in out
    assert "14" in out


def test_snapshot_then_export(config, tmp_path):
    cli.main(["--config", str(config), "snapshot", "--date", "2025-03-14"])
    cli.main(
        [
            "--config",
            str(config),
            "export",
            "--scope",
            "team",
            "--id",
            "lead-1",
            "--start",
            "2025-03-01",
            "--end",
            "2025-03-31",
            "--format",
            "csv",
        ]
    )
    text = (tmp_path / "exports" / "daily_metrics_export.csv").read_text(encoding="utf-8")
    assert "lead-1" in text


def test_missing_scope_id_exits(config):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(config), "daily", "--scope", "team"])
    assert exc.value.code == 1


def test_bad_config_exits(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("storage_backend: oracle\n")
    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(path), "daily"])
    assert exc.value.code == 1
