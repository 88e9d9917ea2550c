"""Tests for settings loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from talentmetrics.settings import AppSettings
from talentmetrics.storage.factory import open_store
from talentmetrics.storage.memory import InMemoryStore
from talentmetrics.storage.sqlite import SqliteStore


def test_load_from_yaml(tmp_settings_yaml):
    settings = AppSettings.from_yaml(tmp_settings_yaml)
    assert settings.storage_backend == "sqlite"
    assert settings.database_path.name == "test.db"
    assert settings.fallback_resume_target == 2
    assert settings.fiscal_year_start_month == 4
    assert settings.history_days == 14


def test_env_var_override(tmp_settings_yaml, monkeypatch):
    monkeypatch.setenv("TALENTMETRICS_HISTORY_DAYS", "60")
    monkeypatch.setenv("TALENTMETRICS_STORAGE_BACKEND", "memory")
    settings = AppSettings.from_yaml(tmp_settings_yaml)
    assert settings.history_days == 60
    assert settings.storage_backend == "memory"


def test_defaults_when_no_file(tmp_path):
    settings = AppSettings.from_yaml(tmp_path / "nonexistent.yaml")
    assert settings.storage_backend == "sqlite"
    assert settings.strict_target_policy is False
    assert settings.fiscal_year_start_month == 1
    assert settings.history_days == 30


@pytest.mark.parametrize(
    "field, value",
    [
        ("storage_backend", "postgres"),
        ("fiscal_year_start_month", 13),
        ("fallback_resume_target", 0),
        ("history_days", -5),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        AppSettings(**{field: value})


def test_open_store_by_backend(tmp_path):
    memory = open_store(AppSettings(storage_backend="memory"))
    assert isinstance(memory, InMemoryStore)
    memory.close()

    sqlite = open_store(AppSettings(storage_backend="sqlite", state_dir=str(tmp_path / "state")))
    try:
        assert isinstance(sqlite, SqliteStore)
        assert (tmp_path / "state" / "metrics.db").exists()
    finally:
        sqlite.close()
