"""Pydantic-based settings loaded from YAML with env-var overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_ENV_PREFIX = "TALENTMETRICS_"


class AppSettings(BaseSettings):
    """Application configuration with YAML + env var support.

    Env vars are prefixed with ``TALENTMETRICS_``.
    Example: ``TALENTMETRICS_STORAGE_BACKEND=memory``
    """

    model_config = {"env_prefix": _ENV_PREFIX}

    # --- storage ---
    storage_backend: str = "sqlite"
    state_dir: str = ".state"
    database_file: str = "metrics.db"

    # --- target policy ---
    strict_target_policy: bool = False
    fallback_resume_target: int = 3

    # --- quarters ---
    fiscal_year_start_month: int = 1  # 1 = calendar quarters

    # --- history / export ---
    history_days: int = 30
    export_dir: str = "exports"

    @field_validator("storage_backend")
    @classmethod
    def _normalise_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("memory", "sqlite"):
            raise ValueError(f"unknown storage backend {v!r}")
        return v

    @field_validator("fiscal_year_start_month")
    @classmethod
    def _check_month(cls, v: int) -> int:
        if not 1 <= v <= 12:
            raise ValueError("fiscal_year_start_month must be between 1 and 12")
        return v

    @field_validator("fallback_resume_target", "history_days")
    @classmethod
    def _check_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @property
    def database_path(self) -> Path:
        return Path(self.state_dir) / self.database_file

    # ---- factory ----

    @classmethod
    def from_yaml(cls, path: str | Path | None = None) -> "AppSettings":
        """Load settings from a YAML file, then overlay env vars.

        Env vars (``TALENTMETRICS_*``) take priority over YAML values.
        """
        if path is None:
            path = _PROJECT_ROOT / "settings.yaml"
        path = Path(path)
        raw: dict[str, Any] = {}
        if path.exists():
            with open(path) as fh:
                raw = yaml.safe_load(fh) or {}

        # Let env vars override YAML: remove YAML keys that have an env override
        for key in list(raw.keys()):
            env_key = f"{_ENV_PREFIX}{key.upper()}"
            if env_key in os.environ:
                del raw[key]

        return cls(**raw)
