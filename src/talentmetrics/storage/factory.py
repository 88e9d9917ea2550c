"""Pick the store implementation named in settings."""

from __future__ import annotations

import logging

from talentmetrics.settings import AppSettings
from talentmetrics.storage.base import MetricsStore
from talentmetrics.storage.memory import InMemoryStore
from talentmetrics.storage.sqlite import SqliteStore

logger = logging.getLogger(__name__)


def open_store(settings: AppSettings) -> MetricsStore:
    """Return a ready store; callers own it and must ``close()`` it."""
    if settings.storage_backend == "memory":
        logger.info("Using in-memory metrics store.")
        return InMemoryStore()
    return SqliteStore(settings.database_path)
