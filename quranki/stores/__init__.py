"""
Review item and daily log stores.

Remote (SQLAlchemy) and local (JSON file) adapters share one contract.
"""

from quranki.stores.base import DailyLogEntry, DailyLogStore, ReviewItemStore
from quranki.stores.local_store import (
    LocalDailyLogStore,
    LocalReviewItemStore,
    LocalStorage,
)
from quranki.stores.migration import MigrationResult, migrate_local_to_remote
from quranki.stores.sql_store import SqlDailyLogStore, SqlReviewItemStore

__all__ = [
    "DailyLogEntry",
    "DailyLogStore",
    "ReviewItemStore",
    "LocalStorage",
    "LocalReviewItemStore",
    "LocalDailyLogStore",
    "SqlReviewItemStore",
    "SqlDailyLogStore",
    "MigrationResult",
    "migrate_local_to_remote",
]
