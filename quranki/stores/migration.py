"""
One-shot migration of signed-out (local) data into the remote stores.

Remote state wins: a local review item is copied only when the remote store
has no row for that ayah. Daily log counts are added to whatever the remote
already holds.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from quranki.stores.base import DailyLogStore, ReviewItemStore


@dataclass(frozen=True)
class MigrationResult:
    items_migrated: int = 0
    items_skipped: int = 0
    log_entries_migrated: int = 0


def migrate_local_to_remote(
    user_id: str,
    local_items: ReviewItemStore,
    local_logs: DailyLogStore,
    remote_items: ReviewItemStore,
    remote_logs: DailyLogStore,
    clear_local: bool = False,
    source_user_id: Optional[str] = None
) -> MigrationResult:
    """
    Copy a user's local review items and daily logs into the remote stores.

    Args:
        user_id: Owner of the data in the remote stores
        local_items, local_logs: Source stores
        remote_items, remote_logs: Destination stores
        clear_local: Delete the local data once everything is copied
        source_user_id: Local owner id when it differs from `user_id` (signed-out id)

    Returns:
        MigrationResult with per-kind counts
    """
    source = source_user_id or user_id
    migrated = 0
    skipped = 0
    for item in local_items.list_by_user(source):
        if item.last_reviewed_at is None or item.due_at is None:
            skipped += 1
            continue
        if remote_items.get_one(user_id, item.key) is not None:
            skipped += 1
            continue
        remote_items.upsert(user_id, item.key, replace(item, user_id=user_id))
        migrated += 1

    log_entries = 0
    for entry in local_logs.list_by_user(source):
        if entry.count <= 0:
            continue
        remote_logs.add(user_id, entry.date, entry.ayah_key, entry.count)
        log_entries += 1

    if clear_local:
        local_items.delete_user(source)
        local_logs.delete_user(source)

    logger.info(
        f"Migrated local data for {user_id}: {migrated} items "
        f"({skipped} skipped), {log_entries} daily log entries"
    )
    return MigrationResult(
        items_migrated=migrated,
        items_skipped=skipped,
        log_entries_migrated=log_entries,
    )
