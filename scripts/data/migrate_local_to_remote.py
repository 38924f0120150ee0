"""
Migrate signed-out review data from the local JSON store to the database.

Remote rows win: an ayah already reviewed in the database keeps its state.
Daily log counts are added to the database's counts.

Usage:
    python -m scripts.data.migrate_local_to_remote --user USER_ID [--local-user ID] [--store PATH] [--clear-local]
"""

from __future__ import annotations

import argparse
from pathlib import Path

from quranki import config, sm2
from quranki.stores import (
    LocalDailyLogStore,
    LocalReviewItemStore,
    LocalStorage,
    SqlDailyLogStore,
    SqlReviewItemStore,
)
from quranki.stores.migration import migrate_local_to_remote


def main():
    parser = argparse.ArgumentParser(description="Copy local review data into the database")
    parser.add_argument("--user", required=True, help="Database user id to migrate into")
    parser.add_argument(
        "--local-user",
        default=None,
        help="User id in the local store (default: DEFAULT_USER_ID)"
    )
    parser.add_argument("--store", type=Path, default=None, help="Local store JSON file")
    parser.add_argument(
        "--clear-local",
        action="store_true",
        help="Delete the local data after a successful migration"
    )
    args = parser.parse_args()

    local_user = args.local_user or config.get_default_user_id()
    storage = LocalStorage(args.store)
    print(f"Reading local data for {local_user!r} from {storage.path}")

    sm2.init_db()

    result = migrate_local_to_remote(
        args.user,
        LocalReviewItemStore(storage),
        LocalDailyLogStore(storage),
        SqlReviewItemStore(),
        SqlDailyLogStore(),
        clear_local=args.clear_local,
        source_user_id=local_user,
    )

    print(f"\n✓ Migrated {result.items_migrated} review items ({result.items_skipped} skipped)")
    print(f"✓ Migrated {result.log_entries_migrated} daily log entries")


if __name__ == "__main__":
    main()
