"""
Local -> remote migration.
"""

from datetime import date, timedelta

from quranki.sm2 import Quality, ScopeKind, next_state
from quranki.stores import migrate_local_to_remote


TZ = "America/New_York"


def _item(user_id, key, now, reps=1):
    item = None
    for n in range(reps):
        item = next_state(item, Quality.SUCCESS, now + timedelta(days=n), tz=TZ, user_id=user_id,
                          key=key, scope_kind=ScopeKind.SECTION)
    return item


def test_items_copied_only_when_remote_has_none(
    user_id, now, local_items, local_logs, sql_items, sql_logs
):
    local_items.upsert(user_id, (1, 1), _item(user_id, (1, 1), now, reps=2))
    local_items.upsert(user_id, (1, 2), _item(user_id, (1, 2), now, reps=2))
    sql_items.upsert(user_id, (1, 2), _item(user_id, (1, 2), now, reps=1))

    result = migrate_local_to_remote(user_id, local_items, local_logs, sql_items, sql_logs)

    assert result.items_migrated == 1
    assert result.items_skipped == 1
    assert sql_items.get_one(user_id, (1, 1)).repetitions == 2
    # Remote row wins
    assert sql_items.get_one(user_id, (1, 2)).repetitions == 1


def test_log_counts_are_added(user_id, local_items, local_logs, sql_items, sql_logs):
    day = date(2024, 5, 1)
    local_logs.add(user_id, day, "1_1", 3)
    sql_logs.add(user_id, day, "1_1", 2)

    result = migrate_local_to_remote(user_id, local_items, local_logs, sql_items, sql_logs)

    assert result.log_entries_migrated == 1
    [entry] = sql_logs.list_by_user(user_id)
    assert entry.count == 5


def test_signed_out_id_is_rekeyed_and_cleared(now, local_items, local_logs, sql_items, sql_logs):
    local_items.upsert("local", (2, 3), _item("local", (2, 3), now))
    local_logs.increment("local", date(2024, 5, 1), "2_3")

    migrate_local_to_remote(
        "account-7", local_items, local_logs, sql_items, sql_logs,
        clear_local=True, source_user_id="local",
    )

    migrated = sql_items.get_one("account-7", (2, 3))
    assert migrated.user_id == "account-7"
    assert len(sql_logs.list_by_user("account-7")) == 1
    assert local_items.list_by_user("local") == []
    assert local_logs.list_by_user("local") == []
