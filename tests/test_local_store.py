"""
JSON-file stores used when signed out.
"""

import json
from datetime import date, timedelta

import pytest

from quranki.errors import StoreUnavailableError
from quranki.sm2 import Quality, ScopeKind, next_state
from quranki.stores import LocalDailyLogStore, LocalReviewItemStore, LocalStorage


def test_items_persist_under_storage_keys(local_storage, local_items, user_id, now, tz):
    item = next_state(None, Quality.SUCCESS, now, tz=tz, user_id=user_id, key=(2, 255),
                      scope_kind=ScopeKind.SECTION)

    local_items.upsert(user_id, (2, 255), item)

    raw = json.loads(local_storage.path.read_text(encoding="utf-8"))
    payload = raw[user_id]["quranki_sr_2_255"]
    assert payload["interval"] == 1
    assert payload["selectionType"] == "juzaa"

    loaded = LocalReviewItemStore(LocalStorage(local_storage.path)).get_one(user_id, (2, 255))
    assert loaded.due_at == now + timedelta(days=1)
    assert loaded.ease_factor == pytest.approx(2.6)


def test_get_filters_by_scope_kind(local_items, user_id, now, tz):
    for key, kind in [((1, 1), ScopeKind.SECTION), ((1, 2), ScopeKind.NAMED_UNIT)]:
        local_items.upsert(user_id, key, next_state(None, Quality.SUCCESS, now, tz=tz, user_id=user_id,
                                                    key=key, scope_kind=kind))

    assert [i.key for i in local_items.get(user_id, ScopeKind.NAMED_UNIT)] == [(1, 2)]
    assert len(local_items.list_by_user(user_id)) == 2


def test_daily_log_counts_accumulate(local_storage, local_logs, user_id):
    local_logs.increment(user_id, date(2024, 5, 1), "1_1")
    local_logs.increment(user_id, date(2024, 5, 1), "1_1")
    local_logs.add(user_id, date(2024, 5, 2), "1_2", 3)

    entries = {(e.date, e.ayah_key): e.count for e in local_logs.list_by_user(user_id)}
    assert entries == {(date(2024, 5, 1), "1_1"): 2, (date(2024, 5, 2), "1_2"): 3}

    raw = json.loads(local_storage.path.read_text(encoding="utf-8"))
    assert raw[user_id]["quranki_daily_log_2024-05-01"] == {"1_1": 2}


def test_delete_removes_one_item(local_storage, local_items, user_id, now, tz):
    for key in [(1, 1), (1, 2)]:
        local_items.upsert(user_id, key, next_state(None, Quality.SUCCESS, now, tz=tz, user_id=user_id,
                                                    key=key, scope_kind=ScopeKind.SECTION))

    assert local_items.delete(user_id, (1, 1)) is True
    assert local_items.delete(user_id, (1, 1)) is False
    assert local_storage.get_item(user_id, "quranki_sr_1_1") is None
    assert [item.key for item in local_items.list_by_user(user_id)] == [(1, 2)]


def test_delete_user_keeps_other_kinds_and_users(local_items, local_logs, user_id, now, tz):
    item = next_state(None, Quality.SUCCESS, now, tz=tz, user_id=user_id, key=(1, 1),
                      scope_kind=ScopeKind.SECTION)
    local_items.upsert(user_id, (1, 1), item)
    local_items.upsert("other", (1, 1), item)
    local_logs.increment(user_id, date(2024, 5, 1), "1_1")

    assert local_items.delete_user(user_id) == 1
    assert local_items.list_by_user(user_id) == []
    assert len(local_items.list_by_user("other")) == 1
    assert len(local_logs.list_by_user(user_id)) == 1


def test_missing_file_reads_as_empty(tmp_path, user_id):
    store = LocalReviewItemStore(LocalStorage(tmp_path / "nested" / "store.json"))

    assert store.list_by_user(user_id) == []
    assert store.get_one(user_id, (1, 1)) is None


def test_corrupt_file_raises_store_unavailable(tmp_path, user_id):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreUnavailableError):
        LocalDailyLogStore(LocalStorage(path)).list_by_user(user_id)


def test_malformed_item_raises_store_unavailable(local_storage, local_items, user_id):
    local_storage.set_item(user_id, "quranki_sr_1_1", {"surahNo": 1})

    with pytest.raises(StoreUnavailableError):
        local_items.get_one(user_id, (1, 1))


def test_browser_timestamps_with_z_suffix(local_storage, local_items, user_id):
    local_storage.set_item(user_id, "quranki_sr_1_1", {
        "surahNo": 1,
        "ayahNoSurah": 1,
        "interval": 6,
        "repetitions": 2,
        "easeFactor": 2.7,
        "lastReviewed": "2024-05-01T12:00:00.000Z",
        "dueDate": "2024-05-07T12:00:00.000Z",
        "selectionType": "surah",
    })

    item = local_items.get_one(user_id, (1, 1))

    assert item.scope_kind == ScopeKind.NAMED_UNIT
    assert item.due_at.isoformat() == "2024-05-07T12:00:00+00:00"
