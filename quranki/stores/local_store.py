"""
Local stores - JSON-file adapters for signed-out use.

Data lives in one JSON document shaped like a per-user key/value store:

    {"<user_id>": {"quranki_sr_2_255": {...}, "quranki_daily_log_2024-05-01": {"2_255": 3}}}

Writes are serialized with a lock and land atomically (temp file + os.replace).
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from quranki import config, dates
from quranki.errors import StoreUnavailableError
from quranki.sm2.review_state import (
    AyahKey,
    ReviewItem,
    ScopeKind,
    format_ayah_key,
)
from quranki.stores.base import DailyLogEntry, DailyLogStore, ReviewItemStore


REVIEW_KEY_PREFIX = "quranki_sr_"
DAILY_LOG_KEY_PREFIX = "quranki_daily_log_"


def review_storage_key(key: AyahKey) -> str:
    return f"{REVIEW_KEY_PREFIX}{format_ayah_key(key)}"


def daily_log_storage_key(day: date) -> str:
    return f"{DAILY_LOG_KEY_PREFIX}{dates.to_date_string(day)}"


class LocalStorage:
    """
    Thread-safe key/value document persisted to a JSON file.

    Args:
        path: File location (default: QURANKI_LOCAL_STORE or logs/local_store.json)
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else config.get_local_store_path()
        self._lock = threading.Lock()

    # ---- File I/O ----

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailableError(f"Cannot read local store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreUnavailableError(f"Local store {self.path} is not a JSON object")
        return data

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot write local store {self.path}: {exc}") from exc

    # ---- Key/value API ----

    def user_data(self, user_id: str) -> dict:
        """Snapshot of every key stored for a user."""
        with self._lock:
            return dict(self._read().get(user_id, {}))

    def get_item(self, user_id: str, key: str) -> Optional[object]:
        return self.user_data(user_id).get(key)

    def set_item(self, user_id: str, key: str, value: object) -> None:
        with self._lock:
            data = self._read()
            data.setdefault(user_id, {})[key] = value
            self._write(data)

    def update_item(self, user_id: str, key: str, update) -> None:
        """
        Read-modify-write one key under the lock.

        Args:
            update: Callable taking the current value (or None) and returning the new one
        """
        with self._lock:
            data = self._read()
            user = data.setdefault(user_id, {})
            user[key] = update(user.get(key))
            self._write(data)

    def remove_item(self, user_id: str, key: str) -> bool:
        with self._lock:
            data = self._read()
            user = data.get(user_id, {})
            if key not in user:
                return False
            del user[key]
            self._write(data)
            return True

    def remove_prefix(self, user_id: str, prefix: str) -> int:
        """Delete all of a user's keys starting with `prefix`. Returns keys removed."""
        with self._lock:
            data = self._read()
            user = data.get(user_id, {})
            doomed = [k for k in user if k.startswith(prefix)]
            if not doomed:
                return 0
            for k in doomed:
                del user[k]
            self._write(data)
            return len(doomed)


# ---- Serialization ----

def _item_to_json(item: ReviewItem) -> dict:
    return {
        "surahNo": item.surah_no,
        "ayahNoSurah": item.ayah_no_surah,
        "selectionType": ScopeKind(item.scope_kind).value,
        "interval": item.interval,
        "repetitions": item.repetitions,
        "easeFactor": item.ease_factor,
        "lastReviewed": dates.as_utc(item.last_reviewed_at).isoformat() if item.last_reviewed_at else None,
        "dueDate": dates.as_utc(item.due_at).isoformat() if item.due_at else None,
        "reviewDate": item.review_date,
    }


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    # Browser exports use a trailing "Z"
    return dates.as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def _item_from_json(user_id: str, payload: dict) -> ReviewItem:
    try:
        return ReviewItem(
            user_id=user_id,
            surah_no=int(payload["surahNo"]),
            ayah_no_surah=int(payload["ayahNoSurah"]),
            scope_kind=ScopeKind(payload.get("selectionType", ScopeKind.SECTION.value)),
            interval=int(payload["interval"]),
            repetitions=int(payload["repetitions"]),
            ease_factor=float(payload["easeFactor"]),
            last_reviewed_at=_parse_timestamp(payload.get("lastReviewed")),
            due_at=_parse_timestamp(payload.get("dueDate")),
            review_date=payload.get("reviewDate"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StoreUnavailableError(f"Malformed local review item: {payload!r}") from exc


class LocalReviewItemStore(ReviewItemStore):
    """Review items under `quranki_sr_{surah}_{ayah}` keys."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()

    def list_by_user(self, user_id: str) -> list[ReviewItem]:
        items = [
            _item_from_json(user_id, value)
            for key, value in self.storage.user_data(user_id).items()
            if key.startswith(REVIEW_KEY_PREFIX)
        ]
        items.sort(key=lambda item: (item.due_at is None, item.due_at or dates.utcnow()))
        return items

    def get(self, user_id: str, scope_kind: ScopeKind) -> list[ReviewItem]:
        scope_kind = ScopeKind(scope_kind)
        return [item for item in self.list_by_user(user_id) if item.scope_kind == scope_kind]

    def get_one(self, user_id: str, key: AyahKey) -> Optional[ReviewItem]:
        payload = self.storage.get_item(user_id, review_storage_key(key))
        if payload is None:
            return None
        return _item_from_json(user_id, payload)

    def upsert(self, user_id: str, key: AyahKey, item: ReviewItem) -> None:
        self.storage.set_item(user_id, review_storage_key(key), _item_to_json(item))

    def delete(self, user_id: str, key: AyahKey) -> bool:
        return self.storage.remove_item(user_id, review_storage_key(key))

    def delete_user(self, user_id: str) -> int:
        return self.storage.remove_prefix(user_id, REVIEW_KEY_PREFIX)


class LocalDailyLogStore(DailyLogStore):
    """Daily counters under `quranki_daily_log_{date}` keys, one dict per day."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()

    def add(self, user_id: str, day: date, ayah_key: str, count: int) -> None:
        if count < 0:
            raise ValueError("Daily log counts are never decremented")

        def _bump(current: Optional[dict]) -> dict:
            counts = dict(current or {})
            counts[ayah_key] = int(counts.get(ayah_key, 0)) + count
            return counts

        self.storage.update_item(user_id, daily_log_storage_key(day), _bump)

    def list_by_user(self, user_id: str) -> list[DailyLogEntry]:
        entries: list[DailyLogEntry] = []
        for key, counts in self.storage.user_data(user_id).items():
            if not key.startswith(DAILY_LOG_KEY_PREFIX):
                continue
            try:
                day = dates.parse_date_string(key[len(DAILY_LOG_KEY_PREFIX):])
            except ValueError as exc:
                raise StoreUnavailableError(f"Malformed local daily log key: {key!r}") from exc
            for ayah_key, count in counts.items():
                entries.append(DailyLogEntry(user_id, day, ayah_key, int(count)))
        entries.sort(key=lambda entry: entry.date, reverse=True)
        return entries

    def delete_user(self, user_id: str) -> int:
        return self.storage.remove_prefix(user_id, DAILY_LOG_KEY_PREFIX)
