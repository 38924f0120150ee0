"""
Daily Log Recorder.

One call per grading: the (user, day, ayah) counter goes up by one. Calling it
twice for the same grading counts twice.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

from quranki import dates
from quranki.sm2.review_state import AyahKey, format_ayah_key
from quranki.stores.base import DailyLogStore


def record_review(
    log_store: DailyLogStore,
    user_id: str,
    key: Union[AyahKey, str],
    day: Union[date, datetime, None] = None,
    tz: dates.TzLike = None
) -> None:
    """
    Count one grading of `key` on `day`.

    Args:
        log_store: Daily log store
        user_id: User identifier
        key: (surah_no, ayah_no_surah) or "surah_ayah"
        day: Local calendar day, or a timestamp converted with the local-day rule
            (defaults to today)
        tz: Review time zone for timestamp conversion

    Raises:
        StoreUnavailableError: The store failed; nothing is retried
    """
    ayah_key = key if isinstance(key, str) else format_ayah_key(key)
    log_store.increment(user_id, _as_local_day(day, tz), ayah_key)


def _as_local_day(day: Union[date, datetime, None], tz: dates.TzLike) -> date:
    if day is None:
        return dates.today(tz=tz)
    if isinstance(day, datetime):
        return dates.local_day(day, tz)
    return day
