"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

import pandas as pd

from quranki.sm2.review_state import ReviewItem
from quranki.stores.base import DailyLogEntry, DailyLogStore, ReviewItemStore


ITEM_COLUMNS = ["surah_no", "ayah_no_surah", "scope_kind", "repetitions", "due_at"]
LOG_COLUMNS = ["date", "ayah_key", "count"]


def review_items_to_df(items: list[ReviewItem]) -> pd.DataFrame:
    """
    Review items as a dataframe with a UTC `due_at` column.
    """
    if not items:
        return pd.DataFrame(
            {
                "surah_no": pd.Series(dtype="int64"),
                "ayah_no_surah": pd.Series(dtype="int64"),
                "scope_kind": pd.Series(dtype="object"),
                "repetitions": pd.Series(dtype="int64"),
                "due_at": pd.Series(dtype="datetime64[ns, UTC]"),
            }
        )

    df = pd.DataFrame(
        [
            {
                "surah_no": item.surah_no,
                "ayah_no_surah": item.ayah_no_surah,
                "scope_kind": str(getattr(item.scope_kind, "value", item.scope_kind)),
                "repetitions": item.repetitions,
                "due_at": item.due_at,
            }
            for item in items
        ],
        columns=ITEM_COLUMNS,
    )
    df["due_at"] = pd.to_datetime(df["due_at"], utc=True, errors="coerce")
    return df


def daily_logs_to_df(entries: list[DailyLogEntry]) -> pd.DataFrame:
    """
    Daily log entries as a dataframe with a midnight-normalized `date` column.
    """
    if not entries:
        return pd.DataFrame(
            {
                "date": pd.Series(dtype="datetime64[ns]"),
                "ayah_key": pd.Series(dtype="object"),
                "count": pd.Series(dtype="int64"),
            }
        )

    df = pd.DataFrame(
        [{"date": e.date, "ayah_key": e.ayah_key, "count": e.count} for e in entries],
        columns=LOG_COLUMNS,
    )
    df["date"] = pd.to_datetime(df["date"]).dt.normalize()
    df["count"] = df["count"].astype("int64")
    return df.sort_values("date").reset_index(drop=True)


def load_review_items_df(user_id: str, item_store: ReviewItemStore) -> pd.DataFrame:
    """
    Load every review item of a user into a dataframe.
    """
    return review_items_to_df(item_store.list_by_user(user_id))


def load_daily_logs_df(user_id: str, log_store: DailyLogStore) -> pd.DataFrame:
    """
    Load every daily log entry of a user into a dataframe.
    """
    return daily_logs_to_df(log_store.list_by_user(user_id))
