"""
Metric computations for review statistics.

All functions are pure: dataframes in, numbers or series out.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

import pandas as pd

from quranki import dates


def daily_totals(logs_df: pd.DataFrame) -> pd.Series:
    """
    Total grading count per date, only dates with a positive total.
    """
    if logs_df.empty:
        return pd.Series(dtype="int64")
    totals = logs_df.groupby("date")["count"].sum().astype("int64")
    return totals[totals > 0].sort_index()


def compute_due_today(
    items_df: pd.DataFrame,
    as_of: datetime,
    tz: dates.TzLike = None
) -> int:
    """
    Items due within today's local-day window.

    Falls back to everything overdue as of `as_of` when nothing lands in today's
    window.
    """
    if items_df.empty:
        return 0

    start, end = dates.day_bounds(as_of, tz)
    due_at = items_df["due_at"].dropna()
    in_window = int(((due_at >= pd.Timestamp(start)) & (due_at <= pd.Timestamp(end))).sum())
    if in_window > 0:
        return in_window
    return int((due_at <= pd.Timestamp(dates.as_utc(as_of))).sum())


def compute_reviewed_today(logs_df: pd.DataFrame, today: date) -> int:
    if logs_df.empty:
        return 0
    return int(logs_df.loc[logs_df["date"] == pd.Timestamp(today), "count"].sum())


def compute_total_reviewed(logs_df: pd.DataFrame) -> int:
    if logs_df.empty:
        return 0
    return int(logs_df["count"].sum())


def compute_daily_average(logs_df: pd.DataFrame) -> float:
    """
    Total gradings divided by the number of active days (0.0 with no activity).
    """
    totals = daily_totals(logs_df)
    if totals.empty:
        return 0.0
    return float(compute_total_reviewed(logs_df)) / len(totals)


def compute_streak(logs_df: pd.DataFrame, today: date) -> int:
    """
    Consecutive active days ending today.

    A streak whose latest active day is not today counts as 0; there is no
    grace period for yesterday.
    """
    totals = daily_totals(logs_df)
    if totals.empty:
        return 0

    active = sorted({ts.date() for ts in totals.index}, reverse=True)
    if active[0] != today:
        return 0

    streak = 1
    for previous, current in zip(active, active[1:]):
        if previous - current != timedelta(days=1):
            break
        streak += 1
    return streak


def daily_review_counts(logs_df: pd.DataFrame, year: Optional[int] = None) -> pd.Series:
    """
    Per-date grading totals for the review heatmap.

    Args:
        logs_df: Daily log dataframe
        year: Restrict to one calendar year

    Returns:
        Series indexed by date (DatetimeIndex), zero-count dates omitted
    """
    totals = daily_totals(logs_df)
    if year is not None and not totals.empty:
        totals = totals[totals.index.year == year]
    totals.index.name = "date"
    return totals
