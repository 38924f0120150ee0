"""
Service layer to assemble review statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from loguru import logger

from quranki import dates
from quranki.analytics.metrics import (
    compute_daily_average,
    compute_due_today,
    compute_reviewed_today,
    compute_streak,
    compute_total_reviewed,
)
from quranki.analytics.queries import (
    daily_logs_to_df,
    load_daily_logs_df,
    load_review_items_df,
    review_items_to_df,
)
from quranki.analytics.types import NewAyahAllowance, ReviewStats
from quranki.schemas import Ayah
from quranki.sm2.constants import NEW_AYAHS_PER_DAY
from quranki.sm2.review_state import ReviewItem
from quranki.stores.base import DailyLogEntry, DailyLogStore, ReviewItemStore


def _stats_from_frames(items_df, logs_df, as_of: datetime, tz: dates.TzLike) -> ReviewStats:
    today = dates.local_day(as_of, tz)
    return ReviewStats(
        due_today_count=compute_due_today(items_df, as_of, tz),
        reviewed_today_count=compute_reviewed_today(logs_df, today),
        total_reviewed_count=compute_total_reviewed(logs_df),
        daily_average=compute_daily_average(logs_df),
        current_streak_days=compute_streak(logs_df, today),
    )


def compute_stats(
    review_items: list[ReviewItem],
    daily_logs: list[DailyLogEntry],
    as_of: Optional[datetime] = None,
    tz: dates.TzLike = None
) -> ReviewStats:
    """
    Compute dashboard counters from already-loaded data.

    Args:
        review_items: All review items of the user
        daily_logs: All daily log entries of the user
        as_of: Evaluation time (defaults to now, UTC)
        tz: Review time zone for "today"

    Returns:
        ReviewStats
    """
    as_of = dates.as_utc(as_of) if as_of is not None else dates.utcnow()
    return _stats_from_frames(
        review_items_to_df(review_items),
        daily_logs_to_df(daily_logs),
        as_of,
        tz,
    )


def build_review_stats(
    user_id: str,
    item_store: ReviewItemStore,
    log_store: DailyLogStore,
    as_of: Optional[datetime] = None,
    tz: dates.TzLike = None
) -> ReviewStats:
    """
    Load a user's data and compute dashboard counters.

    Statistics are informational: any failure is logged and yields zero stats.
    """
    as_of = dates.as_utc(as_of) if as_of is not None else dates.utcnow()
    try:
        items_df = load_review_items_df(user_id, item_store)
        logs_df = load_daily_logs_df(user_id, log_store)
        return _stats_from_frames(items_df, logs_df, as_of, tz)
    except Exception as e:
        logger.warning(f"Review stats unavailable for {user_id}, returning zeros: {e}")
        return ReviewStats.zero()


def new_ayah_allowance(
    scope_ayahs: Iterable[Ayah],
    review_items: Iterable[ReviewItem],
    new_ayahs_per_day: int = NEW_AYAHS_PER_DAY
) -> NewAyahAllowance:
    """
    Count never-reviewed ayahs in a scope and cap today's share.

    An ayah counts as reviewed once any of its items has repetitions > 0.
    """
    reviewed = {item.key for item in review_items if item.repetitions > 0}
    available = sum(1 for ayah in scope_ayahs if ayah.key not in reviewed)
    return NewAyahAllowance(
        available_new=available,
        new_to_show=min(available, max(0, new_ayahs_per_day)),
    )
