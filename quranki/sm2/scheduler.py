"""
Scheduler - SM-2 Algorithm Logic

Pure SM-2 state updates (no database calls).

Main workflow:
1. Load the review item (caller's responsibility; None for a new ayah)
2. Apply the failure or success rule
3. Stamp review and due timestamps
4. Return the next state

This module handles ONLY the algorithm logic.
Persistence is handled by the stores package.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timedelta
import math
from typing import Optional, Union
from zoneinfo import ZoneInfo

from quranki import dates
from quranki.sm2.constants import (
    EASE_DELTA,
    MIN_EASE_FACTOR,
    MIN_INTERVAL,
    SECOND_INTERVAL,
    Quality,
)
from quranki.sm2.review_state import (
    AyahKey,
    ReviewItem,
    ScopeKind,
    initialize_new_item,
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (banker's rounding is not wanted)."""
    return int(math.floor(value + 0.5))


def next_interval(repetitions: int, previous_interval: int, ease_factor: float) -> int:
    """
    Interval after a successful recall.

    Args:
        repetitions: Consecutive successes including this one
        previous_interval: Interval before this review
        ease_factor: Ease factor before this review

    Returns:
        Interval in days
    """
    if repetitions == 1:
        return MIN_INTERVAL
    if repetitions == 2:
        return SECOND_INTERVAL
    return round_half_up(previous_interval * ease_factor)


def adjust_ease_factor(ease_factor: float, quality: Quality) -> float:
    """Apply the grade's ease delta, bounded below by 1.3."""
    return max(MIN_EASE_FACTOR, ease_factor + EASE_DELTA[quality])


def next_state(
    current: Optional[ReviewItem],
    quality: Quality,
    now: datetime,
    *,
    tz: Union[str, ZoneInfo],
    user_id: Optional[str] = None,
    key: Optional[AyahKey] = None,
    scope_kind: Optional[ScopeKind] = None
) -> ReviewItem:
    """
    Compute the state of an ayah after a graded recall.

    The input item is never modified.

    Args:
        current: Existing state, or None if the ayah was never graded
        quality: SUCCESS or FAILURE
        now: Review timestamp (aware)
        tz: Zone used to stamp review_date (no environment fallback)
        user_id: Owner, required when current is None
        key: (surah_no, ayah_no_surah), required when current is None
        scope_kind: Scope the grading happened under (re-tags existing items)

    Returns:
        New ReviewItem
    """
    quality = Quality(quality)
    if tz is None:
        raise ValueError("tz is required to stamp review_date")

    if current is None:
        if user_id is None or key is None or scope_kind is None:
            raise ValueError("user_id, key and scope_kind are required for a first grading")
        current = initialize_new_item(user_id, key, scope_kind)

    if quality == Quality.FAILURE:
        repetitions = 0
        interval = MIN_INTERVAL
    else:
        repetitions = current.repetitions + 1
        interval = next_interval(repetitions, current.interval, current.ease_factor)

    return replace(
        current,
        scope_kind=ScopeKind(scope_kind) if scope_kind is not None else current.scope_kind,
        interval=interval,
        repetitions=repetitions,
        ease_factor=adjust_ease_factor(current.ease_factor, quality),
        last_reviewed_at=now,
        due_at=now + timedelta(days=interval),
        review_date=dates.to_date_string(dates.local_day(now, tz)),
    )
