"""
Review State - SM-2 Item State

Defines the per-user, per-ayah retention state and the ayah key helpers.

Key concepts:
- Interval: days until the next scheduled review
- Repetitions: consecutive successful recalls since the last failure
- Ease factor: multiplier applied to the interval after the second success
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from quranki.sm2.constants import (
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL,
    DEFAULT_REPETITIONS,
)


AyahKey = Tuple[int, int]  # (surah_no, ayah_no_surah)


class ScopeKind(str, Enum):
    """Content-scope mode an item was scheduled under."""
    SECTION = "juzaa"      # Selection by juz
    NAMED_UNIT = "surah"   # Selection by surah


@dataclass
class ReviewItem:
    """
    Retention state for a single ayah.

    An item is defined as: (user_id, surah_no, ayah_no_surah)
    """
    user_id: str
    surah_no: int
    ayah_no_surah: int
    scope_kind: ScopeKind

    interval: int = DEFAULT_INTERVAL
    repetitions: int = DEFAULT_REPETITIONS
    ease_factor: float = DEFAULT_EASE_FACTOR

    last_reviewed_at: Optional[datetime] = None
    due_at: Optional[datetime] = None
    review_date: Optional[str] = None  # Local date of last grading (YYYY-MM-DD)

    @property
    def key(self) -> AyahKey:
        return (self.surah_no, self.ayah_no_surah)

    def is_due(self, now: datetime) -> bool:
        return self.due_at is not None and self.due_at <= now

    def __repr__(self):
        return (
            f"<ReviewItem({self.user_id}, {format_ayah_key(self.key)}, "
            f"interval={self.interval}, reps={self.repetitions}, ef={self.ease_factor:.2f})>"
        )


def initialize_new_item(
    user_id: str,
    key: AyahKey,
    scope_kind: ScopeKind
) -> ReviewItem:
    """
    Initialize state for an ayah that has never been graded.

    Args:
        user_id: User identifier
        key: (surah_no, ayah_no_surah)
        scope_kind: Scope mode the ayah is being reviewed under

    Returns:
        ReviewItem with interval 0, repetitions 0 and the default ease factor
    """
    surah_no, ayah_no_surah = key
    return ReviewItem(
        user_id=user_id,
        surah_no=surah_no,
        ayah_no_surah=ayah_no_surah,
        scope_kind=ScopeKind(scope_kind),
    )


def format_ayah_key(key: AyahKey) -> str:
    """`(2, 255)` -> `"2_255"`."""
    return f"{key[0]}_{key[1]}"


def parse_ayah_key(value: str) -> AyahKey:
    """`"2_255"` -> `(2, 255)`."""
    surah, _, ayah = value.partition("_")
    if not surah or not ayah:
        raise ValueError(f"Invalid ayah key: {value!r}")
    return int(surah), int(ayah)
