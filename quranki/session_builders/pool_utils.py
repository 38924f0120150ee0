"""
Pool utilities for session builders.

These helpers provide shared, minimal primitives for building and reasoning
about session pools without enforcing a single scheduling policy.
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import Callable, Optional, TypeVar

from quranki.sm2.review_state import AyahKey, ReviewItem


T = TypeVar("T")


def fill_in_order(
    pools: dict[str, list[T]],
    order: list[str],
    target_size: int
) -> list[T]:
    """
    Fill a session by walking pools in order until target_size is reached.
    """
    session: list[T] = []
    for name in order:
        for item in pools.get(name, []):
            if len(session) >= target_size:
                return session
            session.append(item)
    return session


def due_items_from_snapshot(
    items: list[ReviewItem],
    now: datetime,
    corpus_order: Callable[[AyahKey], int]
) -> list[ReviewItem]:
    """
    Filter and sort due items from a snapshot (no store calls).

    Ascending due_at; equal due_at falls back to corpus order.
    """
    due = [item for item in items if item.is_due(now)]
    due.sort(key=lambda item: (item.due_at, corpus_order(item.key)))
    return due


def sample_unseen(
    unseen: list[T],
    count: int,
    rng: Optional[random.Random] = None
) -> list[T]:
    """
    Sample up to `count` unseen candidates uniformly without replacement.
    """
    if count <= 0 or not unseen:
        return []
    rng = rng if rng is not None else random.Random()
    return rng.sample(unseen, min(count, len(unseen)))
