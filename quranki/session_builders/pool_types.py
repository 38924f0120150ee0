"""
Typed pool models shared across session builders.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from quranki.schemas import Ayah
from quranki.sm2.review_state import AyahKey, ReviewItem


@dataclass
class PoolState:
    """
    Launch-scoped pool state for a review session.

    Every prompt candidate sits in exactly one pool:
    - due: has an item for this scope kind with due_at <= now (sorted, most overdue first)
    - unseen: no item for this scope kind
    - scheduled: has an item that is not due yet (never prompted)
    """
    ayah_map: dict[AyahKey, Ayah]
    due: list[AyahKey] = field(default_factory=list)
    unseen: list[AyahKey] = field(default_factory=list)
    scheduled: list[AyahKey] = field(default_factory=list)
    items: dict[AyahKey, ReviewItem] = field(default_factory=dict)
    degraded: bool = False

