"""
Types for review statistics.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewStats:
    """
    Dashboard counters for one user as of one moment.
    """
    due_today_count: int
    reviewed_today_count: int
    total_reviewed_count: int
    daily_average: float
    current_streak_days: int

    @classmethod
    def zero(cls) -> "ReviewStats":
        return cls(
            due_today_count=0,
            reviewed_today_count=0,
            total_reviewed_count=0,
            daily_average=0.0,
            current_streak_days=0,
        )


@dataclass(frozen=True)
class NewAyahAllowance:
    """
    How many never-reviewed ayahs the scope still has, and how many to show today.
    """
    available_new: int
    new_to_show: int
