"""
Abstract store contracts.

The scheduling core only talks to these interfaces. Two adapters implement
them: a "remote" one over SQLAlchemy and a "local" one over a JSON file.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from quranki.sm2.review_state import AyahKey, ReviewItem, ScopeKind


@dataclass(frozen=True)
class DailyLogEntry:
    """Gradings of one ayah on one local calendar day."""
    user_id: str
    date: date
    ayah_key: str  # "surah_ayah"
    count: int


class ReviewItemStore(ABC):
    """
    Durable per-user, per-ayah retention state.

    Subclasses raise StoreUnavailableError when the backend fails.
    """

    @abstractmethod
    def get(self, user_id: str, scope_kind: ScopeKind) -> list[ReviewItem]:
        """All items of a user scheduled under `scope_kind`."""
        pass

    @abstractmethod
    def get_one(self, user_id: str, key: AyahKey) -> Optional[ReviewItem]:
        """The item for one ayah, or None if it was never graded."""
        pass

    @abstractmethod
    def upsert(self, user_id: str, key: AyahKey, item: ReviewItem) -> None:
        """Insert or replace the item for (user_id, key) atomically."""
        pass

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[ReviewItem]:
        """All items of a user regardless of scope kind."""
        pass

    @abstractmethod
    def delete(self, user_id: str, key: AyahKey) -> bool:
        """Delete the item for one ayah. Returns whether a row was removed."""
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> int:
        """Delete every item of a user (explicit data reset). Returns rows removed."""
        pass


class DailyLogStore(ABC):
    """
    Per-user, per-day, per-ayah grading counters.
    """

    @abstractmethod
    def add(self, user_id: str, day: date, ayah_key: str, count: int) -> None:
        """Add `count` to the entry, creating it if absent."""
        pass

    def increment(self, user_id: str, day: date, ayah_key: str) -> None:
        """Add one grading to the entry."""
        self.add(user_id, day, ayah_key, 1)

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[DailyLogEntry]:
        pass

    def list_by_user_and_date_range(
        self,
        user_id: str,
        start: date,
        end: date
    ) -> list[DailyLogEntry]:
        """Entries with start <= date <= end."""
        return [
            entry for entry in self.list_by_user(user_id)
            if start <= entry.date <= end
        ]

    @abstractmethod
    def delete_user(self, user_id: str) -> int:
        pass
