"""
Session item types returned by the session assembler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from quranki.schemas import Ayah
from quranki.sm2.review_state import ReviewItem


PromptStatus = Literal["due", "unseen"]


@dataclass(frozen=True)
class RecallWindow:
    """
    Context around a prompt.

    `before` ayahs are read-only cues; `after` ayahs are what the user must
    recall. Both stay inside the prompt's surah.
    """
    before: tuple[Ayah, ...] = ()
    after: tuple[Ayah, ...] = ()
    context_available: bool = True


@dataclass(frozen=True)
class SessionItem:
    """
    A single prompt within a session.
    """
    ayah: Ayah
    status: PromptStatus
    review_item: Optional[ReviewItem] = None
    window: RecallWindow = field(default_factory=RecallWindow)
    page_number: Optional[int] = None  # Mushaf mode only


@dataclass
class Session:
    """
    Ordered prompts for one review session (due first, then unseen).
    """
    items: list[SessionItem] = field(default_factory=list)
    degraded: bool = False  # Review items could not be loaded
    message: Optional[str] = None
    due_count: int = 0
    unseen_count: int = 0

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items
