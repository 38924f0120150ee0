"""
Scope selection requests used to build review sessions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from quranki.sm2.constants import AYAHS_AFTER, AYAHS_BEFORE_MUSHAF, SESSION_SIZE
from quranki.sm2.review_state import ScopeKind


PRESENTATION_MODES = ("text", "mushaf")


@dataclass(frozen=True)
class SessionRequest:
    """
    What to review and how much context to show around each prompt.

    ayahs_before=None means "the presentation mode's default".
    """
    scope_kind: ScopeKind
    scope_ids: Tuple[int, ...]
    desired_count: int = SESSION_SIZE
    ayahs_before: Optional[int] = None
    ayahs_after: int = AYAHS_AFTER
    presentation_mode: str = "text"


def default_ayahs_before(presentation_mode: str) -> int:
    """Read-only context ayahs shown before each prompt."""
    if presentation_mode == "mushaf":
        return AYAHS_BEFORE_MUSHAF
    return 0


def _non_negative(value: object, default: int) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return default


def _unique_in_order(values) -> Tuple[int, ...]:
    seen: set[int] = set()
    result: list[int] = []
    for value in values or ():
        value = int(value)
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return tuple(result)


def normalize_session_request(request: SessionRequest) -> SessionRequest:
    """
    Normalize a request to the latest SessionRequest schema.

    Clamps negative counts to 0, fills the mode's ayahs_before default and
    drops duplicate scope ids (first occurrence wins).
    """
    mode = request.presentation_mode
    if mode not in PRESENTATION_MODES:
        raise ValueError(f"Unknown presentation mode: {mode!r}")

    ayahs_before = request.ayahs_before
    if ayahs_before is None:
        ayahs_before = default_ayahs_before(mode)

    return SessionRequest(
        scope_kind=ScopeKind(request.scope_kind),
        scope_ids=_unique_in_order(request.scope_ids),
        desired_count=_non_negative(request.desired_count, SESSION_SIZE),
        ayahs_before=_non_negative(ayahs_before, 0),
        ayahs_after=_non_negative(request.ayahs_after, AYAHS_AFTER),
        presentation_mode=mode,
    )
