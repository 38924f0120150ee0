"""
Session Assembler - Due-First Ayah Sessions

Creates review sessions from two pools:
1. Due pool: ayahs whose review item for this scope kind has due_at <= now
2. Unseen pool: ayahs with no review item for this scope kind

Session Logic:
- Drop the last ayah of every surah (nothing follows it to recall)
- Fill with due ayahs, most overdue first
- Top up with unseen ayahs sampled at random
- Attach a recall window (ayahs before/after, same surah) to every prompt

Scheduled-but-not-due ayahs are never prompted. If review items cannot be
loaded the session degrades to unseen-only rather than failing.
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import Optional

from loguru import logger

from quranki import dates
from quranki.corpus import AyahCorpus
from quranki.errors import CorpusLookupError, ScopeEmptyError, StoreUnavailableError
from quranki.session_builders.pool_types import PoolState
from quranki.session_builders.pool_utils import (
    due_items_from_snapshot,
    fill_in_order,
    sample_unseen,
)
from quranki.session_requests import SessionRequest, normalize_session_request
from quranki.session_types import RecallWindow, Session, SessionItem
from quranki.sm2.review_state import AyahKey
from quranki.stores.base import ReviewItemStore


NO_PROMPTS_MESSAGE = "No ayahs in the selected scope can be used as prompts"
NOTHING_DUE_MESSAGE = "Nothing is due in the selected scope"
DEGRADED_MESSAGE = "Review history is unavailable; showing new ayahs only"


def build_ayah_pool_state(
    user_id: str,
    request: SessionRequest,
    corpus: AyahCorpus,
    item_store: ReviewItemStore,
    now: datetime
) -> PoolState:
    """
    Build launch-scoped pool state for an ayah session.

    Raises:
        ScopeEmptyError: The scope resolves to no ayahs at all
    """
    scope_ayahs = corpus.resolve_scope(request.scope_kind, request.scope_ids)
    if not scope_ayahs:
        raise ScopeEmptyError()

    ayah_map = {
        ayah.key: ayah for ayah in scope_ayahs
        if not corpus.is_last_in_surah(ayah.key)
    }

    try:
        snapshot = item_store.get(user_id, request.scope_kind)
    except StoreUnavailableError as e:
        logger.warning(f"Review items unavailable for {user_id}, using unseen pool only: {e}")
        return PoolState(ayah_map=ayah_map, unseen=list(ayah_map), degraded=True)

    items = {item.key: item for item in snapshot if item.key in ayah_map}

    due_items = due_items_from_snapshot(list(items.values()), now, corpus.order_of)
    due = [item.key for item in due_items]
    due_set = set(due)

    unseen: list[AyahKey] = []
    scheduled: list[AyahKey] = []
    for key in ayah_map:
        if key not in items:
            unseen.append(key)
        elif key not in due_set:
            scheduled.append(key)

    return PoolState(
        ayah_map=ayah_map,
        due=due,
        unseen=unseen,
        scheduled=scheduled,
        items=items,
    )


def build_recall_window(
    corpus: AyahCorpus,
    key: AyahKey,
    ayahs_before: int,
    ayahs_after: int
) -> RecallWindow:
    """
    Context ayahs around a prompt, clipped to its surah.

    A corpus lookup failure yields an empty window instead of an error.
    """
    try:
        return RecallWindow(
            before=tuple(corpus.preceding(key, ayahs_before)),
            after=tuple(corpus.following(key, ayahs_after)),
        )
    except CorpusLookupError as e:
        logger.warning(f"No recall window for {key[0]}:{key[1]}: {e}")
        return RecallWindow(context_available=False)


def create_session(
    pool_state: PoolState,
    request: SessionRequest,
    corpus: AyahCorpus,
    rng: Optional[random.Random] = None
) -> Session:
    """
    Create a review session from pool state.

    Args:
        pool_state: Launch-scoped pool state
        request: Normalized session request
        corpus: Corpus used for recall windows and page numbers
        rng: Random source for the unseen sample

    Returns:
        Session with due prompts first, then unseen prompts
    """
    desired = request.desired_count
    due_keys = pool_state.due[:desired]
    unseen_keys = sample_unseen(pool_state.unseen, desired - len(due_keys), rng)
    selected = fill_in_order(
        {"due": due_keys, "unseen": unseen_keys},
        ["due", "unseen"],
        desired
    )

    due_set = set(due_keys)
    mushaf = request.presentation_mode == "mushaf"
    items = []
    for key in selected:
        items.append(SessionItem(
            ayah=pool_state.ayah_map[key],
            status="due" if key in due_set else "unseen",
            review_item=pool_state.items.get(key),
            window=build_recall_window(corpus, key, request.ayahs_before, request.ayahs_after),
            page_number=corpus.page_number(key) if mushaf else None,
        ))

    message = None
    if pool_state.degraded:
        message = DEGRADED_MESSAGE
    elif not pool_state.ayah_map:
        message = NO_PROMPTS_MESSAGE
    elif not items and desired > 0:
        message = NOTHING_DUE_MESSAGE

    return Session(
        items=items,
        degraded=pool_state.degraded,
        message=message,
        due_count=len(due_keys),
        unseen_count=len(unseen_keys),
    )


def build_session(
    user_id: str,
    request: SessionRequest,
    corpus: AyahCorpus,
    item_store: ReviewItemStore,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None
) -> Session:
    """
    Assemble a review session for a user.

    Args:
        user_id: User identifier
        request: Scope and window settings
        corpus: Content corpus
        item_store: Source of review items
        now: Evaluation time (defaults to now, UTC); due checks compare absolute times
        rng: Random source for unseen sampling

    Returns:
        Session

    Raises:
        ScopeEmptyError: The scope resolves to no ayahs
    """
    now = dates.as_utc(now) if now is not None else dates.utcnow()
    request = normalize_session_request(request)

    pool_state = build_ayah_pool_state(user_id, request, corpus, item_store, now)
    session = create_session(pool_state, request, corpus, rng)
    logger.debug(
        f"Session for {user_id}: {session.due_count} due, {session.unseen_count} unseen "
        f"(scope {request.scope_kind.value} {list(request.scope_ids)})"
    )
    return session
