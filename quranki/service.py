"""
Review service - caller-facing API.

Wires the corpus, the stores and the clock together:
- start_session(): assemble prompts for a scope
- grade_item(): schedule the next review and count the grading
- stats(): dashboard counters
- new_ayahs(): today's allowance of never-reviewed ayahs
- reset_user(): delete a user's review data
"""

from __future__ import annotations

import random
from datetime import date, datetime
from typing import Callable, Optional

from loguru import logger

from quranki import dates
from quranki.analytics import ReviewStats, build_review_stats, new_ayah_allowance
from quranki.analytics.types import NewAyahAllowance
from quranki.corpus import AyahCorpus
from quranki.daily_log import record_review
from quranki.errors import GradingNotCountedError, StoreUnavailableError
from quranki.schemas import ReviewSettings
from quranki.session_builders import build_session
from quranki.session_requests import SessionRequest
from quranki.session_types import Session
from quranki.sm2.constants import Quality
from quranki.sm2.review_state import AyahKey, ReviewItem, ScopeKind
from quranki.sm2.scheduler import next_state
from quranki.stores.base import DailyLogStore, ReviewItemStore


class ReviewService:
    """
    Review operations for any user, backed by one pair of stores.

    Args:
        corpus: Content corpus
        item_store: Review item store (local or remote)
        log_store: Daily log store (local or remote)
        tz: Review time zone (default: QURANKI_TIMEZONE)
        rng: Random source for unseen sampling
        clock: Returns the current aware datetime (default: UTC now)
    """

    def __init__(
        self,
        corpus: AyahCorpus,
        item_store: ReviewItemStore,
        log_store: DailyLogStore,
        tz: dates.TzLike = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.corpus = corpus
        self.item_store = item_store
        self.log_store = log_store
        self.tz = dates.resolve_tz(tz)
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock or dates.utcnow

    def _now(self, now: Optional[datetime]) -> datetime:
        return dates.as_utc(now if now is not None else self.clock())

    def start_session(
        self,
        user_id: str,
        request: SessionRequest,
        now: Optional[datetime] = None
    ) -> Session:
        """Assemble a review session (raises ScopeEmptyError for an empty scope)."""
        return build_session(
            user_id,
            request,
            self.corpus,
            self.item_store,
            now=self._now(now),
            rng=self.rng,
        )

    def grade_item(
        self,
        user_id: str,
        key: AyahKey,
        quality: Quality,
        scope_kind: ScopeKind,
        now: Optional[datetime] = None
    ) -> ReviewItem:
        """
        Record a graded recall.

        Persists the next state, then counts the grading in today's daily log.
        If the log write fails the previous state is restored before the
        StoreUnavailableError propagates, so the caller can simply retry.

        Returns:
            The persisted ReviewItem

        Raises:
            StoreUnavailableError: Nothing was recorded; safe to retry
            GradingNotCountedError: The state was saved but not counted; do not retry
        """
        key = (int(key[0]), int(key[1]))
        now = self._now(now)

        current = self.item_store.get_one(user_id, key)
        updated = next_state(
            current,
            quality,
            now,
            user_id=user_id,
            key=key,
            scope_kind=scope_kind,
            tz=self.tz,
        )
        day = dates.local_day(now, self.tz)

        self.item_store.upsert(user_id, key, updated)
        try:
            record_review(self.log_store, user_id, key, day)
        except StoreUnavailableError:
            self._restore_item(user_id, key, current, updated, day)
            raise

        logger.debug(f"Graded {key[0]}:{key[1]} for {user_id}: {Quality(quality).value} -> {updated!r}")
        return updated

    def _restore_item(
        self,
        user_id: str,
        key: AyahKey,
        previous: Optional[ReviewItem],
        updated: ReviewItem,
        day: date
    ) -> None:
        """Undo an upsert whose daily log write failed."""
        try:
            if previous is None:
                self.item_store.delete(user_id, key)
            else:
                self.item_store.upsert(user_id, key, previous)
        except StoreUnavailableError as exc:
            logger.error(f"Graded {key[0]}:{key[1]} for {user_id} but could not count or undo it: {exc}")
            raise GradingNotCountedError(
                f"Grading of {key[0]}:{key[1]} saved but not counted for {day}",
                item=updated,
                day=day,
            ) from exc
        logger.warning(f"Daily log unavailable, rolled back grading of {key[0]}:{key[1]} for {user_id}")

    def stats(self, user_id: str, now: Optional[datetime] = None) -> ReviewStats:
        """Dashboard counters (zeros if the stores fail)."""
        return build_review_stats(
            user_id,
            self.item_store,
            self.log_store,
            as_of=self._now(now),
            tz=self.tz,
        )

    def new_ayahs(self, user_id: str, settings: ReviewSettings) -> NewAyahAllowance:
        """Never-reviewed ayahs in the selected scope, capped at new_ayahs_per_day."""
        scope_ayahs = self.corpus.resolve_scope(settings.selection_type, settings.scope_ids)
        return new_ayah_allowance(
            scope_ayahs,
            self.item_store.list_by_user(user_id),
            settings.new_ayahs_per_day,
        )

    def reset_user(self, user_id: str) -> tuple[int, int]:
        """
        Delete all review items and daily logs of a user.

        Returns:
            (items removed, log entries removed)
        """
        items = self.item_store.delete_user(user_id)
        logs = self.log_store.delete_user(user_id)
        logger.warning(f"Reset review data for {user_id}: {items} items, {logs} log entries")
        return items, logs
