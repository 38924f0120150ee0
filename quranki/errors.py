"""
Error taxonomy for the review core.
"""

from __future__ import annotations


class QuranKiError(Exception):
    """Base class for review-core errors."""


class ScopeEmptyError(QuranKiError):
    """The requested scope resolves to zero ayahs; a session cannot start."""

    def __init__(self, message: str = "no content in scope"):
        super().__init__(message)


class StoreUnavailableError(QuranKiError):
    """A review-item or daily-log store failed to respond."""


class CorpusLookupError(QuranKiError):
    """An ayah or surah could not be found in the content corpus."""


class GradingNotCountedError(StoreUnavailableError):
    """
    A grading advanced the ayah's schedule but was not counted in the daily log,
    and the previous schedule could not be put back.

    Do not grade the ayah again. `item` is the persisted state; count the
    grading with daily_log.record_review(..., day) once the log store is back.
    """

    def __init__(self, message: str, item, day):
        super().__init__(message)
        self.item = item
        self.day = day
