"""
Analytics package exports.
"""

from quranki.analytics.metrics import daily_review_counts
from quranki.analytics.service import (
    build_review_stats,
    compute_stats,
    new_ayah_allowance,
)
from quranki.analytics.types import NewAyahAllowance, ReviewStats

__all__ = [
    "build_review_stats",
    "compute_stats",
    "daily_review_counts",
    "new_ayah_allowance",
    "NewAyahAllowance",
    "ReviewStats",
]
