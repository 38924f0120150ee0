"""Session assembly for ayah review."""

from quranki.session_builders.ayah_builder import (
    build_ayah_pool_state,
    build_recall_window,
    build_session,
    create_session,
)
from quranki.session_builders.pool_types import PoolState

__all__ = [
    "build_ayah_pool_state",
    "build_recall_window",
    "build_session",
    "create_session",
    "PoolState",
]
