"""
SM-2 - Retention Scheduler

Main API for ayah review scheduling.

Each ayah a user has graded carries an SM-2 state (interval, repetitions,
ease factor). A two-button grade moves it forward:
- SUCCESS: 1 day, then 6 days, then previous interval x ease factor
- FAILURE: back to 1 day, repetitions reset

Quick start:
    from quranki import sm2

    # Initialize database
    sm2.init_db()

    # Grade an ayah (algorithm only, no DB calls)
    item = sm2.next_state(None, sm2.Quality.SUCCESS, now, tz="America/New_York",
                          user_id="u1", key=(2, 255), scope_kind=sm2.ScopeKind.SECTION)
"""

# Core scheduler API (algorithm logic)
from quranki.sm2.scheduler import (
    adjust_ease_factor,
    next_interval,
    next_state,
    round_half_up,
)

# Database API
from quranki.sm2.database import (
    create_db_engine,
    get_engine,
    init_db,
    make_session_factory,
    reset_db,
)

# Constants and parameters
from quranki.sm2.constants import (
    Quality,
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    MIN_INTERVAL,
    SECOND_INTERVAL,
)

# Item state
from quranki.sm2.review_state import (
    AyahKey,
    ReviewItem,
    ScopeKind,
    format_ayah_key,
    initialize_new_item,
    parse_ayah_key,
)


__all__ = [
    # Core algorithm
    "next_state",
    "next_interval",
    "adjust_ease_factor",
    "round_half_up",

    # Database operations
    "create_db_engine",
    "get_engine",
    "init_db",
    "make_session_factory",
    "reset_db",

    # Enums
    "Quality",
    "ScopeKind",

    # Item state
    "AyahKey",
    "ReviewItem",
    "format_ayah_key",
    "initialize_new_item",
    "parse_ayah_key",

    # Parameters
    "DEFAULT_EASE_FACTOR",
    "MIN_EASE_FACTOR",
    "MIN_INTERVAL",
    "SECOND_INTERVAL",
]
