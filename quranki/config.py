"""
Environment configuration.

Values are read from the process environment, with a `.env` file in the
working directory loaded first.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment
load_dotenv()

DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_LOCAL_STORE_PATH = Path("logs/local_store.json")


def get_timezone_name() -> str:
    """IANA zone used for calendar-day boundaries."""
    return os.getenv("QURANKI_TIMEZONE") or DEFAULT_TIMEZONE


def get_local_store_path() -> Path:
    """Path of the JSON file backing the local (offline) stores."""
    value = os.getenv("QURANKI_LOCAL_STORE")
    return Path(value) if value else DEFAULT_LOCAL_STORE_PATH


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_default_user_id() -> str:
    """Get default user id for scoping review data."""
    return os.getenv("DEFAULT_USER_ID", "local")
