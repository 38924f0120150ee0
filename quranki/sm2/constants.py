"""
SM-2 Constants and Parameters

All configurable parameters for the review scheduler in one place.
The source application only grades with two buttons (remembered / forgot),
so the continuous SM-2 quality-to-ease formula collapses to two deltas.
"""

from enum import Enum


# ---- Recall Quality ----

class Quality(str, Enum):
    """Binary recall outcome for a graded prompt."""
    SUCCESS = "success"  # Remembered the following ayahs
    FAILURE = "failure"  # Forgot


# ---- Defaults for a never-reviewed ayah ----

DEFAULT_INTERVAL = 0
DEFAULT_REPETITIONS = 0
DEFAULT_EASE_FACTOR = 2.5


# ---- Update Rule ----

MIN_EASE_FACTOR = 1.3     # Lower bound, no upper bound
MIN_INTERVAL = 1          # Interval after a failure or a first success
SECOND_INTERVAL = 6       # Interval after the second consecutive success

EASE_DELTA = {
    Quality.SUCCESS: +0.1,
    Quality.FAILURE: -0.2,
}


# ---- Session Configuration ----

SESSION_SIZE = 20         # Prompts per session (promptsPerSession)
AYAHS_AFTER = 2           # Ayahs the user must recall after the prompt
AYAHS_BEFORE_MUSHAF = 2   # Context ayahs shown in the page-image review
NEW_AYAHS_PER_DAY = 5
