"""
Configuration constants for the workout DSL.

All fixed tokens and defaults of the notation are centralized here.
User-tunable settings (units, notifications, share backend) come from
YAML via engine/config_loader.py.
"""

from typing import Final

# =============================================================================
# LINE STRUCTURE
# =============================================================================

COMMENT_TOKEN: Final[str] = "//"  # Everything after it is a note
NOTE_SEPARATOR: Final[str] = " "  # Joins consecutive comment lines
SET_SEPARATOR: Final[str] = ","  # Splits a line into several set expressions
IMPLICIT_EXERCISE_NAME: Final[str] = "Unnamed"  # Set data before any header

# Longest digit run read as a number (ASCII digits only)
MAX_NUMBER_DIGITS: Final[int] = 300

# Trailing rest suffix, e.g. "Squat r90" or "5*135 r45"
REST_SUFFIX_PATTERN: Final[str] = rf"\s+r([0-9]{{1,{MAX_NUMBER_DIGITS}}})\s*$"

# =============================================================================
# SET EXPRESSIONS
# =============================================================================

MULTIPLY_TOKENS: Final[frozenset[str]] = frozenset({"X", "*"})
BODYWEIGHT_TOKEN: Final[str] = "BW"

# Canonical rendering used when writing results back into the text
RESULT_SEPARATOR: Final[str] = "*"
RESULT_LIST_SEPARATOR: Final[str] = ", "

# =============================================================================
# CARDIO
# =============================================================================

# Metres per distance unit
DISTANCE_UNITS: Final[dict[str, float]] = {
    "mi": 1609.344,
    "km": 1000.0,
    "m": 1.0,
}
CALORIES_PREFIX: Final[str] = "C"

# =============================================================================
# SESSION
# =============================================================================

TICK_SECONDS: Final[int] = 1  # Rest countdown granularity

# =============================================================================
# SHARING
# =============================================================================

# 32 symbols; no 0/O or 1/I to keep codes readable aloud
SHARE_CODE_ALPHABET: Final[str] = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SHARE_CODE_LENGTH: Final[int] = 6
DEFAULT_SHARE_NAME: Final[str] = "Shared Workout"
SHARE_TABLE: Final[str] = "shared_workouts"

# =============================================================================
# DISPLAY DEFAULTS
# =============================================================================

DEFAULT_WEIGHT_UNIT: Final[str] = "lbs"
DEFAULT_DISTANCE_UNIT: Final[str] = "mi"

# First-run sample text
ONBOARDING_TEXT: Final[str] = "\n".join([
    "Squat r90",
    "5*135*3",
    "5*185*3 // Felt strong",
    "",
    "Bench Press",
    "8*135 r45, 8*155 r60, 6*155",
    "",
    "Pull-ups",
    "10BW",
])
