"""
Game Configuration Constants Module

Game rules shared by the engine and the services: leveling bands, timer
pacing, rewards and word validation. Application settings (database,
secrets, logging) live in app_config.py.
"""

import string
from typing import Final, Tuple

# Leveling
LEVEL_BAND_SIZE: Final[int] = 500
"""Score points per level; level 1 starts at score 0."""

# Round timer
TICK_INTERVAL_SECONDS: Final[int] = 1
TIMER_WARNING_SECONDS: Final[int] = 10
"""Remaining seconds at or below which the timer display shows a warning."""

# Words
WORD_MIN_LENGTH: Final[int] = 3
WORD_MAX_LENGTH: Final[int] = 10
DEFAULT_MAX_ATTEMPTS: Final[int] = 6
MAX_ATTEMPTS_LIMIT: Final[int] = 12

# Economy
STARTING_MONEY: Final[int] = 100
DAILY_DEFAULT_REWARD_MONEY: Final[int] = 50
DAILY_DEFAULT_REWARD_SCORE: Final[int] = 100
DAILY_DEFAULT_ATTEMPTS: Final[int] = 6
ROOM_WIN_REWARD_SCORE: Final[int] = 50
ROOM_WIN_REWARD_MONEY: Final[int] = 20
ADJUSTABLE_FIELDS: Final[Tuple[str, ...]] = ("money", "score")

# Rooms
ROOM_ID_LENGTH: Final[int] = 6
ROOM_ID_ALPHABET: Final[str] = string.ascii_uppercase + string.digits
ROOM_MAX_PLAYERS: Final[int] = 8


def normalize_word(word) -> str:
    """
    Validate a secret word or guess and return it uppercased.

    Raises:
        ValueError: If the word is not a string of letters within the
            allowed length range
    """
    if not word or not isinstance(word, str):
        raise ValueError("Word must be a non-empty string")

    normalized = word.strip().upper()

    if not normalized.isalpha():
        raise ValueError(f"Word '{normalized}' contains non-alphabetic characters")

    if not WORD_MIN_LENGTH <= len(normalized) <= WORD_MAX_LENGTH:
        raise ValueError(
            f"Word must be between {WORD_MIN_LENGTH} and {WORD_MAX_LENGTH} letters long"
        )

    return normalized


def parse_positive_int(value, default: int, upper: int = None) -> int:
    """Parse a form value as a positive int, falling back to the default."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed <= 0:
        return default
    if upper is not None and parsed > upper:
        return upper
    return parsed
