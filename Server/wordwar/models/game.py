"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class LetterFeedback(Enum):
    """Per-letter evaluation outcome, also used as the keyboard key state."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]


_PRECEDENCE = {
    LetterFeedback.CORRECT: 3,
    LetterFeedback.PRESENT: 2,
    LetterFeedback.ABSENT: 1,
}


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class TimerDisplay:
    """Render payload for the countdown ring."""
    remaining: int
    total: int
    warning: bool
    fraction: float


@dataclass
class GameState:
    """Client-facing game session snapshot."""
    game_id: str
    mode: str  # "daily" or "room"
    word_length: int
    current_round: int
    max_attempts: int
    game_over: bool
    won: bool
    guesses: List[str]
    guess_results: List[List[Tuple[str, str]]]  # (letter, feedback value) pairs
    letter_status: Dict[str, str]
    end_reason: Optional[str] = None  # "solved", "attempts", "timeout", "abandoned"
    answer: Optional[str] = None  # Only included when game is over
    room_id: Optional[str] = None
    timer: Optional[Dict] = field(default=None)
