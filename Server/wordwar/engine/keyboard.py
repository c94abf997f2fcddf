"""
Keyboard State Aggregator

Folds evaluation results into the per-letter key colouring shown on the
on-screen keyboard.
"""

from typing import Dict, Sequence

from ..models.game import LetterFeedback
from .errors import LengthMismatch

KeyboardState = Dict[str, LetterFeedback]


def merge_keyboard_state(state: KeyboardState,
                         guess: str,
                         result: Sequence[LetterFeedback]) -> KeyboardState:
    """
    Update the keyboard map in place with one evaluated guess.

    A letter only moves to a higher-precedence status, so a key that is
    already correct stays correct for the rest of the session.

    Args:
        state: Letter -> best feedback seen so far (owned by the session)
        guess: The evaluated guess
        result: Feedback for each position of the guess

    Returns:
        The same state mapping, updated
    """
    guess = guess.upper()
    if len(guess) != len(result):
        raise LengthMismatch(len(guess), len(result))

    for letter, new_status in zip(guess, result):
        current = state.get(letter)
        current_precedence = current.precedence if current else 0
        if new_status.precedence > current_precedence:
            state[letter] = new_status

    return state


def serialize_keyboard_state(state: KeyboardState) -> Dict[str, str]:
    """Convert keyboard state to plain strings for JSON serialization."""
    return {letter: status.value for letter, status in sorted(state.items())}
