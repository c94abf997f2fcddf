"""
Guess Evaluator

Implements the Wordle letter evaluation algorithm used for every mode
(daily word, rooms and the stateless /evaluate endpoint).
"""

from typing import List, Optional, Sequence, Tuple

from ..models.game import LetterFeedback
from .errors import LengthMismatch

EvaluationResult = Tuple[LetterFeedback, ...]


def evaluate_guess(secret: str, guess: str) -> EvaluationResult:
    """
    Compare a guess against the secret word, position by position.

    Exact matches are resolved first so they take priority over
    position-free matches. A letter is credited at most as many times
    as it occurs in the secret; when several occurrences remain, the
    leftmost one is consumed.

    Args:
        secret: The word being guessed (any case)
        guess: The submitted word, same length as the secret

    Returns:
        Tuple of LetterFeedback, one entry per guess position

    Raises:
        LengthMismatch: If the words differ in length
    """
    secret = secret.upper()
    guess = guess.upper()

    if len(guess) != len(secret):
        raise LengthMismatch(len(secret), len(guess))

    result = [LetterFeedback.ABSENT] * len(guess)

    # Working copies; consumed letters are replaced with None
    secret_chars: List[Optional[str]] = list(secret)
    guess_chars: List[Optional[str]] = list(guess)

    # First pass: exact position matches
    for i, letter in enumerate(guess):
        if letter == secret_chars[i]:
            result[i] = LetterFeedback.CORRECT
            secret_chars[i] = None
            guess_chars[i] = None

    # Second pass: letters present elsewhere in the remaining secret
    for i, letter in enumerate(guess_chars):
        if letter is None:
            continue
        if letter in secret_chars:
            result[i] = LetterFeedback.PRESENT
            secret_chars[secret_chars.index(letter)] = None

    return tuple(result)


def is_solved(result: Sequence[LetterFeedback]) -> bool:
    """True when every position of an evaluation is correct."""
    return bool(result) and all(status is LetterFeedback.CORRECT for status in result)


def serialize_result(guess: str, result: Sequence[LetterFeedback]) -> List[Tuple[str, str]]:
    """Pair each guess letter with its feedback value for JSON responses."""
    return [(letter, status.value) for letter, status in zip(guess.upper(), result)]
