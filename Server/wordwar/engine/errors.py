"""
Engine Errors

Exceptions raised by the pure game-scoring engine. They are raised
synchronously to the immediate caller and never recovered inside the engine.
"""


class WordWarError(Exception):
    """Base class for engine errors."""


class LengthMismatch(WordWarError, ValueError):
    """Guess and secret (or guess and evaluation) differ in length."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected a word of length {expected}, got {actual}")


class InvalidTimerConfiguration(WordWarError, ValueError):
    """Timer constructed with a non-positive or non-integer duration."""
