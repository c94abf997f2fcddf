"""
Game Engine Package

Pure game-scoring core: guess evaluation, keyboard aggregation, leveling
and achievements, and the round timer. No persistence, no network I/O.
"""

from .errors import WordWarError, LengthMismatch, InvalidTimerConfiguration
from .evaluator import EvaluationResult, evaluate_guess, is_solved, serialize_result
from .keyboard import KeyboardState, merge_keyboard_state, serialize_keyboard_state
from .progression import (
    ACHIEVEMENTS, Achievement, level, level_progress, next_level_score,
    player_progress, unlocked_achievements
)
from .scheduling import BackgroundTaskScheduler, ManualScheduler
from .timer import CountdownTimer, compute_display

__all__ = [
    'WordWarError', 'LengthMismatch', 'InvalidTimerConfiguration',
    'EvaluationResult', 'evaluate_guess', 'is_solved', 'serialize_result',
    'KeyboardState', 'merge_keyboard_state', 'serialize_keyboard_state',
    'ACHIEVEMENTS', 'Achievement', 'level', 'level_progress', 'next_level_score',
    'player_progress', 'unlocked_achievements',
    'BackgroundTaskScheduler', 'ManualScheduler',
    'CountdownTimer', 'compute_display'
]
