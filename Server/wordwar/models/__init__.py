"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GameState, LetterFeedback, TimerDisplay, TimerStatus
from .user import PlayerStats, User
from .daily import DailyWord

__all__ = [
    'GameState', 'LetterFeedback', 'TimerDisplay', 'TimerStatus',
    'PlayerStats', 'User', 'DailyWord'
]
