"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    LEVEL_BAND_SIZE, TIMER_WARNING_SECONDS, DEFAULT_MAX_ATTEMPTS,
    normalize_word, parse_positive_int
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'LEVEL_BAND_SIZE', 'TIMER_WARNING_SECONDS', 'DEFAULT_MAX_ATTEMPTS',
    'normalize_word', 'parse_positive_int'
]
