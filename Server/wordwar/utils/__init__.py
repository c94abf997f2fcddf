"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_auth, require_admin, websocket_auth_required
from .helpers import generate_room_id, today_str, get_bearer_token
from .game_logger import game_logger

__all__ = [
    'require_auth', 'require_admin', 'websocket_auth_required',
    'generate_room_id', 'today_str', 'get_bearer_token', 'game_logger'
]
