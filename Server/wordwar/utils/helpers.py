"""
Helper Functions

Contains utility functions used throughout the application.
"""

import datetime
import secrets
from typing import Optional

from ..config.game_settings import ROOM_ID_ALPHABET, ROOM_ID_LENGTH


def generate_room_id(length: int = ROOM_ID_LENGTH) -> str:
    """Short uppercase room code players can type in."""
    return ''.join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(length))


def today_str(now: Optional[datetime.datetime] = None) -> str:
    """Today's UTC date as YYYY-MM-DD."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return now.date().isoformat()


def get_bearer_token(request_obj) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer ...' header."""
    auth_header = request_obj.headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    return auth_header.split(' ', 1)[1].strip() or None
