"""
Services Package

Contains all business logic and service classes.
"""

from .auth_service import AuthService, get_auth_service, initialize_auth_service
from .game_service import GameService, get_game_service, initialize_game_service
from .room_service import RoomService, get_room_service, initialize_room_service
from .daily_service import DailyService, get_daily_service, initialize_daily_service
from .admin_service import AdminService, get_admin_service, initialize_admin_service
from .outcome_service import OutcomeRecorder

__all__ = [
    'AuthService', 'get_auth_service',
    'GameService', 'get_game_service',
    'RoomService', 'get_room_service',
    'DailyService', 'get_daily_service',
    'AdminService', 'get_admin_service',
    'OutcomeRecorder', 'initialize_services'
]


def initialize_services(db, config, scheduler=None) -> GameService:
    """
    Create every global service on one database and wire the outcome
    recorder into the game service.
    
    Args:
        db: pymongo Database
        config: Config class (JWT and admin settings)
        scheduler: Tick source for round timers
        
    Returns:
        The game service, for registering further listeners
    """
    auth_service = initialize_auth_service(db, config.JWT_SECRET, config.JWT_EXPIRATION_DAYS)
    game_service = initialize_game_service(scheduler)
    room_service = initialize_room_service(db, game_service)
    daily_service = initialize_daily_service(db)
    initialize_admin_service(db, config.ADMIN_PASSWORD, config.JWT_SECRET, config.ADMIN_TOKEN_HOURS)
    
    game_service.add_listener(OutcomeRecorder(auth_service, daily_service, room_service))
    return game_service
