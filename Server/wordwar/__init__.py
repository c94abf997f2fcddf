"""
WordWar Game Server Application Package

Word-guessing game server: daily word, multiplayer rooms, a score and
currency economy and an admin console, built around the pure scoring
engine in ``wordwar.engine``.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.
    
    Services must be initialized before calling this so the WebSocket
    layer can subscribe to game events.
    
    Args:
        config_class: Configuration class to use
        
    Returns:
        Tuple of (Flask application, SocketIO instance)
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)
    
    # Register blueprints
    from .controllers.auth_controller import auth_bp
    from .controllers.game_controller import game_bp
    from .controllers.room_controller import room_bp
    from .controllers.admin_controller import admin_bp
    
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(room_bp, url_prefix='/api/rooms')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    
    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)
    
    # Store socketio instance for use in other modules
    app.socketio = socketio
    
    return app, socketio
