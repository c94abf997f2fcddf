"""
WordWar Game Server - Main Entry Point

This is the main entry point for the WordWar game server.
It connects to MongoDB, initializes all services and starts the
Flask-SocketIO application.
"""

import threading
import time
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi
from wordwar import create_app
from wordwar.config import Config
from wordwar.engine.scheduling import BackgroundTaskScheduler
from wordwar.services import initialize_services
from wordwar.services.game_service import get_game_service
from wordwar.utils.game_logger import game_logger

FINISHED_GAME_TTL_SECONDS = 600
CLEANUP_INTERVAL_SECONDS = 60


def finished_game_cleanup_worker():
    """
    Background worker that drops finished game sessions from memory once
    clients have had time to fetch the final state.
    """
    while True:
        try:
            game_service = get_game_service()
            if game_service:
                removed = game_service.cleanup_finished_games(FINISHED_GAME_TTL_SECONDS)
                if removed:
                    game_logger.logger.info(f"Game cleanup: removed {removed} finished game(s)")
        except Exception as e:
            game_logger.logger.error(f"Error in game cleanup worker: {e}")
        
        time.sleep(CLEANUP_INTERVAL_SECONDS)


def connect_database(config):
    """Connect to MongoDB and return the configured database."""
    client = MongoClient(config.MONGO_URI, server_api=ServerApi('1'))
    client.admin.command('ping')
    return client, client[config.MONGO_DB_NAME]


def main():
    """Main function to initialize services and start the server."""
    client = None
    try:
        if not Config.MONGO_URI or not Config.JWT_SECRET:
            raise RuntimeError("MONGO_URI and JWT_SECRET must be configured")
        
        print("Connecting to MongoDB...")
        client, db = connect_database(Config)
        print("✓ Connected to MongoDB")
        
        game_service = initialize_services(db, Config)
        print("✓ Services initialized")
        if not Config.ADMIN_PASSWORD:
            print("✗ ADMIN_PASSWORD not configured, admin console disabled")
        
        app, socketio = create_app(Config)
        game_service.scheduler = BackgroundTaskScheduler(socketio)
        print("✓ Flask application created successfully")
        
        cleanup_thread = threading.Thread(target=finished_game_cleanup_worker, daemon=True)
        cleanup_thread.start()
        
        game_logger.logger.info("WordWar Server Starting")
        
        print(f"\nStarting WordWar Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)
        
        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)
        
    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("WordWar Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if client is not None:
            client.close()


if __name__ == '__main__':
    main()
