"""
WebSocket Event Handlers

Handles Socket.IO channels for rooms and per-player game updates, and
forwards game service events (timer ticks, finished games) to them.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..services.game_service import get_game_service
from ..services.room_service import get_room_service
from ..utils.decorators import websocket_auth_required
from ..utils.game_logger import game_logger

# user_id -> socket_id
connected_users = {}


def user_channel(user_id):
    return f"user_{user_id}"


def room_channel(room_id):
    return f"room_{room_id}"


def make_game_event_forwarder(socketio):
    """Build a GameService listener that relays events to Socket.IO channels."""
    
    def forward(event, payload):
        if event == 'timer_tick':
            socketio.emit('timer_tick', payload, room=user_channel(payload['user_id']))
            if payload.get('room_id'):
                socketio.emit('timer_tick', payload, room=room_channel(payload['room_id']))
            return
        
        if event == 'game_finished':
            socketio.emit('game_finished', payload, room=user_channel(payload['user_id']))
            room_id = payload.get('room_id')
            if room_id:
                # Other players may still be guessing the same word
                public_payload = {key: value for key, value in payload.items() if key != 'target_word'}
                socketio.emit('game_finished', public_payload, room=room_channel(room_id))
                room_service = get_room_service()
                room = room_service.get_room(room_id) if room_service else None
                if room:
                    socketio.emit('room_state_update', {'room': room}, room=room_channel(room_id))
    
    return forward


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""
    
    game_service = get_game_service()
    if game_service:
        game_service.add_listener(make_game_event_forwarder(socketio))
    
    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass
    
    @socketio.on('disconnect')
    def handle_disconnect():
        """Forget the socket; running games keep their timers."""
        for user_id, socket_id in list(connected_users.items()):
            if socket_id == request.sid:
                del connected_users[user_id]
                game_logger.logger.info(f"WebSocket: user {user_id} disconnected")
                break
    
    @socketio.on('join_player_channel')
    @websocket_auth_required
    def handle_join_player_channel(data, user=None):
        """Subscribe to the player's own timer and game events."""
        connected_users[user['id']] = request.sid
        join_room(user_channel(user['id']))
        emit('player_channel_joined', {'user_id': user['id']})
    
    @socketio.on('join_room_channel')
    @websocket_auth_required
    def handle_join_room_channel(data, user=None):
        """Subscribe to updates for one multiplayer room."""
        room_service = get_room_service()
        if not room_service:
            emit('error', {'error': 'Room service unavailable'})
            return
        
        room_id = str(data.get('room_id') or '').upper()
        room = room_service.get_room(room_id) if room_id else None
        if not room:
            emit('error', {'error': 'Room not found'})
            return
        
        connected_users[user['id']] = request.sid
        join_room(room_channel(room_id))
        game_logger.logger.info(f"WebSocket: {user['username']} joined room channel {room_id}")
        
        emit('room_state_update', {'room': room})
        emit('player_joined', {
            'user_id': user['id'],
            'username': user['username']
        }, room=room_channel(room_id), include_self=False)
    
    @socketio.on('leave_room_channel')
    @websocket_auth_required
    def handle_leave_room_channel(data, user=None):
        """Unsubscribe from a room's updates."""
        room_id = str(data.get('room_id') or '').upper()
        if not room_id:
            emit('error', {'error': 'Room ID is required'})
            return
        
        leave_room(room_channel(room_id))
        emit('player_left', {
            'user_id': user['id'],
            'username': user['username']
        }, room=room_channel(room_id), include_self=False)
