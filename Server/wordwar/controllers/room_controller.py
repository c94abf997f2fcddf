"""
Room Controller

Handles all multiplayer room HTTP endpoints.
"""

from flask import Blueprint, current_app, request, jsonify
from ..services.room_service import get_room_service
from ..utils.decorators import require_auth
from ..utils.game_logger import game_logger

room_bp = Blueprint('room', __name__)


def _broadcast_room(room):
    """Push the new room state to everyone on the room's channel."""
    socketio = getattr(current_app, 'socketio', None)
    if socketio and room:
        socketio.emit('room_state_update', {'room': room}, room=f"room_{room['id']}")


def _room_response(action, result, room_id=None, success_status=200):
    if result['success']:
        game_logger.log_server_response(request, action, True, result, room_id=room_id)
        _broadcast_room(result.get('room'))
        return jsonify(result), success_status
    
    game_logger.log_server_response(request, action, False, result, room_id=room_id)
    status = 404 if result.get('error') == 'Room not found' else 400
    return jsonify(result), status


@room_bp.route('', methods=['POST'])
@require_auth
def create_room():
    """Create a room with the host's secret word."""
    try:
        room_service = get_room_service()
        if not room_service:
            return jsonify({'success': False, 'error': 'Room service unavailable'}), 500
        
        data = request.get_json(silent=True) or {}
        user = request.user
        game_logger.log_user_action(request, 'create_room')
        
        result = room_service.create_room(
            user['id'], user['username'], data.get('word'),
            data.get('max_attempts'), data.get('time_limit')
        )
        return _room_response('create_room', result, success_status=201)
        
    except Exception as e:
        game_logger.log_error(request, e, 'create_room')
        return jsonify({'success': False, 'error': str(e)}), 500


@room_bp.route('', methods=['GET'])
@require_auth
def list_rooms():
    """Rooms still waiting for players."""
    room_service = get_room_service()
    if not room_service:
        return jsonify({'success': False, 'error': 'Room service unavailable'}), 500
    
    return jsonify({'success': True, 'rooms': room_service.list_open_rooms()})


@room_bp.route('/<room_id>', methods=['GET'])
@require_auth
def get_room(room_id):
    room_service = get_room_service()
    if not room_service:
        return jsonify({'success': False, 'error': 'Room service unavailable'}), 500
    
    room = room_service.get_room(room_id)
    if room is None:
        return jsonify({'success': False, 'error': 'Room not found'}), 404
    
    return jsonify({'success': True, 'room': room})


@room_bp.route('/<room_id>/join', methods=['POST'])
@require_auth
def join_room(room_id):
    try:
        room_service = get_room_service()
        if not room_service:
            return jsonify({'success': False, 'error': 'Room service unavailable'}), 500
        
        user = request.user
        game_logger.log_user_action(request, 'join_room', room_id=room_id)
        
        result = room_service.join_room(room_id, user['id'], user['username'])
        return _room_response('join_room', result, room_id)
        
    except Exception as e:
        game_logger.log_error(request, e, 'join_room')
        return jsonify({'success': False, 'error': str(e)}), 500


@room_bp.route('/<room_id>/leave', methods=['POST'])
@require_auth
def leave_room(room_id):
    try:
        room_service = get_room_service()
        if not room_service:
            return jsonify({'success': False, 'error': 'Room service unavailable'}), 500
        
        game_logger.log_user_action(request, 'leave_room', room_id=room_id)
        
        result = room_service.leave_room(room_id, request.user['id'])
        return _room_response('leave_room', result, room_id)
        
    except Exception as e:
        game_logger.log_error(request, e, 'leave_room')
        return jsonify({'success': False, 'error': str(e)}), 500


@room_bp.route('/<room_id>/start', methods=['POST'])
@require_auth
def start_room(room_id):
    """Host starts the round; every player gets a game on the room word."""
    try:
        room_service = get_room_service()
        if not room_service:
            return jsonify({'success': False, 'error': 'Room service unavailable'}), 500
        
        game_logger.log_user_action(request, 'start_room', room_id=room_id)
        
        result = room_service.start_room(room_id, request.user['id'])
        response = _room_response('start_room', result, room_id)
        if result['success']:
            socketio = getattr(current_app, 'socketio', None)
            if socketio:
                socketio.emit('room_started', {
                    'room_id': result['room']['id'],
                    'games': result['games']
                }, room=f"room_{result['room']['id']}")
        return response
        
    except Exception as e:
        game_logger.log_error(request, e, 'start_room')
        return jsonify({'success': False, 'error': str(e)}), 500
