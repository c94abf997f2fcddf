"""
Authentication Controller

Handles all account-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..engine.progression import player_progress
from ..services.auth_service import get_auth_service
from ..utils.decorators import require_auth
from ..utils.game_logger import game_logger

auth_bp = Blueprint('auth', __name__)


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Authentication service unavailable'
    }), 500


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user."""
    try:
        auth_service = get_auth_service()
        if not auth_service:
            return _service_unavailable()
        
        data = request.get_json(silent=True)
        if not data:
            return jsonify({
                'success': False,
                'error': 'Request body is required'
            }), 400
        
        username = data.get('username')
        
        game_logger.log_user_action(request, 'register', extra_data={'username': username})
        
        result = auth_service.register_user(username, data.get('password'), data.get('photo_url', ''))
        
        if result['success']:
            game_logger.log_server_response(request, 'register', True, result)
            return jsonify(result), 201
        else:
            game_logger.log_server_response(request, 'register', False, result)
            return jsonify(result), 400
            
    except Exception as e:
        game_logger.log_error(request, e, 'register')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'register', False, error_response)
        return jsonify(error_response), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login a user and return JWT token."""
    try:
        auth_service = get_auth_service()
        if not auth_service:
            return _service_unavailable()
        
        data = request.get_json(silent=True)
        if not data:
            return jsonify({
                'success': False,
                'error': 'Request body is required'
            }), 400
        
        username = data.get('username')
        
        game_logger.log_user_action(request, 'login', extra_data={'username': username})
        
        result = auth_service.login_user(username, data.get('password'))
        
        if result['success']:
            game_logger.log_server_response(request, 'login', True, result)
            return jsonify(result)
        else:
            game_logger.log_server_response(request, 'login', False, result)
            return jsonify(result), 401
            
    except Exception as e:
        game_logger.log_error(request, e, 'login')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'login', False, error_response)
        return jsonify(error_response), 500


@auth_bp.route('/logout', methods=['POST'])
@require_auth
def logout():
    """Mark the current user offline."""
    auth_service = get_auth_service()
    game_logger.log_user_action(request, 'logout')
    
    result = auth_service.logout_user(request.user['id'])
    game_logger.log_server_response(request, 'logout', result['success'], result)
    return jsonify(result), 200 if result['success'] else 400


@auth_bp.route('/verify', methods=['GET'])
@require_auth
def verify_token():
    """Verify JWT token and return user info."""
    return jsonify({
        'success': True,
        'user': request.user
    })


@auth_bp.route('/profile', methods=['GET'])
@require_auth
def profile():
    """Current user with level progress and the full achievement catalog."""
    user = request.user
    return jsonify({
        'success': True,
        'user': user,
        'progress': player_progress(user['stats'])
    })


@auth_bp.route('/account', methods=['DELETE'])
@require_auth
def delete_account():
    """Permanently delete the current user's account."""
    try:
        auth_service = get_auth_service()
        game_logger.log_user_action(request, 'delete_account')
        
        result = auth_service.delete_account(request.user['id'])
        game_logger.log_server_response(request, 'delete_account', result['success'], result)
        return jsonify(result), 200 if result['success'] else 404
        
    except Exception as e:
        game_logger.log_error(request, e, 'delete_account')
        return jsonify({'success': False, 'error': str(e)}), 500
