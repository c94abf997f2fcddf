"""
Admin Controller

Admin console endpoints: login, player list, currency adjustment, daily
word and analytics.
"""

from flask import Blueprint, request, jsonify
from ..services.admin_service import get_admin_service
from ..services.daily_service import get_daily_service
from ..utils.decorators import require_admin
from ..utils.game_logger import game_logger

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/login', methods=['POST'])
def admin_login():
    admin_service = get_admin_service()
    if not admin_service:
        return jsonify({'success': False, 'error': 'Admin service unavailable'}), 500
    
    data = request.get_json(silent=True) or {}
    game_logger.log_user_action(request, 'admin_login')
    
    result = admin_service.login(data.get('password'))
    game_logger.log_server_response(request, 'admin_login', result['success'], result)
    return jsonify(result), 200 if result['success'] else 401


@admin_bp.route('/users', methods=['GET'])
@require_admin
def list_users():
    return jsonify({'success': True, 'users': get_admin_service().list_users()})


@admin_bp.route('/users/<user_id>/adjust', methods=['POST'])
@require_admin
def adjust_currency(user_id):
    """Add (or subtract) money or score for a player."""
    try:
        data = request.get_json(silent=True) or {}
        field = data.get('field')
        delta = data.get('delta')
        
        game_logger.log_user_action(request, 'adjust_currency', target_user=user_id, field=field, delta=delta)
        
        result = get_admin_service().adjust_currency(user_id, field, delta)
        game_logger.log_server_response(request, 'adjust_currency', result['success'], result)
        
        if result['success']:
            return jsonify(result)
        status = 404 if result['error'] == 'User not found' else 400
        return jsonify(result), status
        
    except Exception as e:
        game_logger.log_error(request, e, 'adjust_currency')
        return jsonify({'success': False, 'error': str(e)}), 500


@admin_bp.route('/daily-word', methods=['POST'])
@require_admin
def set_daily_word():
    daily_service = get_daily_service()
    if not daily_service:
        return jsonify({'success': False, 'error': 'Daily service unavailable'}), 500
    
    data = request.get_json(silent=True) or {}
    game_logger.log_user_action(request, 'set_daily_word')
    
    result = daily_service.set_daily_word(
        data.get('word'),
        reward_money=data.get('reward_money'),
        reward_score=data.get('reward_score'),
        attempts=data.get('attempts')
    )
    game_logger.log_server_response(request, 'set_daily_word', result['success'], result)
    return jsonify(result), 200 if result['success'] else 400


@admin_bp.route('/analytics', methods=['GET'])
@require_admin
def analytics():
    try:
        return jsonify({'success': True, 'analytics': get_admin_service().load_analytics()})
    except Exception as e:
        game_logger.log_error(request, e, 'analytics')
        return jsonify({'success': False, 'error': str(e)}), 500
