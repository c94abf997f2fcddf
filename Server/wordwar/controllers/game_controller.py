"""
Game Controller

Handles daily-word play, guess submission and player progress endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, current_app, request, jsonify
from ..engine.errors import LengthMismatch
from ..engine.evaluator import evaluate_guess, serialize_result
from ..engine.progression import player_progress
from ..services.auth_service import get_auth_service
from ..services.daily_service import get_daily_service
from ..services.game_service import get_game_service
from ..utils.decorators import require_auth
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _unavailable(name):
    return jsonify({
        'success': False,
        'error': f'{name} service unavailable'
    }), 500


def _owned_game(game_service, game_id):
    """Return (game, error_response) for the current user's game."""
    game = game_service.get_game(game_id)
    if game is None:
        return None, (jsonify({'success': False, 'error': 'Game not found'}), 404)
    if game['user_id'] != request.user['id']:
        return None, (jsonify({'success': False, 'error': 'This game belongs to another player'}), 403)
    return game, None


@game_bp.route('/daily/status', methods=['GET'])
@require_auth
def daily_status():
    """Today's daily word settings and whether the user already played."""
    daily_service = get_daily_service()
    if not daily_service:
        return _unavailable('Daily')
    
    daily = daily_service.get_daily_word()
    return jsonify({
        'success': True,
        'daily': daily.public_dict() if daily else None,
        'played': daily_service.has_played_today(request.user['id']),
        'results': daily_service.get_daily_results()
    })


@game_bp.route('/daily/start', methods=['POST'])
@require_auth
def start_daily():
    """Start (or resume) the current user's daily game."""
    try:
        game_service = get_game_service()
        daily_service = get_daily_service()
        if not game_service or not daily_service:
            return _unavailable('Game')
        
        user = request.user
        game_logger.log_user_action(request, 'start_daily')
        
        daily = daily_service.get_daily_word()
        if daily is None:
            error_response = {'success': False, 'error': 'No daily word has been set for today'}
            game_logger.log_server_response(request, 'start_daily', False, error_response)
            return jsonify(error_response), 404
        
        if daily_service.has_played_today(user['id']):
            error_response = {'success': False, 'error': 'You have already played today'}
            game_logger.log_server_response(request, 'start_daily', False, error_response)
            return jsonify(error_response), 409
        
        game_id, _ = game_service.find_or_create_game(
            daily.word,
            user['id'],
            mode='daily',
            max_attempts=daily.attempts,
            time_limit=current_app.config.get('ROUND_SECONDS'),
            username=user['username'],
            daily_date=daily.date,
            reward_score=daily.reward_score,
            reward_money=daily.reward_money
        )
        
        state = game_service.get_game_state(game_id)
        response_data = {
            'success': True,
            'game_id': game_id,
            'state': asdict(state)
        }
        game_logger.log_server_response(
            request, 'start_daily', True, response_data, game_id,
            word_length=state.word_length, max_attempts=state.max_attempts
        )
        return jsonify(response_data), 201
        
    except Exception as e:
        game_logger.log_error(request, e, 'start_daily')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'start_daily', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>/state', methods=['GET'])
@require_auth
def get_state(game_id):
    """Get current game state."""
    game_service = get_game_service()
    if not game_service:
        return _unavailable('Game')
    
    _, error = _owned_game(game_service, game_id)
    if error:
        return error
    
    state = game_service.get_game_state(game_id)
    return jsonify({
        'success': True,
        'state': asdict(state)
    })


@game_bp.route('/game/<game_id>/guess', methods=['POST'])
@require_auth
def make_guess(game_id):
    """Submit a guess for validation and evaluation."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable('Game')
        
        data = request.get_json(silent=True)
        if not data or 'guess' not in data:
            error_response = {
                'success': False,
                'error': 'Guess is required'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
            return jsonify(error_response), 400
        
        _, error = _owned_game(game_service, game_id)
        if error:
            return error
        
        guess = data['guess']
        user_id = request.user['id']
        game_logger.log_user_action(request, 'submit_guess', game_id, guess=guess)
        
        is_valid, error_message = game_service.is_valid_guess(game_id, guess, user_id)
        if not is_valid:
            error_response = {
                'success': False,
                'error': error_message
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
            return jsonify(error_response), 400
        
        state = game_service.make_guess(game_id, guess, user_id)
        if state is None:
            error_response = {
                'success': False,
                'error': 'Game is already over'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
            return jsonify(error_response), 409
        
        response_data = {
            'success': True,
            'state': asdict(state)
        }
        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, game_id,
            current_round=state.current_round, game_over=state.game_over, won=state.won
        )
        return jsonify(response_data)
        
    except Exception as e:
        game_logger.log_error(request, e, 'submit_guess', game_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>/abandon', methods=['POST'])
@require_auth
def abandon_game(game_id):
    """Give up a running game; it counts as a loss."""
    game_service = get_game_service()
    if not game_service:
        return _unavailable('Game')
    
    _, error = _owned_game(game_service, game_id)
    if error:
        return error
    
    game_logger.log_user_action(request, 'abandon_game', game_id)
    if not game_service.abandon_game(game_id, request.user['id']):
        return jsonify({'success': False, 'error': 'Game is already over'}), 409
    
    return jsonify({
        'success': True,
        'state': asdict(game_service.get_game_state(game_id))
    })


@game_bp.route('/evaluate', methods=['POST'])
def evaluate():
    """Evaluate a guess against a given word without any game session."""
    data = request.get_json(silent=True) or {}
    secret = data.get('secret')
    guess = data.get('guess')
    
    if not isinstance(secret, str) or not isinstance(guess, str) or not secret or not guess:
        return jsonify({'success': False, 'error': 'secret and guess are required'}), 400
    
    try:
        result = evaluate_guess(secret, guess)
    except LengthMismatch as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    
    return jsonify({
        'success': True,
        'result': [status.value for status in result],
        'letters': serialize_result(guess, result)
    })


@game_bp.route('/progress/<user_id>', methods=['GET'])
def get_progress(user_id):
    """Public level and achievement progress for a player."""
    auth_service = get_auth_service()
    if not auth_service:
        return _unavailable('Authentication')
    
    user = auth_service.get_user_by_id(user_id)
    if user is None:
        return jsonify({'success': False, 'error': 'User not found'}), 404
    
    return jsonify({
        'success': True,
        'user': {'id': user['id'], 'username': user['username'], 'stats': user['stats']},
        'progress': player_progress(user['stats'])
    })
