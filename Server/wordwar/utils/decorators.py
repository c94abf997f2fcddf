"""
Authentication Decorators

Contains decorators for HTTP and WebSocket authentication.
"""

from functools import wraps
from flask import request, jsonify
from flask_socketio import emit

from .helpers import get_bearer_token


def require_auth(f):
    """
    Decorator to require authentication for protected HTTP endpoints.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.auth_service import get_auth_service
        
        auth_service = get_auth_service()
        if not auth_service:
            return jsonify({
                'success': False,
                'error': 'Authentication service unavailable'
            }), 500
        
        token = get_bearer_token(request)
        if not token:
            return jsonify({
                'success': False,
                'error': 'Authorization token required'
            }), 401
        
        result = auth_service.verify_token(token)
        if not result['success']:
            return jsonify({
                'success': False,
                'error': result['error']
            }), 401
        
        # Add user data to request context
        request.user = result['user']
        return f(*args, **kwargs)
    
    return decorated_function


def require_admin(f):
    """Decorator for admin console endpoints."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.admin_service import get_admin_service
        
        admin_service = get_admin_service()
        if not admin_service:
            return jsonify({
                'success': False,
                'error': 'Admin service unavailable'
            }), 500
        
        token = get_bearer_token(request)
        result = admin_service.verify_admin_token(token)
        if not result['success']:
            return jsonify({
                'success': False,
                'error': result['error']
            }), 403
        
        request.user = {'id': 'admin', 'username': 'admin'}
        return f(*args, **kwargs)
    
    return decorated_function


def websocket_auth_required(f):
    """Decorator for WebSocket authentication."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.auth_service import get_auth_service
        
        auth_service = get_auth_service()
        if not auth_service or not args or not isinstance(args[0], dict) or 'token' not in args[0]:
            emit('error', {'error': 'Authentication required'})
            return
        
        result = auth_service.verify_token(args[0]['token'])
        
        if not result['success']:
            emit('error', {'error': result['error']})
            return
        
        kwargs['user'] = result['user']
        return f(*args, **kwargs)
    
    return decorated_function
