"""
WebSocket Package

Real-time channels for rooms and per-player timer updates.
"""

from .handlers import register_websocket_handlers

__all__ = ['register_websocket_handlers']
