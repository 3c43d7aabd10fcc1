"""
WebSocket Adapter Package
"""

from godot_bridge.adapters.websocket.transport import WebSocketTransport

__all__ = ["WebSocketTransport"]
