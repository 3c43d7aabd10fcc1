"""
TCP Adapter Package
"""

from godot_bridge.adapters.tcp.transport import LineTransport

__all__ = ["LineTransport"]
