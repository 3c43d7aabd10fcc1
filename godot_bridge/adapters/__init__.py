"""
Transport Adapters Module

- websocket: WebSocket client (the Godot editor plugin's native endpoint)
- tcp: newline-delimited JSON over a plain TCP socket

Both move opaque text frames; correlation lives in godot_bridge.rpc.
"""

from .adapter_factory import AdapterFactory
from .adapter_interface import ClientAdapterInterface, TransportInterface

__all__ = [
    "AdapterFactory",
    "ClientAdapterInterface",
    "TransportInterface",
]
