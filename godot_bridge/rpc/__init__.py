"""
Correlated RPC over a single connection

- correlator: pending call table, id generation, response matching, timeouts
- connection: transport lifecycle and reconnection
- client: GodotClient, the call interface used by every front-end
"""

from .client import GodotClient
from .connection import ConnectionManager, ConnectionState
from .correlator import PendingCall, RequestCorrelator, new_call_id

__all__ = [
    "GodotClient",
    "ConnectionManager",
    "ConnectionState",
    "PendingCall",
    "RequestCorrelator",
    "new_call_id",
]
