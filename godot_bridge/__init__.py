"""
MCP Godot Bridge

Connects MCP tool invocations to a running Godot editor over a single
long-lived socket:

1. Wire format: JSON frames `{id, method, params}` out, `{id, result|error}` back
2. Transports: WebSocket (default, ws://localhost:8090/mcp_godot) or line-delimited TCP
3. Front-ends:
   - MCP stdio server (tools and resources)
   - HTTP proxy (/health, /commands, /execute)

Every front-end goes through GodotClient.call(), which correlates responses
to requests by id and enforces per-call timeouts.
"""

from godot_bridge.rpc.client import GodotClient

__version__ = "0.1.0"

__all__ = ["GodotClient", "__version__"]
