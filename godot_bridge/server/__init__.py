"""MCP server front-end for the Godot bridge"""

from godot_bridge.server.app import create_server, main

__all__ = ["create_server", "main"]
