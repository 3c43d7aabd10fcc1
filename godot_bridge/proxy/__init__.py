"""HTTP proxy front-end for the Godot bridge"""

from godot_bridge.proxy.app import create_app, main

__all__ = ["create_app", "main"]
