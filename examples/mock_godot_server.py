#!/usr/bin/env python
"""
Mock Godot Server Example

Stands in for the Godot editor plugin on ws://localhost:8090/mcp_godot so the
client, MCP server and HTTP proxy can be tried without Godot. Replies arrive
after a random delay, so concurrent calls complete out of order.
"""

import asyncio
import json
import logging
import random
from typing import Any, Dict

from websockets.asyncio.server import serve

from godot_bridge.config import DEFAULT_GODOT_PORT, LOG_FORMAT

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

SCENE_TREE = {
    "name": "Main",
    "type": "Node2D",
    "path": "/root/Main",
    "children": [
        {"name": "Player", "type": "CharacterBody2D", "path": "/root/Main/Player", "children": []},
    ],
}


def handle_method(method: str, params: Dict[str, Any]) -> Any:
    if method == "get_scene_tree":
        return {"success": True, "data": SCENE_TREE}
    if method == "get_node_info":
        return {"success": True, "data": {"path": params.get("nodePath"), "type": "Node2D"}}
    if method == "get_editor_logs":
        return {"success": True, "data": {"logs": ["Mock editor started"]}}
    if method in ("execute_command", "select_node", "update_property", "add_node", "notify_message"):
        logger.info(f"{method}: {params}")
        return {"success": True}
    raise KeyError(method)


async def handle_connection(websocket):
    logger.info(f"Client connected: {websocket.remote_address}")
    async for message in websocket:
        request = json.loads(message)
        asyncio.create_task(reply(websocket, request))
    logger.info("Client disconnected")


async def reply(websocket, request: Dict[str, Any]):
    await asyncio.sleep(random.uniform(0.01, 0.5))
    try:
        response = {"id": request["id"], "result": handle_method(request["method"], request.get("params") or {})}
    except KeyError:
        response = {"id": request["id"], "error": {"message": f"Unknown method: {request['method']}"}}
    await websocket.send(json.dumps(response))


async def run():
    async with serve(handle_connection, "localhost", DEFAULT_GODOT_PORT) as server:
        logger.info(f"Mock Godot server listening on ws://localhost:{DEFAULT_GODOT_PORT}/mcp_godot")
        await server.serve_forever()


def main():
    """Start mock Godot server"""
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Received exit signal, stopping server...")

    logger.info("Server stopped")


if __name__ == "__main__":
    main()
