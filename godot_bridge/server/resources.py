"""
MCP resources that read Godot editor state
"""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from godot_bridge.adapters.adapter_interface import ClientAdapterInterface
from godot_bridge.errors import ErrorType, GodotToolError

logger = logging.getLogger(__name__)

SCENE_TREE_URI = "godot://scene-tree"
NODE_INFO_URI = "godot://node/{node_path}"
EDITOR_LOGS_URI = "godot://logs"


def _resource_data(response: Any, failure_text: str) -> str:
    if not isinstance(response, dict) or not response.get("success"):
        message = response.get("message") if isinstance(response, dict) else None
        raise GodotToolError(ErrorType.RESOURCE_FETCH, message or failure_text)
    return json.dumps(response.get("data") or {}, ensure_ascii=False)


async def get_scene_tree(client: ClientAdapterInterface) -> str:
    response = await client.call("get_scene_tree", {})
    return _resource_data(response, "Failed to fetch scene tree")


async def get_node_info(client: ClientAdapterInterface, node_path: str) -> str:
    response = await client.call("get_node_info", {"nodePath": node_path})
    return _resource_data(response, f"Failed to fetch node info for: {node_path}")


async def get_editor_logs(client: ClientAdapterInterface) -> str:
    response = await client.call("get_editor_logs", {})
    return _resource_data(response, "Failed to fetch editor logs")


def register_resources(server: FastMCP, client: ClientAdapterInterface) -> None:
    """Register every Godot resource on the MCP server"""

    @server.resource(
        SCENE_TREE_URI,
        name="scene_tree",
        description="Retrieves the current scene tree structure from Godot",
        mime_type="application/json",
    )
    async def scene_tree_resource() -> str:
        logger.info(f"Fetching resource: {SCENE_TREE_URI}")
        return await get_scene_tree(client)

    @server.resource(
        NODE_INFO_URI,
        name="node_info",
        description="Retrieves detailed information about a specific node in the Godot scene tree",
        mime_type="application/json",
    )
    async def node_info_resource(node_path: str) -> str:
        logger.info(f"Fetching resource: godot://node/{node_path}")
        return await get_node_info(client, node_path)

    @server.resource(
        EDITOR_LOGS_URI,
        name="editor_logs",
        description="Retrieves logs from the Godot editor",
        mime_type="application/json",
    )
    async def editor_logs_resource() -> str:
        logger.info(f"Fetching resource: {EDITOR_LOGS_URI}")
        return await get_editor_logs(client)

    logger.info("Registered Godot resources")
