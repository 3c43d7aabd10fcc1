"""
MCP tools that drive the Godot editor

Each tool sends one method call to Godot and turns the plugin's
{success, message, data} reply into a text result. The handlers are plain
coroutines taking the client first, so they can be exercised without an MCP
session; register_tools() binds them to a FastMCP server.
"""

import logging
from typing import Any, Dict, Literal, Optional

from mcp.server.fastmcp import FastMCP

from godot_bridge.adapters.adapter_interface import ClientAdapterInterface
from godot_bridge.errors import ErrorType, GodotToolError

logger = logging.getLogger(__name__)

NotificationType = Literal["info", "warning", "error"]


def _tool_result(response: Any, success_text: str, failure_text: str) -> str:
    if not isinstance(response, dict) or not response.get("success"):
        message = response.get("message") if isinstance(response, dict) else None
        details = response.get("data") if isinstance(response, dict) else response
        raise GodotToolError(ErrorType.TOOL_EXECUTION, message or failure_text, details)
    return response.get("message") or success_text


async def execute_command(client: ClientAdapterInterface, command: str) -> str:
    response = await client.call("execute_command", {"command": command})
    return _tool_result(
        response,
        f"Successfully executed command: {command}",
        f"Failed to execute command: {command}",
    )


async def select_node(client: ClientAdapterInterface, node_path: str) -> str:
    response = await client.call("select_node", {"node_path": node_path})
    return _tool_result(
        response,
        f"Successfully selected node: {node_path}",
        f"Failed to select node: {node_path}",
    )


async def update_property(client: ClientAdapterInterface, node_path: str, property: str, value: Any) -> str:
    response = await client.call("update_property", {"nodePath": node_path, "property": property, "value": value})
    return _tool_result(
        response,
        f"Successfully updated property {property} on node: {node_path}",
        f"Failed to update property {property} on node: {node_path}",
    )


async def add_node(client: ClientAdapterInterface,
                   parent_path: str,
                   node_type: str,
                   node_name: Optional[str] = None) -> str:
    params: Dict[str, Any] = {"parentPath": parent_path, "nodeType": node_type}
    if node_name:
        params["nodeName"] = node_name
    response = await client.call("add_node", params)
    return _tool_result(
        response,
        f"Successfully added {node_type} node to: {parent_path}",
        f"Failed to add {node_type} node to: {parent_path}",
    )


async def notify_message(client: ClientAdapterInterface, message: str, type: NotificationType = "info") -> str:
    response = await client.call("notify_message", {"message": message, "type": type})
    return _tool_result(
        response,
        f"Successfully displayed notification: {message}",
        f"Failed to display notification: {message}",
    )


def register_tools(server: FastMCP, client: ClientAdapterInterface) -> None:
    """Register every Godot tool on the MCP server"""

    async def run(tool_name: str, handler, **params) -> str:
        logger.info(f"Executing tool: {tool_name}")
        try:
            result = await handler(client, **params)
        except Exception as e:
            logger.error(f"Tool execution failed: {tool_name}: {e}")
            raise
        logger.info(f"Tool execution successful: {tool_name}")
        return result

    @server.tool(name="execute_command", description="Executes a Godot editor command by name")
    async def execute_command_tool(command: str) -> str:
        """
        Args:
            command: The name of the command to execute (e.g. "file_new_scene")
        """
        return await run("execute_command", execute_command, command=command)

    @server.tool(name="select_node", description="Selects a node in the Godot editor")
    async def select_node_tool(node_path: str) -> str:
        """
        Args:
            node_path: The path to the node to select (e.g. "/root/Main/Player")
        """
        return await run("select_node", select_node, node_path=node_path)

    @server.tool(name="update_property", description="Updates a property on a node in the Godot scene tree")
    async def update_property_tool(node_path: str, property: str, value: Any) -> str:
        """
        Args:
            node_path: The path to the node to update (e.g. "/root/Main/Player")
            property: The property to update (e.g. "position")
            value: The value to set the property to
        """
        return await run("update_property", update_property, node_path=node_path, property=property, value=value)

    @server.tool(name="add_node", description="Adds a new node to the Godot scene tree")
    async def add_node_tool(parent_path: str, node_type: str, node_name: Optional[str] = None) -> str:
        """
        Args:
            parent_path: The path to the parent node (e.g. "/root/Main")
            node_type: The type of node to add (e.g. "Sprite2D", "Node3D")
            node_name: Optional name for the new node
        """
        return await run("add_node", add_node, parent_path=parent_path, node_type=node_type, node_name=node_name)

    @server.tool(name="notify_message", description="Displays a notification message in the Godot editor")
    async def notify_message_tool(message: str, type: NotificationType = "info") -> str:
        """
        Args:
            message: The message to display
            type: The type of notification
        """
        return await run("notify_message", notify_message, message=message, type=type)

    logger.info("Registered Godot tools")
