"""
MCP server entry point

Exposes the Godot editor to MCP hosts over stdio. stdout carries the MCP
protocol, so all logging goes to stderr.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP

from godot_bridge.config import LOG_FORMAT, ServerConfig
from godot_bridge.rpc.client import GodotClient
from godot_bridge.server.resources import register_resources
from godot_bridge.server.tools import register_tools
from godot_bridge.telemetry import setup_telemetry

logger = logging.getLogger(__name__)

SERVER_NAME = "MCP Godot Server"


def create_server(client: GodotClient) -> FastMCP:
    """Build the MCP server around a client

    The client is started when the MCP session starts and stopped when it
    ends; a failed initial connection is not fatal, the next call retries.
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[dict]:
        if not await client.start():
            logger.warning("Godot is not reachable yet; tools will connect on first use")
        try:
            yield {"client": client}
        finally:
            logger.info("Shutting down MCP Godot server")
            await client.stop()

    server = FastMCP(SERVER_NAME, lifespan=lifespan)
    register_tools(server, client)
    register_resources(server, client)
    return server


def main(config: Optional[ServerConfig] = None) -> None:
    config = config or ServerConfig.from_env()
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT, stream=sys.stderr)
    setup_telemetry(config.telemetry)

    logger.info(f"Starting {SERVER_NAME} with config: {config.to_dict()}")
    server = create_server(GodotClient(config.bridge))
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
