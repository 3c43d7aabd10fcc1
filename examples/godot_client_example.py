#!/usr/bin/env python
"""
Godot Client Example

Demonstrates calling the Godot editor plugin directly through GodotClient.
Run mock_godot_server.py first, or open a Godot project with the plugin
enabled.
"""

import asyncio
import json
import logging

from godot_bridge.config import LOG_FORMAT, BridgeConfig
from godot_bridge.errors import BridgeError
from godot_bridge.rpc.client import GodotClient

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


async def run():
    config = BridgeConfig.from_env()

    async with GodotClient(config) as client:
        logger.info("Requesting scene tree...")
        tree = await client.call("get_scene_tree")
        logger.info(f"Scene tree: {json.dumps(tree, indent=2)}")

        # Independent calls resolve out of order
        results = await asyncio.gather(
            client.call("get_node_info", {"nodePath": "/root/Main"}),
            client.call("notify_message", {"message": "Hello from Python", "type": "info"}),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BridgeError):
                logger.error(f"Call failed ({result.error_type.value}): {result}")
            else:
                logger.info(f"Call result: {result}")


def main():
    """Run Godot client example"""
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Received termination signal, exiting client...")
    except BridgeError as e:
        logger.error(f"Error occurred while running client: {e}")

    logger.info("Client exited")


if __name__ == "__main__":
    main()
