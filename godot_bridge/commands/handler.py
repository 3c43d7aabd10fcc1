"""
Godot command handler
"""

import logging

from godot_bridge.adapters.adapter_interface import ClientAdapterInterface
from godot_bridge.commands.types import Command, CommandHandlerInterface, CommandResponse
from godot_bridge.errors import BridgeError

logger = logging.getLogger(__name__)


class GodotCommandHandler(CommandHandlerInterface):
    """Forwards every command to Godot as a method call of the same name"""

    def __init__(self, client: ClientAdapterInterface):
        self.client = client

    def can_handle(self, command: Command) -> bool:
        # Godot is the authority on which methods exist
        return bool(command.type)

    def map_command_type_to_method(self, command_type: str) -> str:
        return command_type

    async def handle(self, command: Command) -> CommandResponse:
        """Run a command and report its outcome

        Bridge failures (connection, timeout, remote error, send) become a
        failed CommandResponse tagged with their ErrorType; anything else
        propagates.
        """
        method = self.map_command_type_to_method(command.type)
        logger.info(f"Handling command: {command.type}")
        try:
            result = await self.client.call(method, command.params)
        except BridgeError as e:
            logger.error(f"Error handling command {command.type}: {e}")
            return CommandResponse(
                success=False,
                error=str(e),
                error_type=e.error_type,
                details=getattr(e, "details", None),
            )
        return CommandResponse(success=True, data=result)
