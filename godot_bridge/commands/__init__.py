"""
Editor commands: command types, the catalog, and the handler that forwards
commands to Godot.
"""

from .handler import GodotCommandHandler
from .types import (
    ALL_COMMAND_TYPES,
    COMMAND_CATALOG,
    Command,
    CommandHandlerInterface,
    CommandResponse,
)

__all__ = [
    "ALL_COMMAND_TYPES",
    "COMMAND_CATALOG",
    "Command",
    "CommandHandlerInterface",
    "CommandResponse",
    "GodotCommandHandler",
]
