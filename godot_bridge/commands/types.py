"""
Command types for the Godot editor

A command is a method name plus opaque params; the editor plugin decides what
they mean. The enums below list the methods the plugin is known to handle.
"""

import abc
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from godot_bridge.errors import ErrorType


@dataclass
class Command:
    """Base command"""
    type: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CommandResponse:
    """Outcome of a command"""
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None
    details: Any = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        body = {
            "success": False,
            "error": self.error,
            "error_type": self.error_type.value if self.error_type else ErrorType.UNKNOWN.value,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


class CommandHandlerInterface(abc.ABC):
    """Command handler interface"""

    @abc.abstractmethod
    def can_handle(self, command: Command) -> bool:
        """Check if this handler can handle the command"""

    @abc.abstractmethod
    async def handle(self, command: Command) -> CommandResponse:
        """Handle a command"""


class SceneCommandType(str, Enum):
    CREATE_SCENE = "create_scene"
    OPEN_SCENE = "open_scene"
    SAVE_SCENE = "save_scene"
    CLOSE_SCENE = "close_scene"


class NodeCommandType(str, Enum):
    ADD_NODE = "add_node"
    REMOVE_NODE = "remove_node"
    SELECT_NODE = "select_node"
    DUPLICATE_NODE = "duplicate_node"
    RENAME_NODE = "rename_node"


class PropertyCommandType(str, Enum):
    SET_PROPERTY = "set_property"
    GET_PROPERTY = "get_property"


class ScriptCommandType(str, Enum):
    CREATE_SCRIPT = "create_script"
    ATTACH_SCRIPT = "attach_script"
    EDIT_SCRIPT = "edit_script"


class ResourceCommandType(str, Enum):
    IMPORT_RESOURCE = "import_resource"
    CREATE_RESOURCE = "create_resource"
    USE_RESOURCE = "use_resource"


class ProjectCommandType(str, Enum):
    BUILD_PROJECT = "build_project"
    RUN_PROJECT = "run_project"
    STOP_PROJECT = "stop_project"


class NotificationCommandType(str, Enum):
    NOTIFY = "notify"


class QueryCommandType(str, Enum):
    GET_SCENE_TREE = "get_scene_tree"
    GET_NODE_INFO = "get_node_info"
    GET_RESOURCES = "get_resources"


COMMAND_TYPE_GROUPS = (
    SceneCommandType,
    NodeCommandType,
    PropertyCommandType,
    ScriptCommandType,
    ResourceCommandType,
    ProjectCommandType,
    NotificationCommandType,
    QueryCommandType,
)

ALL_COMMAND_TYPES = frozenset(member.value for group in COMMAND_TYPE_GROUPS for member in group)


# Listing served by the HTTP proxy's /commands endpoint
COMMAND_CATALOG: List[Dict[str, Any]] = [
    {"name": "create_scene", "description": "Create a new scene", "params": ["template"]},
    {"name": "open_scene", "description": "Open a scene", "params": ["path"]},
    {"name": "save_scene", "description": "Save the current scene", "params": ["path"]},
    {"name": "close_scene", "description": "Close the current scene", "params": []},
    {"name": "add_node", "description": "Add a node", "params": ["node_type", "node_name"]},
    {"name": "remove_node", "description": "Remove a node", "params": ["node_path"]},
    {"name": "select_node", "description": "Select a node", "params": ["node_path"]},
    {"name": "duplicate_node", "description": "Duplicate a node", "params": ["node_path"]},
    {"name": "set_property", "description": "Set a property", "params": ["node_path", "property", "value"]},
    {"name": "get_property", "description": "Get a property", "params": ["node_path", "property"]},
    {"name": "create_script", "description": "Create a script", "params": ["path", "content"]},
    {"name": "attach_script", "description": "Attach a script", "params": ["node_path", "script_path"]},
    {"name": "edit_script", "description": "Edit a script", "params": ["script_path", "content"]},
    {"name": "notify", "description": "Show a notification", "params": ["message", "level"]},
]
