"""
Error types for the Godot bridge

Every failure a caller of GodotClient.call() can see derives from BridgeError.
The connection and timeout errors also subclass the matching builtins so code
written against plain ConnectionError/TimeoutError keeps working.
"""

from enum import Enum
from typing import Any, Optional


class ErrorType(Enum):
    """Error categories reported to front-ends"""
    CONNECTION = "connection_error"
    TIMEOUT = "timeout_error"
    REMOTE = "remote_error"
    SEND = "send_error"
    TOOL_EXECUTION = "tool_execution_error"
    RESOURCE_FETCH = "resource_fetch_error"
    INVALID_PARAMETER = "invalid_parameter_error"
    UNKNOWN = "unknown_error"


class BridgeError(Exception):
    """Base exception for bridge errors."""

    error_type = ErrorType.UNKNOWN


class BridgeConnectionError(BridgeError, ConnectionError):
    """Could not establish or maintain the connection to Godot."""

    error_type = ErrorType.CONNECTION


class ConnectionClosedError(BridgeConnectionError):
    """The connection went away while the call was in flight."""


class CallTimeoutError(BridgeError, TimeoutError):
    """No response arrived before the call's deadline."""

    error_type = ErrorType.TIMEOUT


class RemoteError(BridgeError):
    """Godot answered the call with an explicit error payload."""

    error_type = ErrorType.REMOTE

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class SendError(BridgeError):
    """The request frame could not be encoded or written."""

    error_type = ErrorType.SEND


class TransportError(BridgeError):
    """Low-level transport failure."""

    error_type = ErrorType.CONNECTION


class TransportClosedError(TransportError):
    """The transport was closed by either side."""


class GodotToolError(BridgeError):
    """A tool or resource request was delivered but Godot reported failure."""

    def __init__(self, error_type: ErrorType, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type
        self.details = details
