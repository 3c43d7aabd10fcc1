"""
Adapter interfaces

TransportInterface is what the connection manager drives: it moves opaque
text frames and knows nothing about ids or methods. ClientAdapterInterface is
what front-ends (MCP tools, HTTP proxy, command handler) call into.
"""

import abc
from typing import Dict, Any


class TransportInterface(abc.ABC):
    """A single bidirectional frame stream to the Godot editor"""

    @property
    @abc.abstractmethod
    def endpoint(self) -> str:
        """Human readable address, used in logs"""

    @abc.abstractmethod
    async def open(self) -> None:
        """Open the connection

        Raises:
            TransportError: the endpoint refused or the handshake failed
            OSError: socket level failure
        """

    @abc.abstractmethod
    async def send(self, frame: str) -> None:
        """Write one frame

        Raises:
            TransportClosedError: the transport is not open
        """

    @abc.abstractmethod
    async def recv(self) -> str:
        """Wait for the next inbound frame

        Raises:
            TransportClosedError: the peer closed the connection
        """

    @abc.abstractmethod
    async def close(self) -> None:
        """Close gracefully"""

    @abc.abstractmethod
    def abort(self) -> None:
        """Drop the connection immediately; safe to call more than once"""


class ClientAdapterInterface(abc.ABC):
    """Client side of the bridge as seen by front-ends"""

    @property
    @abc.abstractmethod
    def is_connected(self) -> bool:
        """Whether a live connection exists right now"""

    @abc.abstractmethod
    async def call(self, method: str, params: Dict[str, Any] = None, timeout: float = None) -> Any:
        """Send a named call and wait for its result

        Args:
            method: Remote method name
            params: Method parameters
            timeout: Per-call deadline in seconds, defaults to the configured one

        Returns:
            The "result" member of the matching response

        Raises:
            BridgeConnectionError: no connection could be established, or it dropped
            CallTimeoutError: no response before the deadline
            RemoteError: Godot answered with an error payload
            SendError: the request could not be written
        """

    @abc.abstractmethod
    async def start(self) -> bool:
        """Connect eagerly; returns whether the connection is up"""

    @abc.abstractmethod
    async def stop(self) -> None:
        """Disconnect and fail every in-flight call"""
