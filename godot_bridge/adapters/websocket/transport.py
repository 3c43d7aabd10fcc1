"""
WebSocket transport

Client side of the Godot editor plugin's WebSocket endpoint. One text
message carries one JSON frame.
"""

import logging
from typing import Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from godot_bridge.adapters.adapter_interface import TransportInterface
from godot_bridge.errors import TransportClosedError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 16 * 1024 * 1024


class WebSocketTransport(TransportInterface):
    """WebSocket transport to ws://host:port/path"""

    def __init__(self,
                 url: str,
                 ping_interval: Optional[float] = 20.0,
                 max_size: int = DEFAULT_MAX_SIZE):
        """
        Args:
            url: WebSocket URL, e.g. ws://localhost:8090/mcp_godot
            ping_interval: Keepalive ping interval in seconds, None disables
            max_size: Largest inbound message accepted, in bytes
        """
        self.url = url
        self.ping_interval = ping_interval
        self.max_size = max_size
        self._ws: Optional[ClientConnection] = None

    @property
    def endpoint(self) -> str:
        return self.url

    async def open(self) -> None:
        # The connection manager bounds the whole attempt, so no timeout here
        try:
            self._ws = await connect(
                self.url,
                open_timeout=None,
                ping_interval=self.ping_interval,
                ping_timeout=self.ping_interval,
                max_size=self.max_size,
            )
        except (InvalidHandshake, InvalidURI) as e:
            raise TransportError(f"WebSocket handshake with {self.url} failed: {e}") from e
        logger.debug(f"WebSocket connected: {self.url}")

    async def send(self, frame: str) -> None:
        if self._ws is None:
            raise TransportClosedError("WebSocket is not initialized")
        try:
            await self._ws.send(frame)
        except ConnectionClosed as e:
            raise TransportClosedError(f"WebSocket closed: {e}") from e

    async def recv(self) -> str:
        if self._ws is None:
            raise TransportClosedError("WebSocket is not initialized")
        try:
            message = await self._ws.recv()
        except ConnectionClosed as e:
            raise TransportClosedError(f"WebSocket closed: {e}") from e
        if isinstance(message, bytes):
            return message.decode("utf-8", errors="replace")
        return message

    async def close(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            await ws.close()
            logger.debug(f"WebSocket closed: {self.url}")

    def abort(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None and ws.transport is not None:
            ws.transport.abort()
