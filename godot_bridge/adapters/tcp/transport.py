"""
Line-delimited TCP transport

One JSON frame per line, UTF-8, terminated by "\n". Used by editor builds
that expose a raw socket instead of a WebSocket endpoint.
"""

import asyncio
import logging
from typing import Optional

from godot_bridge.adapters.adapter_interface import TransportInterface
from godot_bridge.errors import TransportClosedError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_LINE_LIMIT = 16 * 1024 * 1024


class LineTransport(TransportInterface):
    """Newline-delimited JSON over TCP"""

    def __init__(self, host: str, port: int, limit: int = DEFAULT_LINE_LIMIT):
        self.host = host
        self.port = port
        self.limit = limit
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @property
    def endpoint(self) -> str:
        return f"tcp://{self.host}:{self.port}"

    async def open(self) -> None:
        self._reader, self._writer = await asyncio.open_connection(
            self.host, self.port, limit=self.limit
        )
        logger.debug(f"TCP connected: {self.endpoint}")

    async def send(self, frame: str) -> None:
        if self._writer is None or self._writer.is_closing():
            raise TransportClosedError("TCP connection is not open")
        if "\n" in frame:
            raise TransportError("Frame must not contain a newline")
        try:
            self._writer.write(frame.encode("utf-8") + b"\n")
            await self._writer.drain()
        except ConnectionError as e:
            raise TransportClosedError(f"TCP connection lost: {e}") from e

    async def recv(self) -> str:
        if self._reader is None:
            raise TransportClosedError("TCP connection is not open")
        while True:
            try:
                line = await self._reader.readline()
            except ConnectionError as e:
                raise TransportClosedError(f"TCP connection lost: {e}") from e
            except ValueError as e:
                # Line longer than the stream limit; the stream is unusable now
                raise TransportError(f"Inbound frame too large: {e}") from e
            if not line:
                raise TransportClosedError("TCP connection closed by peer")
            text = line.decode("utf-8", errors="replace").strip()
            if text:
                return text

    async def close(self) -> None:
        writer, self._writer = self._writer, None
        self._reader = None
        if writer is None:
            return
        writer.close()
        try:
            await writer.wait_closed()
        except ConnectionError as e:
            logger.debug(f"Error while closing TCP connection: {e}")

    def abort(self) -> None:
        writer, self._writer = self._writer, None
        self._reader = None
        if writer is not None:
            writer.transport.abort()
