"""
Shared fixtures for the Godot bridge tests

FakeTransport stands in for the editor plugin: tests read the frames the
client sends and push response frames back in whatever order they like.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

import pytest

from godot_bridge.adapters.adapter_interface import TransportInterface
from godot_bridge.config import BridgeConfig
from godot_bridge.errors import TransportClosedError

_CLOSED = object()


class FakeTransport(TransportInterface):
    """In-memory transport with scriptable open/send behaviour"""

    def __init__(self,
                 open_error: Optional[BaseException] = None,
                 open_delay: float = 0,
                 hang_open: bool = False,
                 send_error: Optional[BaseException] = None,
                 close_delay: float = 0):
        self.open_error = open_error
        self.open_delay = open_delay
        self.hang_open = hang_open
        self.send_error = send_error
        self.close_delay = close_delay
        self.sent: List[str] = []
        self.opened = False
        self.closed = False
        self.aborted = False
        self._inbound: asyncio.Queue = asyncio.Queue()
        self._outbound: asyncio.Queue = asyncio.Queue()

    @property
    def endpoint(self) -> str:
        return "fake://godot"

    async def open(self) -> None:
        if self.hang_open:
            await asyncio.Event().wait()
        if self.open_delay:
            await asyncio.sleep(self.open_delay)
        if self.open_error is not None:
            raise self.open_error
        self.opened = True

    async def send(self, frame: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        if self.closed or self.aborted:
            raise TransportClosedError("fake transport closed")
        self.sent.append(frame)
        self._outbound.put_nowait(frame)

    async def recv(self) -> str:
        item = await self._inbound.get()
        if item is _CLOSED:
            raise TransportClosedError("peer closed")
        return item

    async def close(self) -> None:
        if self.close_delay:
            # Slow close handshake
            await asyncio.sleep(self.close_delay)
        self.closed = True
        self._inbound.put_nowait(_CLOSED)

    def abort(self) -> None:
        self.aborted = True
        self._inbound.put_nowait(_CLOSED)

    # Test side

    async def next_request(self, timeout: float = 1.0) -> Dict[str, Any]:
        """Wait for the next frame the client sends and decode it"""
        frame = await asyncio.wait_for(self._outbound.get(), timeout)
        return json.loads(frame)

    def reply(self, call_id: str, result: Any = None) -> None:
        self.feed(json.dumps({"id": call_id, "result": result}))

    def reply_error(self, call_id: str, message: str, details: Any = None) -> None:
        error = {"message": message}
        if details is not None:
            error["details"] = details
        self.feed(json.dumps({"id": call_id, "error": error}))

    def feed(self, frame: str) -> None:
        self._inbound.put_nowait(frame)

    def peer_close(self) -> None:
        self._inbound.put_nowait(_CLOSED)


class FakeTransportFactory:
    """Transport factory recording every transport it hands out

    options is applied to each new transport; set it between connects to
    change how the next attempt behaves.
    """

    def __init__(self):
        self.transports: List[FakeTransport] = []
        self.options: Dict[str, Any] = {}

    def __call__(self) -> FakeTransport:
        transport = FakeTransport(**self.options)
        self.transports.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.transports[-1]


async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Yield to the loop until predicate() is true"""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def transport_factory():
    return FakeTransportFactory()


@pytest.fixture
def wait_for_condition():
    return wait_until


@pytest.fixture
def bridge_config():
    """Short timeouts so failure paths run quickly"""
    return BridgeConfig(
        connect_timeout=0.5,
        call_timeout=0.5,
        reconnect_delay=0.01,
        reconnect_max_delay=0.05,
    )
