"""
WebSocket transport tests against a local websockets server
"""
import asyncio
import json

import pytest
from websockets.asyncio.server import serve

from godot_bridge.adapters.websocket.transport import WebSocketTransport
from godot_bridge.config import BridgeConfig, ReconnectPolicy
from godot_bridge.errors import TransportClosedError
from godot_bridge.rpc.client import GodotClient


async def echo_result(websocket):
    """Answer every request with its own params as the result"""
    async for message in websocket:
        request = json.loads(message)
        await websocket.send(json.dumps({"id": request["id"], "result": request["params"]}))


def server_port(server) -> int:
    return server.sockets[0].getsockname()[1]


class TestWebSocketTransport:

    @pytest.mark.asyncio
    async def test_send_and_recv(self):
        async with serve(echo_result, "127.0.0.1", 0) as server:
            transport = WebSocketTransport(f"ws://127.0.0.1:{server_port(server)}/mcp_godot")
            await transport.open()

            await transport.send(json.dumps({"id": "a", "method": "echo", "params": {"x": 1}}))
            assert json.loads(await transport.recv()) == {"id": "a", "result": {"x": 1}}
            await transport.close()

    @pytest.mark.asyncio
    async def test_peer_close(self):
        async def close_immediately(websocket):
            await websocket.close()

        async with serve(close_immediately, "127.0.0.1", 0) as server:
            transport = WebSocketTransport(f"ws://127.0.0.1:{server_port(server)}")
            await transport.open()
            with pytest.raises(TransportClosedError):
                await transport.recv()
            transport.abort()

    @pytest.mark.asyncio
    async def test_send_before_open(self):
        transport = WebSocketTransport("ws://127.0.0.1:1")
        with pytest.raises(TransportClosedError):
            await transport.send("{}")
        # Safe without a connection
        transport.abort()
        await transport.close()

    @pytest.mark.asyncio
    async def test_client_over_websocket(self):
        async with serve(echo_result, "127.0.0.1", 0) as server:
            config = BridgeConfig(host="127.0.0.1", port=server_port(server), connect_timeout=2.0, call_timeout=2.0)
            async with GodotClient(config) as client:
                results = await asyncio.gather(*(client.call("echo", {"n": n}) for n in range(10)))
                assert results == [{"n": n} for n in range(10)]

    @pytest.mark.asyncio
    async def test_client_connect_refused(self):
        async with serve(echo_result, "127.0.0.1", 0) as server:
            port = server_port(server)
        config = BridgeConfig(host="127.0.0.1", port=port, connect_timeout=2.0,
                              reconnect_policy=ReconnectPolicy.PASSIVE)
        client = GodotClient(config)
        assert await client.start() is False
        await client.stop()
