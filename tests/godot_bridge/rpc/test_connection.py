"""
Tests for the connection manager
"""
import asyncio

import pytest

from godot_bridge.config import ReconnectPolicy
from godot_bridge.errors import BridgeConnectionError, ConnectionClosedError, SendError
from godot_bridge.rpc.connection import ConnectionManager, ConnectionState
from godot_bridge.rpc.correlator import RequestCorrelator
from godot_bridge.utils.backoff import BackoffTimer


def make_manager(transport_factory, messages=None, **kwargs):
    correlator = RequestCorrelator(timeout=1.0)
    on_message = messages.append if messages is not None else (lambda message: None)
    kwargs.setdefault("connect_timeout", 0.2)
    kwargs.setdefault("backoff", BackoffTimer(initial=0.01, maximum=0.05))
    return ConnectionManager(transport_factory, correlator, on_message, **kwargs), correlator


class TestConnectionManager:

    @pytest.mark.asyncio
    async def test_start_connects(self, transport_factory):
        manager, _ = make_manager(transport_factory)

        assert await manager.start() is True
        assert manager.state is ConnectionState.CONNECTED
        assert transport_factory.last.opened
        await manager.disconnect_all()

    @pytest.mark.asyncio
    async def test_start_failure_is_not_raised(self, transport_factory):
        transport_factory.options = {"open_error": OSError("refused")}
        manager, _ = make_manager(transport_factory)

        assert await manager.start() is False
        assert manager.state is ConnectionState.DISCONNECTED
        assert not manager.is_reconnecting

    @pytest.mark.asyncio
    async def test_concurrent_connects_share_one_attempt(self, transport_factory):
        transport_factory.options = {"open_delay": 0.05}
        manager, _ = make_manager(transport_factory)

        await asyncio.gather(*(manager.ensure_connected() for _ in range(5)))
        assert len(transport_factory.transports) == 1
        assert manager.is_connected
        await manager.disconnect_all()

    @pytest.mark.asyncio
    async def test_connect_timeout(self, transport_factory):
        transport_factory.options = {"hang_open": True}
        manager, _ = make_manager(transport_factory, connect_timeout=0.05)

        with pytest.raises(BridgeConnectionError, match="Connection timeout"):
            await manager.ensure_connected()
        assert manager.state is ConnectionState.DISCONNECTED
        assert transport_factory.last.aborted

    @pytest.mark.asyncio
    async def test_connect_error(self, transport_factory):
        transport_factory.options = {"open_error": OSError("refused")}
        manager, _ = make_manager(transport_factory)

        with pytest.raises(BridgeConnectionError, match="Connection failed: refused"):
            await manager.ensure_connected()

        # A later attempt makes a fresh transport
        transport_factory.options = {}
        await manager.ensure_connected()
        assert len(transport_factory.transports) == 2
        await manager.disconnect_all()

    @pytest.mark.asyncio
    async def test_inbound_frames_dispatched(self, transport_factory, wait_for_condition):
        messages = []
        manager, _ = make_manager(transport_factory, messages)
        await manager.ensure_connected()

        transport_factory.last.feed("one")
        transport_factory.last.feed("two")
        await wait_for_condition(lambda: len(messages) == 2)
        assert messages == ["one", "two"]
        await manager.disconnect_all()

    @pytest.mark.asyncio
    async def test_dispatch_error_does_not_stop_reader(self, transport_factory, wait_for_condition):
        messages = []

        def on_message(message):
            if message == "bad":
                raise RuntimeError("boom")
            messages.append(message)

        manager = ConnectionManager(transport_factory, RequestCorrelator(), on_message)
        await manager.ensure_connected()

        transport_factory.last.feed("bad")
        transport_factory.last.feed("good")
        await wait_for_condition(lambda: messages == ["good"])
        assert manager.is_connected
        await manager.disconnect_all()

    @pytest.mark.asyncio
    async def test_send_when_disconnected(self, transport_factory):
        manager, _ = make_manager(transport_factory)
        with pytest.raises(SendError, match="Not connected"):
            await manager.send("{}")

    @pytest.mark.asyncio
    async def test_peer_close_fails_pending(self, transport_factory, wait_for_condition):
        manager, correlator = make_manager(transport_factory)
        await manager.ensure_connected()
        pending = correlator.register("a", "get_scene_tree")

        transport_factory.last.peer_close()
        with pytest.raises(ConnectionClosedError):
            await pending.future
        assert manager.state is ConnectionState.DISCONNECTED
        assert not manager.is_reconnecting

    @pytest.mark.asyncio
    async def test_disconnect_all(self, transport_factory):
        manager, correlator = make_manager(transport_factory)
        await manager.ensure_connected()
        pending = correlator.register("a")

        await manager.disconnect_all()
        assert transport_factory.last.closed
        with pytest.raises(ConnectionClosedError, match="closed by client"):
            await pending.future

        # Idempotent
        await manager.disconnect_all()
        assert manager.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_disconnect_aborts_connect_in_progress(self, transport_factory):
        transport_factory.options = {"hang_open": True}
        manager, _ = make_manager(transport_factory, connect_timeout=5.0)

        attempt = asyncio.create_task(manager.ensure_connected())
        await asyncio.sleep(0.01)
        assert manager.state is ConnectionState.CONNECTING

        await manager.disconnect_all()
        with pytest.raises(ConnectionClosedError):
            await attempt
        assert transport_factory.last.aborted
        assert manager.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_connect_right_after_aborted_attempt(self, transport_factory):
        transport_factory.options = {"open_delay": 0.05}
        manager, _ = make_manager(transport_factory)

        attempt = asyncio.create_task(manager.ensure_connected())
        await asyncio.sleep(0.01)
        await manager.disconnect_all()

        # The aborted attempt is not reused
        transport_factory.options = {}
        await manager.ensure_connected()
        assert manager.is_connected
        assert len(transport_factory.transports) == 2
        with pytest.raises(ConnectionClosedError):
            await attempt
        await manager.disconnect_all()

    @pytest.mark.asyncio
    async def test_active_policy_reconnects(self, transport_factory, wait_for_condition):
        manager, _ = make_manager(transport_factory, reconnect_policy=ReconnectPolicy.ACTIVE)
        await manager.start()

        transport_factory.last.peer_close()
        await wait_for_condition(lambda: len(transport_factory.transports) == 2 and manager.is_connected)
        assert manager.backoff.attempts == 0
        await manager.disconnect_all()

    @pytest.mark.asyncio
    async def test_active_policy_keeps_retrying(self, transport_factory, wait_for_condition):
        transport_factory.options = {"open_error": OSError("refused")}
        manager, _ = make_manager(transport_factory, reconnect_policy=ReconnectPolicy.ACTIVE)

        assert await manager.start() is False
        await wait_for_condition(lambda: len(transport_factory.transports) >= 3)
        transport_factory.options = {}
        await wait_for_condition(lambda: manager.is_connected)
        await manager.disconnect_all()
        assert not manager.is_reconnecting

    @pytest.mark.asyncio
    async def test_disconnect_stops_reconnecting(self, transport_factory):
        transport_factory.options = {"open_error": OSError("refused")}
        manager, _ = make_manager(transport_factory, reconnect_policy=ReconnectPolicy.ACTIVE)
        await manager.start()
        assert manager.is_reconnecting

        await manager.disconnect_all()
        attempts = len(transport_factory.transports)
        await asyncio.sleep(0.1)
        assert len(transport_factory.transports) == attempts
        assert not manager.is_reconnecting
