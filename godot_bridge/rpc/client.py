"""
Godot client

The single call interface every front-end uses:

    async with GodotClient(config) as client:
        tree = await client.call("get_scene_tree")

Calls may be issued concurrently from any number of tasks; each gets its own
id and is resumed independently when its response, timeout or disconnect
arrives.
"""

import logging
from typing import Any, Callable, Dict, Optional

from godot_bridge.adapters.adapter_factory import AdapterFactory
from godot_bridge.adapters.adapter_interface import ClientAdapterInterface, TransportInterface
from godot_bridge.config import BridgeConfig
from godot_bridge.errors import BridgeConnectionError, BridgeError, SendError
from godot_bridge.rpc.connection import ConnectionManager, ConnectionState
from godot_bridge.rpc.correlator import RequestCorrelator, new_call_id
from godot_bridge.telemetry.metrics import increment_counter, record_latency
from godot_bridge.telemetry.tracer import create_span
from godot_bridge.utils.backoff import BackoffTimer
from godot_bridge.utils.serialization import FrameDecodeError, decode_response, encode_request

logger = logging.getLogger(__name__)


class GodotClient(ClientAdapterInterface):
    """Correlating RPC client for the Godot editor plugin"""

    def __init__(self,
                 config: Optional[BridgeConfig] = None,
                 transport_factory: Optional[Callable[[], TransportInterface]] = None):
        """Create a client; no connection is made until start() or the first call

        Args:
            config: Bridge configuration, defaults to BridgeConfig.from_env()
            transport_factory: Override for the transport, mainly for tests
        """
        self.config = config or BridgeConfig.from_env()
        if transport_factory is None:
            transport_factory = AdapterFactory.transport_factory(self.config)

        self._correlator = RequestCorrelator(timeout=self.config.call_timeout)
        self._connection = ConnectionManager(
            transport_factory,
            self._correlator,
            self._handle_message,
            connect_timeout=self.config.connect_timeout,
            reconnect_policy=self.config.reconnect_policy,
            backoff=BackoffTimer(
                initial=self.config.reconnect_delay,
                maximum=self.config.reconnect_max_delay,
                factor=self.config.reconnect_factor,
            ),
        )
        logger.info(f"Using {self.config.url} for Godot connection")

    @property
    def connection(self) -> ConnectionManager:
        return self._connection

    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    @property
    def pending_count(self) -> int:
        return len(self._correlator)

    async def start(self) -> bool:
        return await self._connection.start()

    async def stop(self) -> None:
        await self._connection.disconnect_all()

    async def __aenter__(self) -> "GodotClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def call(self, method: str, params: Dict[str, Any] = None, timeout: float = None) -> Any:
        """Send a request to Godot and wait for the matching response

        Args:
            method: The method to call
            params: The parameters for the method
            timeout: Deadline in seconds, defaults to config.call_timeout

        Returns:
            The response's "result" member

        Raises:
            BridgeConnectionError: could not connect, or the connection dropped mid-call
            CallTimeoutError: no response before the deadline
            RemoteError: Godot returned an error payload
            SendError: the request could not be encoded or written
        """
        if params is None:
            params = {}

        if not self._connection.is_connected:
            try:
                await self._connection.ensure_connected()
            except BridgeConnectionError as e:
                increment_counter("godot.rpc.errors", 1, {"type": "connection", "method": method})
                raise BridgeConnectionError(f"Failed to connect to Godot: {e}") from e

        call_id = new_call_id()
        pending = self._correlator.register(call_id, method, timeout)
        increment_counter("godot.rpc.requests", 1, {"method": method})

        with create_span("godot.rpc.call", {"rpc.method": method, "rpc.id": call_id}):
            try:
                try:
                    frame = encode_request(call_id, method, params)
                    logger.debug(f"Sending request {call_id}: {frame[:200]}")
                    await self._connection.send(frame)
                except SendError:
                    raise
                except Exception as e:
                    raise SendError(f"Failed to send request: {e}") from e

                result = await pending.future
            except BridgeError as e:
                increment_counter("godot.rpc.errors", 1, {"type": e.error_type.value, "method": method})
                raise
            finally:
                # No-op unless the call never reached the wire or the caller was cancelled
                self._correlator.discard(call_id)

        latency_ms = pending.elapsed_ms()
        record_latency("godot.rpc.latency", latency_ms, {"method": method})
        increment_counter("godot.rpc.success", 1, {"method": method})
        logger.debug(f"Request {call_id} ({method}) succeeded in {latency_ms:.2f}ms")
        return result

    def _handle_message(self, message: str) -> None:
        try:
            frame = decode_response(message)
        except FrameDecodeError as e:
            logger.error(f"Error parsing message from Godot: {e}")
            increment_counter("godot.rpc.dropped_frames", 1, {"reason": "malformed"})
            return

        if not self._correlator.resolve(frame):
            logger.warning(f"Received response for unknown request: {frame.id}")
            increment_counter("godot.rpc.dropped_frames", 1, {"reason": "unmatched"})
