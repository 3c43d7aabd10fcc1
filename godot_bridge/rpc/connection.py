"""
Connection management

Owns the one transport to the Godot editor and its lifecycle:

    DISCONNECTED --connect--> CONNECTING --open--> CONNECTED
    CONNECTING --timeout/error--> DISCONNECTED
    CONNECTED --close/error--> DISCONNECTED

There is no terminal state. When a live connection goes away every pending
call in the correlator is failed, and with the ACTIVE policy a background
loop keeps reconnecting with backoff until it succeeds or is stopped.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from godot_bridge.adapters.adapter_interface import TransportInterface
from godot_bridge.config import DEFAULT_CONNECT_TIMEOUT, ReconnectPolicy
from godot_bridge.errors import (
    BridgeConnectionError,
    ConnectionClosedError,
    SendError,
    TransportClosedError,
)
from godot_bridge.rpc.correlator import RequestCorrelator
from godot_bridge.telemetry.metrics import increment_counter
from godot_bridge.utils.backoff import BackoffTimer

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ConnectionManager:
    """Zero-or-one live connection plus the reader task that drains it"""

    def __init__(self,
                 transport_factory: Callable[[], TransportInterface],
                 correlator: RequestCorrelator,
                 on_message: Callable[[str], None],
                 connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
                 reconnect_policy: ReconnectPolicy = ReconnectPolicy.PASSIVE,
                 backoff: Optional[BackoffTimer] = None):
        """
        Args:
            transport_factory: Returns a fresh, unopened transport per attempt
            correlator: Pending call table to fail when the connection drops
            on_message: Called with every inbound frame, from the reader task
            connect_timeout: Bound on a single connect attempt, in seconds
            reconnect_policy: PASSIVE waits for the next call, ACTIVE retries in the background
            backoff: Delay schedule for ACTIVE reconnects
        """
        self._transport_factory = transport_factory
        self._correlator = correlator
        self._on_message = on_message
        self.connect_timeout = connect_timeout
        self.reconnect_policy = reconnect_policy
        self.backoff = backoff or BackoffTimer()

        self._state = ConnectionState.DISCONNECTED
        self._transport: Optional[TransportInterface] = None
        self._connect_task: Optional[asyncio.Task] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._reconnect_task: Optional[asyncio.Task] = None
        # Set by disconnect_all(), cleared by start(); suppresses ACTIVE reconnects
        self._stopped = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def is_reconnecting(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    async def start(self) -> bool:
        """Connect now; failure is logged, not raised

        Returns:
            bool: whether the connection is up
        """
        self._stopped = False
        try:
            logger.info("Attempting to connect to Godot...")
            await self.ensure_connected()
            logger.info("Successfully connected to Godot")
            return True
        except BridgeConnectionError as e:
            logger.warning(f"Could not connect to Godot: {e}")
            if self.reconnect_policy is ReconnectPolicy.ACTIVE:
                self._schedule_reconnect()
            else:
                logger.warning("Will retry connection on next request")
            return False

    async def ensure_connected(self) -> None:
        """Return once connected, opening the transport if needed

        Concurrent callers share a single connect attempt.

        Raises:
            BridgeConnectionError: the attempt failed or timed out
            ConnectionClosedError: the attempt was aborted by disconnect_all()
        """
        if self._state is ConnectionState.CONNECTED:
            return

        task = self._connect_task
        if task is None:
            task = asyncio.get_running_loop().create_task(self._connect())
            task.add_done_callback(self._on_connect_done)
            self._connect_task = task

        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                raise ConnectionClosedError("Connection attempt aborted") from None
            raise

    async def send(self, frame: str) -> None:
        """Write one frame on the live connection

        Raises:
            SendError: not connected
            TransportClosedError: the transport closed underneath us
        """
        transport = self._transport
        if transport is None or self._state is not ConnectionState.CONNECTED:
            raise SendError("Not connected to Godot")
        await transport.send(frame)

    async def disconnect_all(self, reason: str = "Connection closed by client") -> None:
        """Tear down the connection and fail all pending calls

        Aborts a connect attempt in progress, closes a live connection
        gracefully and cancels background reconnects. Idempotent.
        """
        self._stopped = True

        if self._reconnect_task is not None:
            self._reconnect_task.cancel()
            self._reconnect_task = None

        transport, state = self._transport, self._state
        self._transport = None
        self._state = ConnectionState.DISCONNECTED

        if self._connect_task is not None:
            self._connect_task.cancel()
            # A call made right after this must start a fresh attempt
            self._connect_task = None

        if self._reader_task is not None:
            self._reader_task.cancel()
            self._reader_task = None

        # Fail before awaiting the close; calls made meanwhile use a new connection
        self._correlator.fail_all(reason)

        if transport is not None:
            logger.debug(f"Disconnecting from {transport.endpoint} ({state.value})...")
            if state is ConnectionState.CONNECTING:
                transport.abort()
            else:
                try:
                    await transport.close()
                except Exception as e:
                    logger.error(f"Error closing connection: {e}")
                    transport.abort()
            increment_counter("godot.connection.events", 1, {"event": "disconnect"})

    async def _connect(self) -> None:
        transport = self._transport_factory()
        self._transport = transport
        self._state = ConnectionState.CONNECTING
        logger.debug(f"Connecting to {transport.endpoint}...")

        try:
            await asyncio.wait_for(transport.open(), timeout=self.connect_timeout)
        except asyncio.TimeoutError:
            logger.warning("Connection timeout, aborting transport")
            self._reset(transport)
            increment_counter("godot.connection.events", 1, {"event": "connect_timeout"})
            raise BridgeConnectionError(f"Connection timeout after {self.connect_timeout}s")
        except asyncio.CancelledError:
            self._reset(transport)
            raise
        except Exception as e:
            logger.error(f"Connection to {transport.endpoint} failed: {e}")
            self._reset(transport)
            increment_counter("godot.connection.events", 1, {"event": "connect_error"})
            raise BridgeConnectionError(f"Connection failed: {e}") from e

        if self._transport is not transport:
            # Torn down while the handshake was finishing
            transport.abort()
            raise ConnectionClosedError("Connection closed while connecting")

        self._state = ConnectionState.CONNECTED
        self._reader_task = asyncio.get_running_loop().create_task(self._read_loop(transport))
        self.backoff.reset()
        increment_counter("godot.connection.events", 1, {"event": "connect"})
        logger.info(f"Connected to Godot at {transport.endpoint}")

    def _on_connect_done(self, task: asyncio.Task) -> None:
        if self._connect_task is task:
            self._connect_task = None
        # Waiters may all have been cancelled; mark the outcome as retrieved
        if not task.cancelled():
            task.exception()

    def _reset(self, transport: TransportInterface) -> None:
        if self._transport is transport:
            self._transport = None
            self._state = ConnectionState.DISCONNECTED
        transport.abort()

    async def _read_loop(self, transport: TransportInterface) -> None:
        reason = "Connection closed"
        try:
            while True:
                message = await transport.recv()
                try:
                    self._on_message(message)
                except Exception:
                    logger.exception("Error dispatching inbound frame")
        except TransportClosedError as e:
            reason = f"Connection closed: {e}"
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Connection error: {e}")
            reason = f"Connection error: {e}"
        self._connection_lost(transport, reason)

    def _connection_lost(self, transport: TransportInterface, reason: str) -> None:
        if self._transport is not transport:
            return
        logger.warning(f"Lost connection to Godot: {reason}")
        self._transport = None
        self._state = ConnectionState.DISCONNECTED
        self._reader_task = None
        transport.abort()
        increment_counter("godot.connection.events", 1, {"event": "lost"})

        self._correlator.fail_all(reason)

        if self.reconnect_policy is ReconnectPolicy.ACTIVE and not self._stopped:
            self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self.is_reconnecting:
            return
        self._reconnect_task = asyncio.get_running_loop().create_task(self._reconnect_loop())

    async def _reconnect_loop(self) -> None:
        while not self._stopped and self._state is not ConnectionState.CONNECTED:
            delay = self.backoff.next_delay()
            logger.info(f"Reconnecting to Godot in {delay:.1f}s (attempt {self.backoff.attempts})")
            await asyncio.sleep(delay)
            if self._stopped:
                break
            try:
                await self.ensure_connected()
            except BridgeConnectionError as e:
                logger.warning(f"Reconnect attempt failed: {e}")
        if self._reconnect_task is asyncio.current_task():
            self._reconnect_task = None
