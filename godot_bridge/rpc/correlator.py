"""
Request correlation

Tracks in-flight calls by id and routes inbound response frames back to the
caller that is waiting on them. Each pending call owns one timer and one
future; whichever of {response, timeout, disconnect} reaches it first wins
and the others become no-ops.

All methods are synchronous and must run on the event loop thread, which is
what makes the pop-then-complete sequence atomic.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from godot_bridge.config import DEFAULT_CALL_TIMEOUT
from godot_bridge.errors import CallTimeoutError, ConnectionClosedError, RemoteError
from godot_bridge.utils.serialization import ResponseFrame

logger = logging.getLogger(__name__)


def new_call_id() -> str:
    """Random 128-bit (UUID4) correlation id"""
    return str(uuid.uuid4())


@dataclass
class PendingCall:
    """One outstanding call"""
    id: str
    method: str
    issued_at: float
    timeout: float
    future: asyncio.Future
    timeout_handle: Optional[asyncio.TimerHandle] = None

    def cancel_timer(self) -> None:
        if self.timeout_handle is not None:
            self.timeout_handle.cancel()
            self.timeout_handle = None

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.issued_at) * 1000


class RequestCorrelator:
    """Table of in-flight calls keyed by id"""

    def __init__(self, timeout: float = DEFAULT_CALL_TIMEOUT):
        """
        Args:
            timeout: Default per-call deadline in seconds
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self._pending: Dict[str, PendingCall] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, call_id: str) -> bool:
        return call_id in self._pending

    def register(self, call_id: str, method: str = "", timeout: Optional[float] = None) -> PendingCall:
        """Create a pending entry and arm its timer

        Args:
            call_id: Correlation id, must not be live already
            method: Method name, kept for diagnostics
            timeout: Deadline in seconds, defaults to the correlator's

        Returns:
            PendingCall: the entry; await its future for the outcome

        Raises:
            ValueError: call_id is already pending, or timeout is not positive
        """
        if call_id in self._pending:
            raise ValueError(f"Call id already pending: {call_id}")
        deadline = self.timeout if timeout is None else timeout
        if deadline <= 0:
            raise ValueError("timeout must be positive")

        loop = asyncio.get_running_loop()
        pending = PendingCall(
            id=call_id,
            method=method,
            issued_at=time.monotonic(),
            timeout=deadline,
            future=loop.create_future(),
        )
        pending.timeout_handle = loop.call_later(deadline, self._expire, call_id)
        self._pending[call_id] = pending
        return pending

    def complete(self, call_id: str, result: Any = None, error: Optional[BaseException] = None) -> bool:
        """Finish a pending call with a result or an exception

        Returns:
            bool: False when no such call is pending (nothing happens)
        """
        pending = self._pending.pop(call_id, None)
        if pending is None:
            return False
        pending.cancel_timer()
        if pending.future.done():
            # The caller gave up (cancelled) before the outcome arrived
            return True
        if error is not None:
            pending.future.set_exception(error)
        else:
            pending.future.set_result(result)
        logger.debug(f"Request {call_id} ({pending.method}) completed in {pending.elapsed_ms():.2f}ms")
        return True

    def resolve(self, frame: ResponseFrame) -> bool:
        """Deliver a decoded response frame to its caller

        Returns:
            bool: False when the frame matches no pending call
        """
        if frame.error is not None:
            return self.complete(frame.id, error=RemoteError(frame.error.message, frame.error.details))
        return self.complete(frame.id, result=frame.result)

    def discard(self, call_id: str) -> bool:
        """Drop a pending call without completing it

        Used when the request never made it onto the wire or the caller was
        cancelled. Safe to call for unknown or finished ids.
        """
        pending = self._pending.pop(call_id, None)
        if pending is None:
            return False
        pending.cancel_timer()
        if not pending.future.done():
            pending.future.cancel()
        return True

    def fail_all(self, reason: str) -> int:
        """Fail every pending call with ConnectionClosedError

        Returns:
            int: number of calls failed
        """
        pending_calls = list(self._pending.values())
        self._pending.clear()
        for pending in pending_calls:
            pending.cancel_timer()
            if not pending.future.done():
                pending.future.set_exception(ConnectionClosedError(reason))
        if pending_calls:
            logger.warning(f"Failed {len(pending_calls)} pending request(s): {reason}")
        return len(pending_calls)

    def _expire(self, call_id: str) -> None:
        pending = self._pending.pop(call_id, None)
        if pending is None:
            return
        pending.timeout_handle = None
        logger.warning(f"Request timeout: {pending.method} ({call_id}) after {pending.timeout:.1f}s")
        if not pending.future.done():
            pending.future.set_exception(
                CallTimeoutError(f"Request timeout: no response to {pending.method or call_id} within {pending.timeout}s")
            )
