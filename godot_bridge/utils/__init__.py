"""
Utilities: wire frame serialization and reconnect backoff.
"""

from .backoff import BackoffTimer
from .serialization import (
    FrameDecodeError,
    RequestFrame,
    ResponseFrame,
    ErrorPayload,
    encode_request,
    decode_response,
)

__all__ = [
    "BackoffTimer",
    "FrameDecodeError",
    "RequestFrame",
    "ResponseFrame",
    "ErrorPayload",
    "encode_request",
    "decode_response",
]
