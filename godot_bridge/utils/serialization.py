"""
Wire frame serialization

Converts between the JSON text frames exchanged with the Godot editor plugin
and small frame objects.

Outbound: {"id": <str>, "method": <str>, "params": <object>}
Inbound:  {"id": <str>, "result": <any>}
          {"id": <str>, "error": {"message": <str>, "details": <any>}}
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

UNKNOWN_ERROR_MESSAGE = "Unknown error"


class FrameDecodeError(ValueError):
    """Inbound frame is not a valid response frame"""


@dataclass(frozen=True)
class RequestFrame:
    """Outbound call frame"""
    id: str
    method: str
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "method": self.method, "params": self.params}


@dataclass(frozen=True)
class ErrorPayload:
    """Error body of a failed response"""
    message: str
    details: Any = None


@dataclass(frozen=True)
class ResponseFrame:
    """Inbound response frame; exactly one of result/error is meaningful"""
    id: str
    result: Any = None
    error: Optional[ErrorPayload] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def encode_request(call_id: str, method: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Encode an outbound call as a JSON text frame

    Args:
        call_id: Correlation id
        method: Remote method name
        params: Method parameters, passed through untouched

    Returns:
        str: JSON text

    Raises:
        TypeError: params contain values JSON cannot represent
        ValueError: params contain circular references
    """
    frame = RequestFrame(id=call_id, method=method, params={} if params is None else params)
    return json.dumps(frame.to_dict(), ensure_ascii=False)


def _decode_error(raw: Any) -> ErrorPayload:
    if isinstance(raw, dict):
        message = raw.get("message")
        if not isinstance(message, str) or not message:
            message = UNKNOWN_ERROR_MESSAGE
        return ErrorPayload(message=message, details=raw.get("details"))
    if isinstance(raw, str) and raw:
        return ErrorPayload(message=raw)
    return ErrorPayload(message=UNKNOWN_ERROR_MESSAGE, details=raw)


def decode_response(data) -> ResponseFrame:
    """Decode an inbound text (or UTF-8 bytes) frame

    A frame carrying a non-null "error" member is a failure; anything else is
    a success whose result defaults to None.

    Raises:
        FrameDecodeError: not JSON, not an object, or no string id
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FrameDecodeError(f"Frame is not valid UTF-8: {e}") from e

    try:
        message = json.loads(data)
    except (TypeError, ValueError) as e:
        raise FrameDecodeError(f"Frame is not valid JSON: {e}") from e

    if not isinstance(message, dict):
        raise FrameDecodeError(f"Frame must be a JSON object, got {type(message).__name__}")

    call_id = message.get("id")
    if not isinstance(call_id, str) or not call_id:
        raise FrameDecodeError("Frame has no string id")

    if message.get("error") is not None:
        return ResponseFrame(id=call_id, error=_decode_error(message["error"]))
    return ResponseFrame(id=call_id, result=message.get("result"))
