"""
Exception classes for the FlowLab flowsheet engine.

All engine failures derive from FlowLabException and carry an ErrorKind,
so callers can dispatch on ``exc.kind`` instead of matching message text.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Category of an engine failure."""

    CAPACITY_EXCEEDED = "capacity_exceeded"
    PRECONDITION = "precondition"
    RECYCLE = "recycle"


class StreamLimit(str, Enum):
    """Which side of a device ran out of stream slots."""

    INPUT = "INPUT"
    OUTPUT = "OUTPUT"


class FlowLabException(Exception):
    """Base exception for FlowLab."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "details": dict(self.details),
        }


class CapacityExceeded(FlowLabException):
    """Raised when attaching a stream would exceed the device capacity."""

    kind = ErrorKind.CAPACITY_EXCEEDED

    def __init__(self, limit: StreamLimit, device_type: str = "", capacity: int = 0):
        self.limit = StreamLimit(limit)
        super().__init__(
            f"{self.limit.value} STREAM LIMIT",
            {"limit": self.limit.value, "device_type": device_type, "capacity": capacity},
        )


class PreconditionError(FlowLabException):
    """Raised by update_outputs when inputs/outputs are missing or mismatched."""

    kind = ErrorKind.PRECONDITION

    def __init__(self, message: str, device_type: str = ""):
        self.device_type = device_type
        super().__init__(message, {"device_type": device_type})


class RecycleError(FlowLabException):
    """
    Raised when an already calculated device is asked to update again.

    Means the device was solved before and has not been reset: either the
    flowsheet has a cycle or the caller solved the same device twice.
    """

    kind = ErrorKind.RECYCLE

    def __init__(self, device_type: str, stream_name: str):
        self._device_type = device_type
        self._stream_name = stream_name
        super().__init__(
            f"RECYCLE DETECTED: {device_type} has calculated output stream {stream_name}",
            {"device_type": device_type, "stream_name": stream_name},
        )

    @property
    def device_type(self) -> str:
        return self._device_type

    @property
    def stream_name(self) -> str:
        return self._stream_name
