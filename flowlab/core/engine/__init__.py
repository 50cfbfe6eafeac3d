"""
Flowsheet Engine

Ядро расчёта массового баланса: потоки, аппараты, проверка рецикла.
"""

from flowlab.core.exceptions import (
    CapacityExceeded,
    ErrorKind,
    FlowLabException,
    PreconditionError,
    RecycleError,
    StreamLimit,
)

from .devices import Device, Mixer, Reactor, create_device
from .stream import Stream, StreamCounter

__all__ = [
    "Stream",
    "StreamCounter",
    "Device",
    "Mixer",
    "Reactor",
    "create_device",
    "CapacityExceeded",
    "ErrorKind",
    "FlowLabException",
    "PreconditionError",
    "RecycleError",
    "StreamLimit",
]
