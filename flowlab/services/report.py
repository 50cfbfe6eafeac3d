"""
Reporting helpers for streams and devices.

Formatting only: nothing here mutates the engine objects.
"""

from typing import Iterable

from flowlab.core.engine import Device, Stream


def format_stream(stream: Stream) -> str:
    return str(stream)


def format_device(device: Device, name: str = "") -> str:
    """One line per device, followed by its streams."""
    state = "calculated" if device.is_calculated() else "not calculated"
    title = f"{device.device_type} {name}".rstrip()
    lines = [f"{title} ({state})"]
    lines += [f"  in:  {format_stream(s)}" for s in device.get_inputs()]
    lines += [f"  out: {format_stream(s)}" for s in device.get_outputs()]
    return "\n".join(lines)


def format_streams(streams: Iterable[Stream]) -> str:
    return "\n".join(format_stream(s) for s in streams)


def balance_error(device: Device) -> float:
    """Sum of inputs minus sum of outputs."""
    total_in = sum(s.get_mass_flow() for s in device.get_inputs())
    total_out = sum(s.get_mass_flow() for s in device.get_outputs())
    return total_in - total_out


def is_balanced(device: Device, tolerance: float) -> bool:
    return abs(balance_error(device)) < tolerance
