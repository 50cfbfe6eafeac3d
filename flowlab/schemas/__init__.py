from .flowsheet import DeviceSpec, DeviceType, FlowsheetSpec, StreamSpec

__all__ = [
    "DeviceSpec",
    "DeviceType",
    "FlowsheetSpec",
    "StreamSpec",
]
