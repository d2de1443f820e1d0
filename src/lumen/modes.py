"""
Mode enums shared by the controllers, the engine boundary and the API
"""
from enum import Enum


class LightMode(str, Enum):
    """User-selected illumination mode"""
    AUTO = "AUTO"
    ON = "ON"
    OFF = "OFF"

    def next(self) -> "LightMode":
        """Mode selected by a cycle request: AUTO -> ON -> OFF -> AUTO"""
        return _LIGHT_MODE_CYCLE[self]


_LIGHT_MODE_CYCLE = {
    LightMode.AUTO: LightMode.ON,
    LightMode.ON: LightMode.OFF,
    LightMode.OFF: LightMode.AUTO,
}


class DepthMeshMode(str, Enum):
    """Which depth source feeds the depth mesh"""
    OFF = "OFF"
    DEPTH = "DEPTH"
    RAW = "RAW"
