"""
Orientation Synchronizer - Display rotation to engine orientation

Called on resume, configuration change and display change. Holds no state,
so redundant calls are harmless.
"""
from enum import IntEnum
from typing import Any
import structlog

from lumen.engine.base import TrackingEngine, send_engine_command

logger = structlog.get_logger(__name__)


class DisplayRotation(IntEnum):
    """Platform display rotation in degrees"""
    ROTATION_0 = 0
    ROTATION_90 = 90
    ROTATION_180 = 180
    ROTATION_270 = 270


# Quarter turns expected by the engine
ROTATION_TO_ENGINE = {
    DisplayRotation.ROTATION_0: 0,
    DisplayRotation.ROTATION_90: 1,
    DisplayRotation.ROTATION_180: 2,
    DisplayRotation.ROTATION_270: 3,
}


def map_rotation(raw: Any) -> int:
    """
    Map a platform rotation to the engine value

    Args:
        raw: Rotation in degrees (0, 90, 180, 270)

    Returns:
        0-3; non-int or unrecognized input maps to 0
    """
    if isinstance(raw, bool) or not isinstance(raw, int):
        return 0
    return ROTATION_TO_ENGINE.get(raw, 0)


class OrientationSynchronizer:
    """Forwards display rotation changes to the engine"""

    def __init__(self, engine: TrackingEngine):
        self.engine = engine

    def on_orientation_changed(self, raw: Any) -> int:
        """
        Push the current display rotation to the engine

        Args:
            raw: Platform rotation value

        Returns:
            The engine orientation that was sent
        """
        value = map_rotation(raw)
        send_engine_command(self.engine, "set_orientation", value)
        logger.debug("orientation_synchronized", raw=repr(raw), orientation=value)
        return value
