"""
Lumen Control System - Light mode arbitration, orientation and feature toggles
"""

from lumen.control.features import FeatureController, FeatureState
from lumen.control.light_mode import LightHardwareState, LightModeController
from lumen.control.orientation import DisplayRotation, OrientationSynchronizer, map_rotation

__all__ = [
    "DisplayRotation",
    "FeatureController",
    "FeatureState",
    "LightHardwareState",
    "LightModeController",
    "OrientationSynchronizer",
    "map_rotation",
]
