"""
Lumen Hardware Interface - Light platforms and device negotiation

This module provides hardware abstraction for:
- Enumerating light-emitting devices (simulated or Linux sysfs LEDs)
- Selecting the rear-facing light once at startup
- Switching the selected light

Both mock and real implementations are provided for testing and production.
"""

from lumen.hardware.base import DeviceCharacteristics, HardwareDriver, LensFacing, LightPlatform
from lumen.hardware.device import LightDevice
from lumen.hardware.manager import HardwareManager
from lumen.hardware.negotiator import CapabilityNegotiator, LightCapability

__all__ = [
    "CapabilityNegotiator",
    "DeviceCharacteristics",
    "HardwareDriver",
    "HardwareManager",
    "LensFacing",
    "LightCapability",
    "LightDevice",
    "LightPlatform",
]
