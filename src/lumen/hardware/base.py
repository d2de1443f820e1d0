"""
Hardware Base Classes - Abstract interfaces for light platforms

Defines the interface that every light platform must implement, allowing
easy swapping between simulated and real implementations.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List
import structlog

logger = structlog.get_logger(__name__)


class LensFacing(str, Enum):
    """Which sensor a light-emitting device sits next to"""
    BACK = "back"
    FRONT = "front"
    EXTERNAL = "external"


@dataclass(frozen=True)
class DeviceCharacteristics:
    """Static description of one enumerated device"""
    device_id: str
    has_light: bool
    facing: LensFacing


class HardwareDriver(ABC):
    """Base class for all hardware drivers"""

    def __init__(self, name: str):
        """
        Initialize hardware driver

        Args:
            name: Human-readable driver name
        """
        self.name = name
        self.connected = False
        self.error_count = 0

    @abstractmethod
    async def connect(self) -> bool:
        """
        Connect to hardware

        Returns:
            True if connection successful, False otherwise
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Disconnect from hardware"""
        pass

    def is_connected(self) -> bool:
        return self.connected


class LightPlatform(HardwareDriver):
    """
    Abstract interface for a platform exposing light-emitting devices

    Enumeration is synchronous and cheap. Switching a light may touch a
    driver and is therefore async.
    """

    @abstractmethod
    def list_devices(self) -> List[str]:
        """
        Enumerate device identifiers in platform order

        Returns:
            List of device ids
        """
        pass

    @abstractmethod
    def get_characteristics(self, device_id: str) -> DeviceCharacteristics:
        """
        Describe one device

        Args:
            device_id: Identifier returned by list_devices()

        Returns:
            The device characteristics
        """
        pass

    @abstractmethod
    async def set_light_enabled(self, device_id: str, enabled: bool) -> None:
        """
        Switch a device's light on or off

        Args:
            device_id: Target device
            enabled: True to emit light, False to stop
        """
        pass

    @abstractmethod
    def get_statistics(self) -> dict:
        """
        Get driver statistics

        Returns:
            Dictionary with driver statistics
        """
        pass
