"""
Light Platform Mock - Simulated light-emitting devices for testing

Provides a simulated platform that enumerates devices like a real one but
runs entirely in software. Failures can be injected for enumeration and for
individual light commands.
"""
import asyncio
from typing import Dict, List, Optional, Sequence, Tuple
import structlog

from lumen.hardware.base import DeviceCharacteristics, LensFacing, LightPlatform

logger = structlog.get_logger(__name__)

# Typical phone layout: rear camera with a flash, front camera without
DEFAULT_DEVICES: Tuple[DeviceCharacteristics, ...] = (
    DeviceCharacteristics(device_id="0", has_light=True, facing=LensFacing.BACK),
    DeviceCharacteristics(device_id="1", has_light=False, facing=LensFacing.FRONT),
)


class LightPlatformMock(LightPlatform):
    """
    Mock light platform for testing

    Records every light command in `commands` so tests can count exactly
    what reached the "hardware".
    """

    def __init__(self, devices: Optional[Sequence[DeviceCharacteristics]] = None):
        """
        Initialize mock platform

        Args:
            devices: Devices to expose, in enumeration order (default: rear flash + front camera)
        """
        super().__init__("Light-Mock")

        self.devices: Dict[str, DeviceCharacteristics] = {
            device.device_id: device for device in (DEFAULT_DEVICES if devices is None else devices)
        }
        self.light_states: Dict[str, bool] = {device_id: False for device_id in self.devices}

        # Failure injection
        self.fail_enumeration = False
        self.fail_commands = 0

        # Statistics
        self.commands: List[Tuple[str, bool]] = []
        self.failed_commands = 0

        logger.info("light_mock_initialized", device_count=len(self.devices))

    async def connect(self) -> bool:
        """
        Simulate connecting to the platform

        Returns:
            Always True (mock always succeeds)
        """
        await asyncio.sleep(0.001)
        self.connected = True
        logger.info("light_mock_connected")
        return True

    async def disconnect(self) -> None:
        """Simulate disconnecting from the platform"""
        self.connected = False
        logger.info("light_mock_disconnected")

    def list_devices(self) -> List[str]:
        if self.fail_enumeration:
            raise RuntimeError("Device enumeration failed")
        return list(self.devices)

    def get_characteristics(self, device_id: str) -> DeviceCharacteristics:
        if device_id not in self.devices:
            raise ValueError(f"Unknown device: {device_id}")
        return self.devices[device_id]

    async def set_light_enabled(self, device_id: str, enabled: bool) -> None:
        """
        Switch a simulated light

        Args:
            device_id: Target device
            enabled: Desired light state
        """
        if device_id not in self.devices:
            raise ValueError(f"Unknown device: {device_id}")

        if not self.devices[device_id].has_light:
            raise ValueError(f"Device has no light: {device_id}")

        self.commands.append((device_id, enabled))

        if self.fail_commands > 0:
            self.fail_commands -= 1
            self.failed_commands += 1
            self.error_count += 1
            raise OSError(f"Simulated driver error on device {device_id}")

        # Simulate driver latency
        await asyncio.sleep(0.0001)

        self.light_states[device_id] = enabled
        logger.debug("light_set", device_id=device_id, enabled=enabled)

    def get_statistics(self) -> dict:
        """
        Get mock driver statistics

        Returns:
            Dictionary with statistics
        """
        return {
            "connected": self.connected,
            "device_count": len(self.devices),
            "command_count": len(self.commands),
            "failed_commands": self.failed_commands,
            "lights_on": sorted(d for d, on in self.light_states.items() if on),
            "error_count": self.error_count,
        }

    # Helper methods for testing

    def is_light_on(self, device_id: str) -> bool:
        return self.light_states[device_id]

    def is_mock(self) -> bool:
        """Check if this is a mock driver"""
        return True
