"""
Hardware Manager - Owns the light platform and the selected device

Handles platform initialization, one-time capability negotiation, and hands
the resulting device handle to the light mode controller.
"""
from typing import Optional
import structlog

from lumen.hardware.base import LightPlatform
from lumen.hardware.device import LightDevice
from lumen.hardware.light_mock import LightPlatformMock
from lumen.hardware.negotiator import UNAVAILABLE, CapabilityNegotiator, LightCapability

logger = structlog.get_logger(__name__)


class HardwareManager:
    """
    Central hardware manager

    Connects the light platform, runs discovery exactly once, and exposes
    the capability and device handle for the rest of the daemon.
    """

    def __init__(
        self,
        platform: Optional[LightPlatform] = None,
        light_mock: bool = True,
        sysfs_root: str = "/sys/class/leds",
    ):
        """
        Initialize hardware manager

        Args:
            platform: Light platform instance (or None to create default)
            light_mock: If True, use the simulated light platform
            sysfs_root: LED class directory for the real platform
        """
        if platform is None:
            if light_mock:
                self.platform: LightPlatform = LightPlatformMock()
            else:
                # Import real driver only if needed
                from lumen.hardware.sysfs_light import SysfsLightPlatform

                self.platform = SysfsLightPlatform(sysfs_root)
        else:
            self.platform = platform

        self.capability: LightCapability = UNAVAILABLE
        self.device: LightDevice = LightDevice(self.platform, None)

        logger.info(
            "hardware_manager_initialized",
            light_mock=light_mock,
            platform=self.platform.name,
        )

    async def initialize(self) -> LightCapability:
        """
        Connect the platform and negotiate the light capability

        Returns:
            The negotiated capability (unavailable if the platform cannot connect)
        """
        logger.info("hardware_initializing")

        try:
            connected = await self.platform.connect()
        except Exception as e:
            logger.error("light_platform_connect_error", error=str(e), exc_info=True)
            connected = False

        if connected:
            self.capability = CapabilityNegotiator(self.platform).discover()
        else:
            logger.warning("light_platform_unavailable", platform=self.platform.name)
            self.capability = UNAVAILABLE

        self.device = LightDevice(self.platform, self.capability.device_id)

        logger.info(
            "hardware_initialized",
            light_available=self.capability.available,
            device_id=self.capability.device_id,
        )
        return self.capability

    async def shutdown(self) -> None:
        """Disconnect the light platform"""
        logger.info("hardware_shutting_down")

        try:
            await self.platform.disconnect()
        except Exception as e:
            logger.error("light_platform_disconnect_error", error=str(e))

        logger.info("hardware_shutdown_complete")

    def get_statistics(self) -> dict:
        """
        Get hardware statistics

        Returns:
            Dictionary with platform statistics and the negotiated capability
        """
        return {
            "platform": self.platform.get_statistics(),
            "capability": {
                "available": self.capability.available,
                "device_id": self.capability.device_id,
            },
        }
