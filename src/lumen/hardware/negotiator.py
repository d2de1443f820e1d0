"""
Capability Negotiator - Selects the light-emitting device to control

Runs once at startup. Absence of a usable light is a normal outcome and is
reported as an unavailable capability, never as an exception.
"""
from dataclasses import dataclass
from typing import Optional
import structlog

from lumen.errors import ErrorKind
from lumen.hardware.base import LensFacing, LightPlatform

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LightCapability:
    """Result of device discovery, fixed for the process lifetime"""
    device_id: Optional[str] = None
    available: bool = False


UNAVAILABLE = LightCapability()


class CapabilityNegotiator:
    """Picks the first rear-facing device that can emit light"""

    def __init__(self, platform: LightPlatform):
        self.platform = platform

    def discover(self) -> LightCapability:
        """
        Enumerate devices and select one deterministically

        Returns:
            LightCapability for the first matching device in enumeration
            order, or an unavailable capability
        """
        try:
            for device_id in self.platform.list_devices():
                characteristics = self.platform.get_characteristics(device_id)
                if characteristics.has_light and characteristics.facing == LensFacing.BACK:
                    logger.info(
                        "light_capability_discovered",
                        platform=self.platform.name,
                        device_id=device_id,
                    )
                    return LightCapability(device_id=device_id, available=True)
        except Exception as e:
            logger.error(
                "light_discovery_failed",
                platform=self.platform.name,
                error_kind=ErrorKind.CAPABILITY_UNAVAILABLE.value,
                error=str(e),
                exc_info=True,
            )
            return UNAVAILABLE

        logger.info(
            "light_capability_unavailable",
            platform=self.platform.name,
            error_kind=ErrorKind.CAPABILITY_UNAVAILABLE.value,
        )
        return UNAVAILABLE
