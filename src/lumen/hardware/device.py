"""
Light Device - Owned handle to the selected light

The handle is created once by the hardware manager and passed to the light
mode controller, which is its only user.
"""
from typing import Optional
import structlog

from lumen.errors import BoundaryResult, ErrorKind
from lumen.hardware.base import LightPlatform

logger = structlog.get_logger(__name__)


class LightDevice:
    """Switches one device on a light platform"""

    def __init__(self, platform: LightPlatform, device_id: Optional[str]):
        self.platform = platform
        self.device_id = device_id

    async def set_enabled(self, enabled: bool) -> BoundaryResult:
        """
        Issue a hardware command

        Args:
            enabled: Desired light state

        Returns:
            BoundaryResult; driver errors become HARDWARE_COMMAND_FAILURE
        """
        if self.device_id is None:
            return BoundaryResult.failure(ErrorKind.CAPABILITY_UNAVAILABLE, "No light device selected")

        try:
            await self.platform.set_light_enabled(self.device_id, enabled)
        except Exception as e:
            return BoundaryResult.failure(ErrorKind.HARDWARE_COMMAND_FAILURE, e)

        return BoundaryResult.success(enabled)

    def __repr__(self) -> str:
        return f"LightDevice(platform={self.platform.name!r}, device_id={self.device_id!r})"
