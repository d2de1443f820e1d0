"""
Sysfs Light Platform - Linux LED class devices

Exposes flash/torch LEDs found under /sys/class/leds. LED directories follow
the kernel naming scheme "devicename:color:function"; only LEDs whose function
is "flash" or "torch" count as light-emitting devices for illumination.
"""
import asyncio
import os
from typing import List, Optional
import structlog

from lumen.hardware.base import DeviceCharacteristics, LensFacing, LightPlatform

logger = structlog.get_logger(__name__)

LIGHT_FUNCTIONS = ("flash", "torch")


def _read_file_content(filepath: str) -> Optional[str]:
    """Safely read file content"""
    try:
        if os.path.exists(filepath):
            with open(filepath, "r") as f:
                return f.read().strip()
    except (IOError, PermissionError) as e:
        logger.debug("file_read_error", path=filepath, error=str(e))
    return None


def _parse_led_name(name: str) -> tuple[str, str]:
    """
    Split an LED class name into (devicename, function).

    "white:flash" -> ("", "flash"); "rear:white:torch" -> ("rear", "torch")
    """
    parts = name.split(":")
    if len(parts) == 1:
        return "", parts[0].lower()
    return (parts[0].lower() if len(parts) == 3 else ""), parts[-1].lower()


class SysfsLightPlatform(LightPlatform):
    """Light platform backed by the Linux LED class"""

    def __init__(self, root: str = "/sys/class/leds"):
        super().__init__("Sysfs-LED")
        self.root = root
        self.command_count = 0

    async def connect(self) -> bool:
        self.connected = os.path.isdir(self.root)
        if self.connected:
            logger.info("sysfs_light_connected", root=self.root)
        else:
            logger.warning("sysfs_light_root_missing", root=self.root)
        return self.connected

    async def disconnect(self) -> None:
        self.connected = False

    def list_devices(self) -> List[str]:
        # Directory order is arbitrary, sort for a stable enumeration order
        return sorted(os.listdir(self.root))

    def get_characteristics(self, device_id: str) -> DeviceCharacteristics:
        device_path = os.path.join(self.root, device_id)
        if not os.path.isdir(device_path):
            raise ValueError(f"Unknown device: {device_id}")

        devicename, function = _parse_led_name(device_id)
        max_brightness = _read_file_content(os.path.join(device_path, "max_brightness"))

        has_light = (
            function in LIGHT_FUNCTIONS
            and max_brightness is not None
            and max_brightness.isdigit()
            and int(max_brightness) > 0
        )
        facing = LensFacing.FRONT if "front" in devicename else LensFacing.BACK

        return DeviceCharacteristics(device_id=device_id, has_light=has_light, facing=facing)

    async def set_light_enabled(self, device_id: str, enabled: bool) -> None:
        """
        Write the LED brightness

        Args:
            device_id: LED directory name
            enabled: True writes max_brightness, False writes 0
        """
        device_path = os.path.join(self.root, device_id)

        try:
            value = await asyncio.to_thread(self._write_brightness, device_path, enabled)
        except OSError:
            self.error_count += 1
            raise

        self.command_count += 1
        logger.debug("sysfs_light_set", device_id=device_id, brightness=value)

    @staticmethod
    def _write_brightness(device_path: str, enabled: bool) -> str:
        value = "0"
        if enabled:
            value = _read_file_content(os.path.join(device_path, "max_brightness")) or "1"
        with open(os.path.join(device_path, "brightness"), "w") as f:
            f.write(value)
        return value

    def get_statistics(self) -> dict:
        return {
            "connected": self.connected,
            "root": self.root,
            "command_count": self.command_count,
            "error_count": self.error_count,
        }
