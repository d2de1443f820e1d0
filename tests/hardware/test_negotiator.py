"""
Unit tests for CapabilityNegotiator
"""
import pytest

from lumen.hardware.base import DeviceCharacteristics, LensFacing
from lumen.hardware.light_mock import LightPlatformMock
from lumen.hardware.negotiator import UNAVAILABLE, CapabilityNegotiator, LightCapability


def _platform(*devices):
    return LightPlatformMock(devices=list(devices))


class TestCapabilityNegotiator:
    """Tests for device selection"""

    def test_rear_light_selected(self, mock_platform):
        capability = CapabilityNegotiator(mock_platform).discover()

        assert capability == LightCapability(device_id="0", available=True)

    def test_first_matching_device_wins(self):
        platform = _platform(
            DeviceCharacteristics("front", True, LensFacing.FRONT),
            DeviceCharacteristics("rear-a", True, LensFacing.BACK),
            DeviceCharacteristics("rear-b", True, LensFacing.BACK),
        )

        capability = CapabilityNegotiator(platform).discover()

        assert capability.device_id == "rear-a"

    def test_selection_is_deterministic(self):
        devices = [
            DeviceCharacteristics("2", True, LensFacing.BACK),
            DeviceCharacteristics("1", True, LensFacing.BACK),
        ]

        results = {CapabilityNegotiator(_platform(*devices)).discover() for _ in range(5)}

        assert results == {LightCapability(device_id="2", available=True)}

    def test_rear_device_without_light_skipped(self, no_light_platform):
        assert CapabilityNegotiator(no_light_platform).discover() is UNAVAILABLE

    @pytest.mark.parametrize("facing", [LensFacing.FRONT, LensFacing.EXTERNAL])
    def test_non_rear_light_not_selected(self, facing):
        platform = _platform(DeviceCharacteristics("0", True, facing))

        capability = CapabilityNegotiator(platform).discover()

        assert capability.available is False
        assert capability.device_id is None

    def test_no_devices(self):
        assert CapabilityNegotiator(_platform()).discover() == UNAVAILABLE

    def test_enumeration_failure_is_unavailable(self, mock_platform):
        mock_platform.fail_enumeration = True

        capability = CapabilityNegotiator(mock_platform).discover()

        assert capability == UNAVAILABLE

    def test_characteristics_failure_is_unavailable(self, mock_platform):
        def broken(device_id):
            raise RuntimeError("query failed")

        mock_platform.get_characteristics = broken

        assert CapabilityNegotiator(mock_platform).discover() == UNAVAILABLE
