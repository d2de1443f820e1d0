"""
Shared test fixtures for Lumen daemon tests.

Provides fixtures for:
- Mock light platforms and negotiated capabilities
- A running light mode controller
- A scriptable fake tracking engine and recording render sink
- An API client bound to a started daemon
"""
import asyncio
import sys
import time
from pathlib import Path
from typing import Callable, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure src/ is on sys.path for direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from lumen.config import Settings
from lumen.control.light_mode import LightModeController
from lumen.engine.base import TrackingEngine
from lumen.hardware.base import DeviceCharacteristics, LensFacing
from lumen.hardware.device import LightDevice
from lumen.hardware.light_mock import LightPlatformMock
from lumen.hardware.negotiator import CapabilityNegotiator
from lumen.main import LumenDaemon
from lumen.modes import DepthMeshMode, LightMode
from lumen.telemetry.sink import MemoryRenderSink
from lumen.telemetry.snapshot import TelemetrySnapshot


# ============================================================================
# Fake Engine
# ============================================================================

class FakeEngine(TrackingEngine):
    """Engine double that records commands and serves scripted snapshots"""

    def __init__(self):
        super().__init__("Engine-Fake")
        self.calls: List[tuple] = []
        self.fetch_count = 0
        self.fail_fetches = 0
        self.fetch_delay = 0.0
        self.snapshot = TelemetrySnapshot(tracking_state="TRACKING", point_count=42)

    def fetch_snapshot(self) -> TelemetrySnapshot:
        self.fetch_count += 1
        if self.fetch_delay:
            time.sleep(self.fetch_delay)
        if self.fail_fetches > 0:
            self.fail_fetches -= 1
            raise RuntimeError("engine not ready")
        return self.snapshot

    def set_orientation(self, value: int) -> None:
        self.calls.append(("set_orientation", value))

    def clear_map_state(self) -> None:
        self.calls.append(("clear_map_state",))

    def clear_mesh_state(self) -> None:
        self.calls.append(("clear_mesh_state",))

    def set_map_enabled(self, enabled: bool) -> None:
        self.calls.append(("set_map_enabled", enabled))

    def set_planes_enabled(self, enabled: bool) -> None:
        self.calls.append(("set_planes_enabled", enabled))

    def set_wireframe_enabled(self, enabled: bool) -> None:
        self.calls.append(("set_wireframe_enabled", enabled))

    def set_depth_mesh_mode(self, mode: DepthMeshMode) -> None:
        self.calls.append(("set_depth_mesh_mode", mode))

    def set_debug_enabled(self, enabled: bool) -> None:
        self.calls.append(("set_debug_enabled", enabled))

    def set_light_mode(self, mode: LightMode) -> None:
        self.calls.append(("set_light_mode", mode))


async def wait_for(condition: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll `condition` on the event loop until true or fail after `timeout`"""
    deadline = asyncio.get_running_loop().time() + timeout
    while not condition():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


# ============================================================================
# Hardware Fixtures
# ============================================================================

@pytest.fixture
def mock_platform() -> LightPlatformMock:
    """Mock platform with a rear flash and a front camera."""
    platform = LightPlatformMock()
    platform.connected = True
    return platform


@pytest.fixture
def no_light_platform() -> LightPlatformMock:
    """Mock platform without any usable light."""
    platform = LightPlatformMock(
        devices=[
            DeviceCharacteristics(device_id="0", has_light=False, facing=LensFacing.BACK),
            DeviceCharacteristics(device_id="1", has_light=True, facing=LensFacing.FRONT),
        ]
    )
    platform.connected = True
    return platform


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def sink() -> MemoryRenderSink:
    return MemoryRenderSink()


def _build_controller(platform, engine) -> LightModeController:
    capability = CapabilityNegotiator(platform).discover()
    return LightModeController(capability, LightDevice(platform, capability.device_id), engine)


@pytest_asyncio.fixture
async def controller(mock_platform, fake_engine):
    """Running controller with an available light."""
    ctrl = _build_controller(mock_platform, fake_engine)
    ctrl.start()
    yield ctrl
    await ctrl.stop()


@pytest_asyncio.fixture
async def unavailable_controller(no_light_platform, fake_engine):
    """Running controller whose capability discovery found no light."""
    ctrl = _build_controller(no_light_platform, fake_engine)
    ctrl.start()
    yield ctrl
    await ctrl.stop()


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        light_mock=True,
        telemetry_enabled=False,
        telemetry_interval_ms=10,
        api_docs_enabled=False,
    )


@pytest_asyncio.fixture
async def daemon(test_settings, mock_platform, fake_engine, sink):
    """Started daemon on mock hardware and the fake engine."""
    lumen_daemon = LumenDaemon(
        settings=test_settings,
        platform=mock_platform,
        engine=fake_engine,
        render_sink=sink,
    )
    await lumen_daemon.startup()
    yield lumen_daemon
    await lumen_daemon.shutdown()


@pytest_asyncio.fixture
async def async_client(daemon):
    """HTTP client for the started daemon's app."""
    transport = ASGITransport(app=daemon.app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
