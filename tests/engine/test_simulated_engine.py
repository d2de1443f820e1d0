"""
Unit tests for the simulated tracking engine and engine boundary helpers
"""
import threading

import pytest

from conftest import FakeEngine, wait_for
from lumen.config import Settings
from lumen.engine import SimulatedTrackingEngine, create_engine
from lumen.engine.base import fetch_snapshot_result, send_engine_command
from lumen.errors import ErrorKind
from lumen.logic.auto_light import AutoLightPolicy
from lumen.modes import DepthMeshMode, LightMode
from lumen.telemetry.snapshot import TelemetrySnapshot
from lumen.engine.simulated import WARMUP_FRAMES


def _engine(intensity=0.9, confirm_frames=2):
    return SimulatedTrackingEngine(
        frame_hz=100,
        policy=AutoLightPolicy(confirm_frames=confirm_frames),
        intensity_source=lambda elapsed: intensity,
        seed=1,
    )


def build_fake_engine(settings):
    return FakeEngine()


def build_not_an_engine(settings):
    return object()


class TestSimulatedEngine:
    """Tests for frame stepping and engine-side state"""

    def test_snapshot_before_tracking(self):
        snapshot = _engine().fetch_snapshot()

        assert isinstance(snapshot, TelemetrySnapshot)
        assert snapshot.tracking_state == "PAUSED"
        assert snapshot.depth_supported is True

    def test_tracking_after_warmup(self):
        engine = _engine()
        for frame in range(WARMUP_FRAMES + 1):
            engine.step(frame / 100)

        assert engine.fetch_snapshot().tracking_state == "TRACKING"

    def test_dark_scene_emits_auto_signal(self):
        engine = _engine(intensity=0.05, confirm_frames=2)
        received = []
        engine.set_auto_signal_handler(received.append)

        engine.step(0.0)
        engine.step(0.01)

        assert received == [True]
        assert engine.fetch_snapshot().light_enabled is True

    def test_no_auto_signal_outside_auto(self):
        engine = _engine(intensity=0.05, confirm_frames=1)
        received = []
        engine.set_auto_signal_handler(received.append)
        engine.set_light_mode(LightMode.OFF)

        for frame in range(5):
            engine.step(frame / 100)

        assert received == []

    def test_light_mode_mirrored_in_snapshot(self):
        engine = _engine()

        engine.set_light_mode(LightMode.ON)
        snapshot = engine.fetch_snapshot()

        assert snapshot.light_mode == "ON"
        assert snapshot.light_enabled is True

    def test_feature_commands(self):
        engine = _engine()

        engine.set_planes_enabled(False)
        engine.set_wireframe_enabled(True)
        engine.set_depth_mesh_mode(DepthMeshMode.RAW)
        engine.set_orientation(3)
        snapshot = engine.fetch_snapshot()

        assert snapshot.planes_enabled is False
        assert snapshot.depth_mesh_wireframe is True
        assert snapshot.depth_mesh_mode == "RAW"
        assert engine.orientation == 3

    def test_clear_map(self):
        engine = _engine()
        for frame in range(WARMUP_FRAMES + 20):
            engine.step(frame / 100)

        engine.clear_map_state()

        assert engine.fetch_snapshot().map_points == 0

    def test_injected_fetch_failure(self):
        engine = _engine()
        engine.fail_fetches = 1

        with pytest.raises(RuntimeError):
            engine.fetch_snapshot()
        assert engine.fetch_snapshot() is not None

    @pytest.mark.asyncio
    async def test_frame_thread(self):
        engine = _engine(intensity=0.05, confirm_frames=1)
        threads = []
        engine.set_auto_signal_handler(lambda enable: threads.append(threading.get_ident()))

        await engine.start()
        await wait_for(lambda: engine.frame_count >= 3)
        await engine.stop()

        assert threads
        assert threading.get_ident() not in threads


class TestEngineBoundary:
    """Tests for fetch/command wrappers"""

    def test_fetch_result_success(self, fake_engine):
        result = fetch_snapshot_result(fake_engine)

        assert result.ok is True
        assert result.value is fake_engine.snapshot

    def test_fetch_result_failure(self, fake_engine):
        fake_engine.fail_fetches = 1

        result = fetch_snapshot_result(fake_engine)

        assert result.ok is False
        assert result.error_kind == ErrorKind.SNAPSHOT_FETCH_FAILURE

    def test_command_success(self, fake_engine):
        assert send_engine_command(fake_engine, "set_map_enabled", False) is True
        assert fake_engine.calls == [("set_map_enabled", False)]

    def test_command_failure_is_swallowed(self, fake_engine):
        def broken(value):
            raise RuntimeError("engine gone")

        fake_engine.set_orientation = broken

        assert send_engine_command(fake_engine, "set_orientation", 1) is False


class TestCreateEngine:
    """Tests for engine construction from settings"""

    def test_default_is_simulated(self):
        settings = Settings(_env_file=None, auto_light_confirm_frames=5)

        engine = create_engine(settings)

        assert isinstance(engine, SimulatedTrackingEngine)
        assert engine.policy.confirm_frames == 5

    def test_factory_path(self):
        settings = Settings(_env_file=None, engine_factory="test_simulated_engine:build_fake_engine")

        assert isinstance(create_engine(settings), FakeEngine)

    def test_factory_path_without_callable(self):
        settings = Settings(_env_file=None, engine_factory="test_simulated_engine")

        with pytest.raises(ValueError):
            create_engine(settings)

    def test_factory_wrong_type(self):
        settings = Settings(_env_file=None, engine_factory="test_simulated_engine:build_not_an_engine")

        with pytest.raises(TypeError):
            create_engine(settings)
