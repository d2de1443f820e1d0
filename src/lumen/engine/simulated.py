"""
Simulated Tracking Engine - Software stand-in for the tracking engine

Runs a frame loop on its own thread, produces plausible tracking statistics,
and issues AUTO light decisions from that thread the same way a real engine
callback would.
"""
import asyncio
import math
import random
import threading
import time
from typing import Callable, Optional
import structlog

from lumen.engine.base import TrackingEngine
from lumen.logic.auto_light import AutoLightPolicy
from lumen.modes import DepthMeshMode, LightMode
from lumen.telemetry.snapshot import TelemetrySnapshot

logger = structlog.get_logger(__name__)

# Frames before simulated tracking is acquired
WARMUP_FRAMES = 30


def _daylight_intensity(elapsed_s: float, period_s: float = 60.0) -> float:
    """Slow dark/bright cycle in [0.05, 0.95]"""
    return 0.5 + 0.45 * math.sin(2 * math.pi * elapsed_s / period_s)


class SimulatedTrackingEngine(TrackingEngine):
    """
    Simulated engine for development and testing

    `step()` advances one frame and can be driven directly in tests; `start()`
    runs it continuously on a background thread.
    """

    def __init__(
        self,
        frame_hz: int = 30,
        policy: Optional[AutoLightPolicy] = None,
        intensity_source: Optional[Callable[[float], float]] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize simulated engine

        Args:
            frame_hz: Simulated camera frame rate
            policy: AUTO light policy (default thresholds if None)
            intensity_source: Maps elapsed seconds to ambient intensity
            seed: Random seed for reproducible statistics
        """
        super().__init__("Engine-Sim")

        self.frame_hz = frame_hz
        self.policy = policy or AutoLightPolicy()
        self.intensity_source = intensity_source or _daylight_intensity
        self.random = random.Random(seed)

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._started_at = time.monotonic()

        # Engine-side state, guarded by _lock
        self.frame_count = 0
        self.orientation = 0
        self.light_mode = LightMode.AUTO
        self.light_enabled = False
        self.map_enabled = True
        self.planes_enabled = True
        self.wireframe_enabled = False
        self.depth_mesh_mode = DepthMeshMode.OFF
        self.debug_enabled = False
        self.map_points = 0
        self.voxels_used = 0
        self.mesh_valid_ratio = 0.0
        self.last_intensity = 0.0

        # Failure injection
        self.fail_fetches = 0

        logger.info("simulated_engine_initialized", frame_hz=frame_hz)

    # Frame loop

    async def start(self) -> None:
        if self._thread and self._thread.is_alive():
            logger.warning("simulated_engine_already_running")
            return

        self._stop_event.clear()
        self._started_at = time.monotonic()
        self._thread = threading.Thread(target=self._run, name="engine-sim", daemon=True)
        self._thread.start()
        logger.info("simulated_engine_started")

    async def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            await asyncio.to_thread(self._thread.join, 2.0)
            self._thread = None
        logger.info("simulated_engine_stopped", frames=self.frame_count)

    def _run(self) -> None:
        interval = 1.0 / self.frame_hz
        while not self._stop_event.wait(interval):
            try:
                self.step(time.monotonic() - self._started_at)
            except Exception as e:
                logger.error("simulated_engine_frame_error", error=str(e), exc_info=True)

    def step(self, elapsed_s: float) -> Optional[bool]:
        """
        Advance one frame

        Args:
            elapsed_s: Seconds since the engine started

        Returns:
            The AUTO decision emitted this frame, if any
        """
        intensity = self.intensity_source(elapsed_s)

        with self._lock:
            self.frame_count += 1
            self.last_intensity = intensity
            if self.map_enabled and self.frame_count > WARMUP_FRAMES:
                self.map_points += self.random.randint(0, 12)
                self.voxels_used += self.random.randint(0, 40)
            if self.depth_mesh_mode != DepthMeshMode.OFF:
                self.mesh_valid_ratio = min(1.0, 0.6 + self.random.random() * 0.4)
            decision = None
            if self.light_mode == LightMode.AUTO:
                decision = self.policy.update(intensity)
                if decision is not None:
                    self.light_enabled = decision

        # Emit outside the lock; the handler marshals onto the control loop
        if decision is not None:
            self.emit_auto_signal(decision)
        return decision

    # Boundary commands

    def fetch_snapshot(self) -> TelemetrySnapshot:
        with self._lock:
            if self.fail_fetches > 0:
                self.fail_fetches -= 1
                raise RuntimeError("Simulated snapshot failure")

            tracking = self.frame_count > WARMUP_FRAMES
            tracked = self.random.randint(80, 200) if tracking else 0
            depth_on = self.depth_mesh_mode != DepthMeshMode.OFF
            mesh_w, mesh_h = (160, 90) if depth_on else (0, 0)

            return TelemetrySnapshot(
                tracking_state="TRACKING" if tracking else "PAUSED",
                last_failure_reason="NONE" if tracking else "INITIALIZING",
                point_count=tracked * 2,
                map_points=self.map_points,
                bearing_landmarks=self.map_points // 3,
                metric_landmarks=self.map_points - self.map_points // 3,
                tracked_features=tracked,
                stable_tracks=tracked // 2,
                avg_track_age=self.random.uniform(5.0, 30.0) if tracking else 0.0,
                depth_hit_rate=self.random.uniform(40.0, 90.0) if depth_on else 0.0,
                fps=float(self.frame_hz),
                light_mode=self.light_mode.value,
                light_enabled=self.light_enabled,
                depth_enabled=depth_on,
                depth_supported=True,
                depth_mode=self.depth_mesh_mode.value if depth_on else "DEPTH",
                depth_width=160,
                depth_height=90,
                depth_min_m=0.25 if depth_on else 0.0,
                depth_max_m=4.5 if depth_on else 0.0,
                voxels_used=self.voxels_used,
                points_fused_per_second=self.random.randint(500, 3000) if depth_on else 0,
                map_enabled=self.map_enabled,
                depth_overlay_enabled=self.debug_enabled and depth_on,
                planes_enabled=self.planes_enabled,
                depth_mesh_mode=self.depth_mesh_mode.value,
                depth_mesh_wireframe=self.wireframe_enabled,
                depth_mesh_width=mesh_w,
                depth_mesh_height=mesh_h,
                depth_mesh_valid_ratio=self.mesh_valid_ratio if depth_on else 0.0,
            )

    def set_orientation(self, value: int) -> None:
        with self._lock:
            self.orientation = value
        logger.debug("engine_orientation_set", orientation=value)

    def clear_map_state(self) -> None:
        with self._lock:
            self.map_points = 0
            self.voxels_used = 0
        logger.info("engine_map_cleared")

    def clear_mesh_state(self) -> None:
        with self._lock:
            self.mesh_valid_ratio = 0.0
        logger.info("engine_mesh_cleared")

    def set_map_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.map_enabled = enabled

    def set_planes_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.planes_enabled = enabled

    def set_wireframe_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.wireframe_enabled = enabled

    def set_depth_mesh_mode(self, mode: DepthMeshMode) -> None:
        with self._lock:
            self.depth_mesh_mode = DepthMeshMode(mode)
            if self.depth_mesh_mode == DepthMeshMode.OFF:
                self.mesh_valid_ratio = 0.0

    def set_debug_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.debug_enabled = enabled

    def set_light_mode(self, mode: LightMode) -> None:
        with self._lock:
            self.light_mode = LightMode(mode)
            if self.light_mode == LightMode.ON:
                self.light_enabled = True
            elif self.light_mode == LightMode.OFF:
                self.light_enabled = False
            # A fresh AUTO period starts from whatever the light is doing now
            self.policy.reset(self.light_enabled)
