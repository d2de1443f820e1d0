"""
Feature Controller - Engine feature toggles and the telemetry overlay

Keeps the user-facing toggle state and forwards each change to the engine.
The telemetry overlay toggle also owns the poller lifecycle, so a polling
session exists exactly while the overlay is shown.
"""
from dataclasses import asdict, dataclass
import structlog

from lumen.engine.base import TrackingEngine, send_engine_command
from lumen.modes import DepthMeshMode
from lumen.telemetry.poller import TelemetryPoller

logger = structlog.get_logger(__name__)


@dataclass
class FeatureState:
    """Toggle state as shown to the user"""
    map_enabled: bool = True
    planes_enabled: bool = True
    wireframe_enabled: bool = False
    depth_mesh_mode: DepthMeshMode = DepthMeshMode.OFF
    telemetry_enabled: bool = False


class FeatureController:
    """Applies feature toggles to the engine"""

    def __init__(
        self,
        engine: TrackingEngine,
        poller: TelemetryPoller,
        telemetry_interval_ms: int = 100,
    ):
        self.engine = engine
        self.poller = poller
        self.telemetry_interval_ms = telemetry_interval_ms
        self.state = FeatureState()

    def apply_defaults(self, telemetry_enabled: bool = True) -> None:
        """Push the startup toggle state to the engine"""
        self.set_map_enabled(self.state.map_enabled)
        self.set_planes_enabled(self.state.planes_enabled)
        self.set_wireframe_enabled(self.state.wireframe_enabled)
        self.set_depth_mesh_mode(self.state.depth_mesh_mode)
        self.set_telemetry_enabled(telemetry_enabled)
        logger.info("feature_defaults_applied", **self.get_state())

    def set_map_enabled(self, enabled: bool) -> None:
        self.state.map_enabled = enabled
        send_engine_command(self.engine, "set_map_enabled", enabled)

    def set_planes_enabled(self, enabled: bool) -> None:
        self.state.planes_enabled = enabled
        send_engine_command(self.engine, "set_planes_enabled", enabled)

    def set_wireframe_enabled(self, enabled: bool) -> None:
        self.state.wireframe_enabled = enabled
        send_engine_command(self.engine, "set_wireframe_enabled", enabled)

    def set_depth_mesh_mode(self, mode: DepthMeshMode) -> None:
        self.state.depth_mesh_mode = DepthMeshMode(mode)
        send_engine_command(self.engine, "set_depth_mesh_mode", self.state.depth_mesh_mode)

    def clear_map(self) -> None:
        send_engine_command(self.engine, "clear_map_state")

    def clear_mesh(self) -> None:
        send_engine_command(self.engine, "clear_mesh_state")

    def set_telemetry_enabled(self, enabled: bool) -> None:
        """
        Show or hide the telemetry overlay

        Must be called from the control event loop; showing the overlay
        starts a polling session, hiding it stops the session.
        """
        self.state.telemetry_enabled = enabled
        send_engine_command(self.engine, "set_debug_enabled", enabled)

        if enabled:
            self.poller.start(self.telemetry_interval_ms)
        else:
            self.poller.stop()

    def get_state(self) -> dict:
        state = asdict(self.state)
        state["depth_mesh_mode"] = self.state.depth_mesh_mode.value
        return state
