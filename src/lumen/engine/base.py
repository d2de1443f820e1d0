"""
Tracking Engine Boundary - Interface to the opaque tracking/mapping engine

The engine runs on its own thread. The core pulls snapshots from it and
sends fire-and-forget commands; the engine pushes AUTO light decisions
back through a registered handler, from whichever thread it likes.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional
import structlog

from lumen.errors import BoundaryResult, ErrorKind
from lumen.modes import DepthMeshMode, LightMode
from lumen.telemetry.snapshot import TelemetrySnapshot

logger = structlog.get_logger(__name__)

AutoSignalHandler = Callable[[bool], None]


class TrackingEngine(ABC):
    """Base class for tracking engine adapters"""

    def __init__(self, name: str):
        self.name = name
        self.auto_signal_handler: Optional[AutoSignalHandler] = None

    def set_auto_signal_handler(self, handler: Optional[AutoSignalHandler]) -> None:
        """
        Register the receiver of AUTO light decisions

        Args:
            handler: Called with True/False; may be invoked on any thread
        """
        self.auto_signal_handler = handler

    def emit_auto_signal(self, enable: bool) -> None:
        """Deliver an AUTO light decision to the registered handler"""
        if self.auto_signal_handler is not None:
            self.auto_signal_handler(enable)

    async def start(self) -> None:
        """Start engine processing (no-op for engines driven elsewhere)"""

    async def stop(self) -> None:
        """Stop engine processing"""

    @abstractmethod
    def fetch_snapshot(self) -> TelemetrySnapshot:
        """
        Read the current engine status

        Returns:
            A complete snapshot; raises on failure
        """
        pass

    @abstractmethod
    def set_orientation(self, value: int) -> None:
        """Display orientation, 0-3 in quarter turns"""
        pass

    @abstractmethod
    def clear_map_state(self) -> None:
        pass

    @abstractmethod
    def clear_mesh_state(self) -> None:
        pass

    @abstractmethod
    def set_map_enabled(self, enabled: bool) -> None:
        pass

    @abstractmethod
    def set_planes_enabled(self, enabled: bool) -> None:
        pass

    @abstractmethod
    def set_wireframe_enabled(self, enabled: bool) -> None:
        pass

    @abstractmethod
    def set_depth_mesh_mode(self, mode: DepthMeshMode) -> None:
        pass

    @abstractmethod
    def set_debug_enabled(self, enabled: bool) -> None:
        pass

    @abstractmethod
    def set_light_mode(self, mode: LightMode) -> None:
        pass


def fetch_snapshot_result(engine: TrackingEngine) -> BoundaryResult:
    """
    Fetch a snapshot without letting engine errors escape

    Returns:
        BoundaryResult holding the snapshot, or SNAPSHOT_FETCH_FAILURE
    """
    try:
        snapshot = engine.fetch_snapshot()
    except Exception as e:
        return BoundaryResult.failure(ErrorKind.SNAPSHOT_FETCH_FAILURE, e)

    if not isinstance(snapshot, TelemetrySnapshot):
        return BoundaryResult.failure(
            ErrorKind.SNAPSHOT_FETCH_FAILURE,
            f"Engine returned {type(snapshot).__name__}, expected TelemetrySnapshot",
        )
    return BoundaryResult.success(snapshot)


def send_engine_command(engine: TrackingEngine, command: str, *args) -> bool:
    """
    Fire-and-forget engine command

    Engine commands have no return value; a raising adapter is logged and
    treated as a silent no-op.

    Returns:
        True if the engine accepted the call
    """
    try:
        getattr(engine, command)(*args)
    except Exception as e:
        logger.warning(
            "engine_command_failed",
            engine=engine.name,
            command=command,
            error=str(e),
        )
        return False
    return True
