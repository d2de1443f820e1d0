"""
Lumen Engine Boundary - Tracking engine interface and simulated engine
"""
import importlib
from typing import Optional

from lumen.engine.base import TrackingEngine
from lumen.engine.simulated import SimulatedTrackingEngine

__all__ = [
    "TrackingEngine",
    "SimulatedTrackingEngine",
    "create_engine",
]


def create_engine(settings) -> TrackingEngine:
    """
    Build the tracking engine adapter named by settings

    `engine_factory` is a "module:callable" path; the callable receives the
    settings and returns a TrackingEngine. Without it the simulated engine
    is used.
    """
    factory_path: Optional[str] = settings.engine_factory
    if not factory_path:
        from lumen.logic.auto_light import AutoLightPolicy

        return SimulatedTrackingEngine(
            frame_hz=settings.engine_frame_hz,
            policy=AutoLightPolicy(
                low_threshold=settings.auto_light_low_threshold,
                high_threshold=settings.auto_light_high_threshold,
                confirm_frames=settings.auto_light_confirm_frames,
            ),
        )

    module_name, _, attr = factory_path.partition(":")
    if not attr:
        raise ValueError(f"engine_factory must look like 'module:callable', got {factory_path!r}")

    factory = getattr(importlib.import_module(module_name), attr)
    engine = factory(settings)
    if not isinstance(engine, TrackingEngine):
        raise TypeError(f"{factory_path} returned {type(engine).__name__}, expected TrackingEngine")
    return engine
