"""
Lumen Illumination Control Daemon - Main Entry Point
"""
import asyncio
import sys
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from lumen.config import Settings, get_settings
from lumen.api import create_app, set_daemon_instance
from lumen.api.websocket import WebSocketRenderSink
from lumen.control.features import FeatureController
from lumen.control.light_mode import LightModeController
from lumen.control.orientation import DisplayRotation, OrientationSynchronizer
from lumen.engine import TrackingEngine, create_engine
from lumen.hardware import HardwareManager, LightPlatform
from lumen.logging_config import setup_logging
from lumen.telemetry.poller import TelemetryPoller
from lumen.telemetry.sink import RenderSink

logger = structlog.get_logger(__name__)


class LumenDaemon:
    """Wires the light controller, telemetry poller and engine together"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        platform: Optional[LightPlatform] = None,
        engine: Optional[TrackingEngine] = None,
        render_sink: Optional[RenderSink] = None,
    ):
        """
        Args:
            settings: Daemon settings (cached environment settings if None)
            platform: Light platform override (built from settings if None)
            engine: Tracking engine override (built from settings if None)
            render_sink: Overlay sink override (WebSocket broadcast if None)
        """
        self.settings = settings or get_settings()
        self.app: Optional[FastAPI] = None

        self._platform = platform
        self.engine: Optional[TrackingEngine] = engine
        self.render_sink: Optional[RenderSink] = render_sink

        self.hardware_manager: Optional[HardwareManager] = None
        self.light_controller: Optional[LightModeController] = None
        self.poller: Optional[TelemetryPoller] = None
        self.features: Optional[FeatureController] = None
        self.orientation: Optional[OrientationSynchronizer] = None

    async def startup(self) -> None:
        """Initialize all daemon components on the running event loop"""
        settings = self.settings
        logger.info("lumen_daemon_starting", version=settings.api_version)

        # Capability is negotiated once and never refreshed
        self.hardware_manager = HardwareManager(
            platform=self._platform,
            light_mock=settings.light_mock,
            sysfs_root=settings.light_sysfs_root,
        )
        capability = await self.hardware_manager.initialize()

        if self.engine is None:
            self.engine = create_engine(settings)

        self.light_controller = LightModeController(
            capability, self.hardware_manager.device, self.engine
        )
        self.light_controller.start()
        self.engine.set_auto_signal_handler(self.light_controller.on_auto_signal)

        if self.render_sink is None:
            self.render_sink = WebSocketRenderSink()
        self.poller = TelemetryPoller(
            self.engine, self.render_sink, fallback_text=settings.telemetry_fallback_text
        )
        self.features = FeatureController(
            self.engine, self.poller, telemetry_interval_ms=settings.telemetry_interval_ms
        )
        self.orientation = OrientationSynchronizer(self.engine)

        await self.engine.start()
        self.features.apply_defaults(telemetry_enabled=settings.telemetry_enabled)
        self.orientation.on_orientation_changed(DisplayRotation.ROTATION_0)

        self.app = create_app(settings)
        set_daemon_instance(self)

        logger.info(
            "lumen_daemon_ready",
            port=settings.daemon_port,
            light_available=capability.available,
            engine=self.engine.name,
        )

    async def shutdown(self) -> None:
        """Gracefully shutdown all components"""
        logger.info("lumen_daemon_shutting_down")

        if self.poller:
            await self.poller.aclose()

        if self.engine:
            self.engine.set_auto_signal_handler(None)
            try:
                await self.engine.stop()
            except Exception as e:
                logger.error("engine_stop_error", error=str(e))

        if self.light_controller:
            await self.light_controller.stop()

        if self.hardware_manager:
            await self.hardware_manager.shutdown()

        set_daemon_instance(None)
        logger.info("lumen_daemon_stopped")


async def main_async():
    """Async main function"""
    daemon = LumenDaemon()

    try:
        await daemon.startup()

        config = uvicorn.Config(
            daemon.app,
            host="0.0.0.0",
            port=daemon.settings.daemon_port,
            log_level=daemon.settings.log_level.lower(),
            access_log=False,
        )
        server = uvicorn.Server(config)
        await server.serve()

    except Exception as e:
        logger.error("daemon_error", error=str(e), exc_info=True)
        sys.exit(1)
    finally:
        await daemon.shutdown()


def main():
    """Entry point for the daemon"""
    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        json_logs=(settings.log_level != "DEBUG"),
        log_file=settings.log_file,
    )

    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        logger.info("interrupted_by_user")
        sys.exit(0)


if __name__ == "__main__":
    main()
