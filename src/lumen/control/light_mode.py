"""
Light Mode Controller - AUTO / ON / OFF arbitration

The controller is the only component that switches the light. Every state
change, whether it comes from a user mode request or from an engine AUTO
signal, is placed on one queue and applied by a single control task, so
device commands are strictly ordered and never issued from the engine's
thread.

State machine:
- ON / OFF: switch the light immediately, unless it is already in that state
- AUTO: switch nothing now; the next engine signal decides
- Engine signals are applied only while in AUTO and are otherwise dropped,
  so a late signal can never override an explicit user choice
"""
import asyncio
from dataclasses import asdict, dataclass
from typing import Any, Optional
import structlog

from lumen.engine.base import TrackingEngine, send_engine_command
from lumen.hardware.device import LightDevice
from lumen.hardware.negotiator import LightCapability
from lumen.modes import LightMode

logger = structlog.get_logger(__name__)


@dataclass
class LightHardwareState:
    """Logical mode plus the last command issued to the device"""
    mode: LightMode = LightMode.AUTO
    hardware_enabled: bool = False
    # Set when the last issued command failed
    indeterminate: bool = False


@dataclass
class _ControlRequest:
    kind: str  # "mode", "cycle" or "auto"
    value: Any = None
    done: Optional[asyncio.Future] = None


class LightModeController:
    """
    Single writer of light hardware state

    Call start() from the event loop that owns the controller. set_mode()
    and cycle_mode() are coroutines for that loop; on_auto_signal() may be
    called from any thread.
    """

    def __init__(
        self,
        capability: LightCapability,
        device: LightDevice,
        engine: Optional[TrackingEngine] = None,
    ):
        """
        Initialize the controller

        Args:
            capability: Negotiated light capability
            device: Handle used for every hardware command
            engine: Engine told about mode changes (optional)
        """
        self.capability = capability
        self.device = device
        self.engine = engine
        self.state = LightHardwareState()

        self.task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None

        # Statistics
        self.commands_issued = 0
        self.commands_failed = 0
        self.commands_suppressed = 0
        self.auto_signals_received = 0
        self.auto_signals_ignored = 0
        self.auto_signals_dropped = 0

        logger.info(
            "light_mode_controller_initialized",
            available=capability.available,
            device_id=capability.device_id,
        )

    def is_available(self) -> bool:
        return self.capability.available

    def is_running(self) -> bool:
        return self.task is not None and not self.task.done()

    # Lifecycle

    def start(self) -> asyncio.Task:
        """
        Start the control task on the running event loop

        Returns:
            The asyncio Task draining the control queue
        """
        if self.is_running():
            logger.warning("light_mode_controller_already_running")
            return self.task

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self.task = asyncio.create_task(self._run())
        return self.task

    async def stop(self) -> None:
        """Stop the control task; queued requests are abandoned"""
        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass

        if self._queue is not None:
            while not self._queue.empty():
                request = self._queue.get_nowait()
                self._queue.task_done()
                if request.done and not request.done.done():
                    request.done.cancel()

        logger.info("light_mode_controller_stopped", mode=self.state.mode.value)

    async def _run(self) -> None:
        logger.info("light_mode_controller_started")
        while True:
            request = await self._queue.get()
            try:
                await self._handle(request)
            except Exception as e:
                logger.error(
                    "light_control_request_error",
                    kind=request.kind,
                    error=str(e),
                    exc_info=True,
                )
            finally:
                self._queue.task_done()
                if request.done and not request.done.done():
                    request.done.set_result(self.state.mode)

    # Requests

    async def set_mode(self, mode: LightMode) -> LightMode:
        """
        Select a light mode

        Args:
            mode: AUTO, ON or OFF

        Returns:
            The recorded mode once the request has been applied
        """
        return await self._submit(_ControlRequest("mode", LightMode(mode)))

    async def cycle_mode(self) -> LightMode:
        """Advance AUTO -> ON -> OFF -> AUTO"""
        return await self._submit(_ControlRequest("cycle"))

    async def _submit(self, request: _ControlRequest) -> LightMode:
        if not self.is_running():
            raise RuntimeError("Light mode controller not running")

        request.done = self._loop.create_future()
        self._queue.put_nowait(request)
        return await request.done

    def on_auto_signal(self, enable: bool) -> None:
        """
        Receive an AUTO light decision from the engine

        Safe to call from any thread. The signal is queued onto the control
        loop; it is dropped if the controller is not running.
        """
        loop = self._loop
        if loop is None or not self.is_running():
            self.auto_signals_dropped += 1
            logger.warning("auto_signal_dropped", enable=enable, reason="controller_not_running")
            return

        try:
            loop.call_soon_threadsafe(self._enqueue_auto, bool(enable))
        except RuntimeError:
            # Loop already closed
            self.auto_signals_dropped += 1
            logger.warning("auto_signal_dropped", enable=enable, reason="loop_closed")

    def _enqueue_auto(self, enable: bool) -> None:
        self._queue.put_nowait(_ControlRequest("auto", enable))

    async def drain(self) -> None:
        """Wait until every request queued so far has been applied"""
        # Let pending call_soon_threadsafe callbacks enqueue first
        await asyncio.sleep(0)
        if self._queue is not None and self.is_running():
            await self._queue.join()

    # Control task only

    async def _handle(self, request: _ControlRequest) -> None:
        if request.kind == "auto":
            await self._apply_auto_signal(request.value)
        elif request.kind == "cycle":
            await self._apply_mode(self.state.mode.next())
        else:
            await self._apply_mode(request.value)

    async def _apply_mode(self, mode: LightMode) -> None:
        previous = self.state.mode
        self.state.mode = mode

        if previous != mode:
            logger.info(
                "light_mode_changed",
                previous=previous.value,
                mode=mode.value,
                available=self.is_available(),
            )
            if self.engine is not None:
                send_engine_command(self.engine, "set_light_mode", mode)

        if mode == LightMode.AUTO:
            return

        await self._command(mode == LightMode.ON)

    async def _apply_auto_signal(self, enable: bool) -> None:
        self.auto_signals_received += 1

        if self.state.mode != LightMode.AUTO:
            self.auto_signals_ignored += 1
            logger.debug("auto_signal_ignored", enable=enable, mode=self.state.mode.value)
            return

        await self._command(enable)

    async def _command(self, enabled: bool) -> None:
        if not self.is_available():
            return

        if self.state.hardware_enabled == enabled:
            self.commands_suppressed += 1
            return

        # Recorded before the call, so a failed command is not repeated
        self.state.hardware_enabled = enabled
        self.commands_issued += 1
        result = await self.device.set_enabled(enabled)

        if result.ok:
            self.state.indeterminate = False
            logger.info("light_command_issued", enabled=enabled, mode=self.state.mode.value)
        else:
            self.commands_failed += 1
            self.state.indeterminate = True
            logger.error(
                "light_command_failed",
                enabled=enabled,
                mode=self.state.mode.value,
                error_kind=result.error_kind.value,
                error=result.error,
            )

    # Status

    def get_state(self) -> dict:
        state = asdict(self.state)
        state["mode"] = self.state.mode.value
        state["available"] = self.is_available()
        state["device_id"] = self.capability.device_id
        return state

    def get_statistics(self) -> dict:
        return {
            "running": self.is_running(),
            "commands_issued": self.commands_issued,
            "commands_failed": self.commands_failed,
            "commands_suppressed": self.commands_suppressed,
            "auto_signals_received": self.auto_signals_received,
            "auto_signals_ignored": self.auto_signals_ignored,
            "auto_signals_dropped": self.auto_signals_dropped,
        }
