"""
Telemetry Poller - Fixed-delay snapshot polling for the overlay

Each cycle fetches one snapshot from the engine, formats it and hands the
text to the render sink. The delay is measured from the end of the previous
cycle, so a slow fetch stretches the period instead of piling up cycles.

Fetches run in a worker thread so a slow engine never stalls the control
loop. A failed fetch renders the fallback text for that cycle only.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional
import structlog

from lumen.engine.base import TrackingEngine, fetch_snapshot_result
from lumen.telemetry.sink import RenderSink
from lumen.telemetry.snapshot import format_snapshot

logger = structlog.get_logger(__name__)

DEFAULT_FALLBACK_TEXT = "Stats unavailable"


@dataclass
class PollingSession:
    """One enable/disable period of the telemetry overlay"""
    session_id: int
    interval_ms: int
    active: bool = True


class TelemetryPoller:
    """
    Cancellable polling loop

    At most one session is active at a time. A stopped session never renders
    again, even if its last fetch completes afterwards.
    """

    def __init__(
        self,
        engine: TrackingEngine,
        sink: RenderSink,
        fallback_text: str = DEFAULT_FALLBACK_TEXT,
    ):
        self.engine = engine
        self.sink = sink
        self.fallback_text = fallback_text

        self.session: Optional[PollingSession] = None
        self.task: Optional[asyncio.Task] = None
        self._session_counter = 0

        # Statistics
        self.cycles = 0
        self.renders = 0
        self.fetch_failures = 0
        self.render_failures = 0
        self.discarded_results = 0

    def is_active(self) -> bool:
        return self.session is not None and self.session.active

    def start(self, interval_ms: int) -> asyncio.Task:
        """
        Start polling; a no-op while a session is already active

        Args:
            interval_ms: Delay between the end of one cycle and the next fetch

        Returns:
            The task running the active session
        """
        if self.is_active():
            logger.debug("telemetry_poller_already_active", session_id=self.session.session_id)
            return self.task

        if interval_ms <= 0:
            raise ValueError(f"Invalid interval: {interval_ms} (must be > 0 ms)")

        self._session_counter += 1
        session = PollingSession(session_id=self._session_counter, interval_ms=interval_ms)
        self.session = session
        self.task = asyncio.create_task(self._run(session))

        logger.info("telemetry_polling_started", session_id=session.session_id, interval_ms=interval_ms)
        return self.task

    def stop(self) -> None:
        """Stop the active session; no render happens for it after this returns"""
        session = self.session
        if session is None:
            return

        session.active = False
        self.session = None

        if self.task and not self.task.done():
            self.task.cancel()

        logger.info("telemetry_polling_stopped", session_id=session.session_id)

    async def aclose(self) -> None:
        """Stop and wait for the polling task to unwind"""
        task = self.task
        self.stop()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self, session: PollingSession) -> None:
        interval = session.interval_ms / 1000.0
        try:
            while session.active:
                await asyncio.sleep(interval)
                if not session.active:
                    break
                await self._cycle(session)
        except asyncio.CancelledError:
            logger.debug("telemetry_polling_cancelled", session_id=session.session_id)
            raise

    async def _cycle(self, session: PollingSession) -> None:
        self.cycles += 1
        result = await asyncio.to_thread(fetch_snapshot_result, self.engine)

        if not session.active:
            self.discarded_results += 1
            return

        if result.ok:
            text = format_snapshot(result.value)
        else:
            self.fetch_failures += 1
            logger.warning(
                "telemetry_fetch_failed",
                session_id=session.session_id,
                error_kind=result.error_kind.value,
                error=result.error,
            )
            text = self.fallback_text

        try:
            self.sink.render(text)
            self.renders += 1
        except Exception as e:
            self.render_failures += 1
            logger.error("telemetry_render_failed", session_id=session.session_id, error=str(e))

    def get_statistics(self) -> dict:
        return {
            "active": self.is_active(),
            "session_id": self.session.session_id if self.session else None,
            "interval_ms": self.session.interval_ms if self.session else None,
            "cycles": self.cycles,
            "renders": self.renders,
            "fetch_failures": self.fetch_failures,
            "render_failures": self.render_failures,
            "discarded_results": self.discarded_results,
        }
