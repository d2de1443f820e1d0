"""
Unit tests for TelemetryPoller

Uses a 10ms interval and the fake engine; assertions wait on observable
render counts rather than fixed sleeps where possible.
"""
import asyncio

import pytest

from conftest import wait_for
from lumen.telemetry.poller import TelemetryPoller
from lumen.telemetry.sink import RenderSink
from lumen.telemetry.snapshot import format_snapshot

INTERVAL_MS = 10


@pytest.fixture
def poller(fake_engine, sink):
    return TelemetryPoller(fake_engine, sink, fallback_text="Stats unavailable")


class ExplodingSink(RenderSink):
    def __init__(self):
        self.calls = 0

    def render(self, text: str) -> None:
        self.calls += 1
        raise RuntimeError("view detached")


class TestPollerLifecycle:
    """Tests for start/stop semantics"""

    @pytest.mark.asyncio
    async def test_renders_formatted_snapshot(self, poller, fake_engine, sink):
        poller.start(INTERVAL_MS)
        await wait_for(lambda: sink.render_count >= 1)
        await poller.aclose()

        assert sink.history[0] == format_snapshot(fake_engine.snapshot)
        assert sink.history[0].startswith("Track: TRACKING")

    @pytest.mark.asyncio
    async def test_first_fetch_after_one_interval(self, fake_engine, sink):
        poller = TelemetryPoller(fake_engine, sink)
        poller.start(200)
        await asyncio.sleep(0.02)

        assert fake_engine.fetch_count == 0
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, poller, fake_engine):
        first = poller.start(INTERVAL_MS)
        second = poller.start(INTERVAL_MS)

        assert first is second
        assert poller.session.session_id == 1
        await poller.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("interval", [0, -5])
    async def test_invalid_interval(self, poller, interval):
        with pytest.raises(ValueError):
            poller.start(interval)

        assert poller.is_active() is False

    @pytest.mark.asyncio
    async def test_no_render_after_stop(self, poller, sink):
        poller.start(INTERVAL_MS)
        await wait_for(lambda: sink.render_count >= 2)

        poller.stop()
        rendered = sink.render_count
        await asyncio.sleep(0.1)

        assert sink.render_count == rendered
        assert poller.is_active() is False

    @pytest.mark.asyncio
    async def test_stop_during_slow_fetch(self, poller, fake_engine, sink):
        """A fetch still in flight when stop() runs is never rendered."""
        fake_engine.fetch_delay = 0.1
        poller.start(INTERVAL_MS)
        await wait_for(lambda: fake_engine.fetch_count >= 1)

        poller.stop()
        await asyncio.sleep(0.2)

        assert sink.render_count == 0

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, poller):
        poller.stop()
        await poller.aclose()

        assert poller.is_active() is False

    @pytest.mark.asyncio
    async def test_restart_creates_new_session(self, poller, sink):
        poller.start(INTERVAL_MS)
        await wait_for(lambda: sink.render_count >= 1)
        poller.stop()

        poller.start(INTERVAL_MS)
        rendered = sink.render_count
        await wait_for(lambda: sink.render_count > rendered)
        await poller.aclose()

        assert poller.session is None
        assert poller.get_statistics()["session_id"] is None

    @pytest.mark.asyncio
    async def test_restart_session_ids_increase(self, poller):
        poller.start(INTERVAL_MS)
        poller.stop()
        poller.start(INTERVAL_MS)

        assert poller.session.session_id == 2
        await poller.aclose()


class TestPollerFailures:
    """Tests for fetch and render failures"""

    @pytest.mark.asyncio
    async def test_fallback_then_recovery(self, poller, fake_engine, sink):
        fake_engine.fail_fetches = 3

        poller.start(INTERVAL_MS)
        await wait_for(lambda: sink.render_count >= 4)
        await poller.aclose()

        history = list(sink.history)
        assert history[:3] == ["Stats unavailable"] * 3
        assert history[3] == format_snapshot(fake_engine.snapshot)
        assert poller.fetch_failures == 3

    @pytest.mark.asyncio
    async def test_wrong_snapshot_type_uses_fallback(self, poller, fake_engine, sink):
        fake_engine.snapshot = {"tracking_state": "TRACKING"}

        poller.start(INTERVAL_MS)
        await wait_for(lambda: sink.render_count >= 1)
        await poller.aclose()

        assert sink.history[0] == "Stats unavailable"

    @pytest.mark.asyncio
    async def test_render_failure_keeps_polling(self, fake_engine):
        exploding = ExplodingSink()
        poller = TelemetryPoller(fake_engine, exploding)

        poller.start(INTERVAL_MS)
        await wait_for(lambda: exploding.calls >= 3)
        await poller.aclose()

        assert poller.render_failures >= 3
        assert poller.renders == 0

    @pytest.mark.asyncio
    async def test_statistics(self, poller, sink):
        poller.start(INTERVAL_MS)
        await wait_for(lambda: sink.render_count >= 1)

        stats = poller.get_statistics()
        await poller.aclose()

        assert stats["active"] is True
        assert stats["interval_ms"] == INTERVAL_MS
        assert stats["renders"] >= 1
