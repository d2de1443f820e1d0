"""
Telemetry API Routes - Overlay toggle and latest overlay text
"""
from fastapi import APIRouter, HTTPException

from lumen.api import get_daemon_instance
from lumen.api.schemas import TelemetryResponse, TelemetryToggleRequest
from lumen.api.websocket import broadcast_features

router = APIRouter()


def _telemetry_response(daemon) -> dict:
    return {
        "enabled": daemon.features.state.telemetry_enabled,
        "active": daemon.poller.is_active(),
        "interval_ms": daemon.features.telemetry_interval_ms,
        "text": daemon.render_sink.latest_text,
    }


@router.get("", response_model=TelemetryResponse)
async def get_telemetry():
    """Overlay state and the most recently rendered text"""
    daemon = get_daemon_instance()
    if not daemon or not daemon.features:
        raise HTTPException(status_code=503, detail="Telemetry not available")
    return _telemetry_response(daemon)


@router.post("", response_model=TelemetryResponse)
async def set_telemetry(request: TelemetryToggleRequest):
    """Show or hide the telemetry overlay (starts or stops polling)"""
    daemon = get_daemon_instance()
    if not daemon or not daemon.features:
        raise HTTPException(status_code=503, detail="Telemetry not available")

    daemon.features.set_telemetry_enabled(request.enabled)
    await broadcast_features(daemon.features.get_state())
    return _telemetry_response(daemon)
