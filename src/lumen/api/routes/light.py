"""
Light API Routes - Light mode selection and state
"""
from fastapi import APIRouter, HTTPException

from lumen.api import get_daemon_instance
from lumen.api.schemas import LightModeRequest, LightStateResponse
from lumen.api.websocket import broadcast_light_state

router = APIRouter()


def _get_controller():
    daemon = get_daemon_instance()
    if not daemon or not daemon.light_controller or not daemon.light_controller.is_running():
        raise HTTPException(status_code=503, detail="Light controller not available")
    return daemon.light_controller


@router.get("", response_model=LightStateResponse)
async def get_light_state():
    """Current light mode, last hardware command and availability"""
    return _get_controller().get_state()


@router.post("/mode", response_model=LightStateResponse)
async def set_light_mode(request: LightModeRequest):
    """Select AUTO, ON or OFF.

    When no light is available the mode is still recorded, but no hardware
    command is issued.
    """
    controller = _get_controller()
    await controller.set_mode(request.mode)

    state = controller.get_state()
    await broadcast_light_state(state)
    return state


@router.post("/cycle", response_model=LightStateResponse)
async def cycle_light_mode():
    """Advance AUTO -> ON -> OFF -> AUTO"""
    controller = _get_controller()
    await controller.cycle_mode()

    state = controller.get_state()
    await broadcast_light_state(state)
    return state
