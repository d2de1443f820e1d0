"""
Feature API Routes - Engine feature toggles, map/mesh reset and orientation
"""
from fastapi import APIRouter, HTTPException

from lumen.api import get_daemon_instance
from lumen.api.schemas import (
    DepthMeshModeRequest,
    FeatureStateResponse,
    FeatureToggleRequest,
    OrientationRequest,
    OrientationResponse,
)
from lumen.api.websocket import broadcast_features

router = APIRouter()


def _get_daemon():
    daemon = get_daemon_instance()
    if not daemon or not daemon.features:
        raise HTTPException(status_code=503, detail="Engine features not available")
    return daemon


async def _changed(daemon) -> dict:
    state = daemon.features.get_state()
    await broadcast_features(state)
    return state


@router.get("", response_model=FeatureStateResponse)
async def get_features():
    return _get_daemon().features.get_state()


@router.post("/map", response_model=FeatureStateResponse)
async def set_map(request: FeatureToggleRequest):
    daemon = _get_daemon()
    daemon.features.set_map_enabled(request.enabled)
    return await _changed(daemon)


@router.post("/planes", response_model=FeatureStateResponse)
async def set_planes(request: FeatureToggleRequest):
    daemon = _get_daemon()
    daemon.features.set_planes_enabled(request.enabled)
    return await _changed(daemon)


@router.post("/wireframe", response_model=FeatureStateResponse)
async def set_wireframe(request: FeatureToggleRequest):
    daemon = _get_daemon()
    daemon.features.set_wireframe_enabled(request.enabled)
    return await _changed(daemon)


@router.post("/depth-mesh", response_model=FeatureStateResponse)
async def set_depth_mesh(request: DepthMeshModeRequest):
    daemon = _get_daemon()
    daemon.features.set_depth_mesh_mode(request.mode)
    return await _changed(daemon)


@router.post("/clear-map")
async def clear_map():
    _get_daemon().features.clear_map()
    return {"message": "Map cleared"}


@router.post("/clear-mesh")
async def clear_mesh():
    _get_daemon().features.clear_mesh()
    return {"message": "Mesh cleared"}


@router.post("/orientation", response_model=OrientationResponse)
async def set_orientation(request: OrientationRequest):
    """Report a display rotation; unknown rotations map to orientation 0"""
    daemon = get_daemon_instance()
    if not daemon or not daemon.orientation:
        raise HTTPException(status_code=503, detail="Orientation synchronizer not available")

    orientation = daemon.orientation.on_orientation_changed(request.rotation)
    return {"rotation": request.rotation, "orientation": orientation}
