"""
API Schemas - Pydantic models for request/response validation
"""
from typing import Optional
from pydantic import BaseModel, Field

from lumen.modes import DepthMeshMode, LightMode


# Light Schemas
class LightModeRequest(BaseModel):
    mode: LightMode = Field(..., description="AUTO, ON or OFF")


class LightStateResponse(BaseModel):
    mode: LightMode
    hardware_enabled: bool
    indeterminate: bool
    available: bool
    device_id: Optional[str] = None


# Telemetry Schemas
class TelemetryToggleRequest(BaseModel):
    enabled: bool


class TelemetryResponse(BaseModel):
    enabled: bool
    active: bool
    interval_ms: int
    text: Optional[str] = None


# Orientation Schemas
class OrientationRequest(BaseModel):
    rotation: int = Field(..., description="Display rotation in degrees (0, 90, 180, 270)")


class OrientationResponse(BaseModel):
    rotation: int
    orientation: int = Field(..., ge=0, le=3)


# Feature Schemas
class FeatureToggleRequest(BaseModel):
    enabled: bool


class DepthMeshModeRequest(BaseModel):
    mode: DepthMeshMode


class FeatureStateResponse(BaseModel):
    map_enabled: bool
    planes_enabled: bool
    wireframe_enabled: bool
    depth_mesh_mode: DepthMeshMode
    telemetry_enabled: bool
