"""
Telemetry Snapshot - Point-in-time engine status and its overlay text
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class TelemetrySnapshot:
    """One atomic read of tracking engine status"""
    tracking_state: str = "NONE"
    last_failure_reason: str = "NONE"
    point_count: int = 0
    map_points: int = 0
    bearing_landmarks: int = 0
    metric_landmarks: int = 0
    tracked_features: int = 0
    stable_tracks: int = 0
    avg_track_age: float = 0.0
    depth_hit_rate: float = 0.0  # percent
    fps: float = 0.0
    light_mode: str = "AUTO"
    light_enabled: bool = False
    depth_enabled: bool = False
    depth_supported: bool = False
    depth_mode: str = "OFF"
    depth_width: int = 0
    depth_height: int = 0
    depth_min_m: float = 0.0
    depth_max_m: float = 0.0
    voxels_used: int = 0
    points_fused_per_second: int = 0
    map_enabled: bool = True
    depth_overlay_enabled: bool = False
    planes_enabled: bool = True
    depth_mesh_mode: str = "OFF"
    depth_mesh_wireframe: bool = False
    depth_mesh_width: int = 0
    depth_mesh_height: int = 0
    depth_mesh_valid_ratio: float = 0.0  # 0.0 - 1.0


def _on_off(flag: bool) -> str:
    return "ON" if flag else "OFF"


def format_snapshot(stats: TelemetrySnapshot) -> str:
    """
    Render a snapshot as the multi-line overlay text

    Args:
        stats: Snapshot to format

    Returns:
        Overlay text, one metric group per line
    """
    if stats.light_mode == "AUTO":
        light_state = f"AUTO ({_on_off(stats.light_enabled)})"
    else:
        light_state = stats.light_mode

    if stats.depth_supported:
        depth_state = f"{stats.depth_mode} {_on_off(stats.depth_enabled)}"
        mesh_state = stats.depth_mesh_mode
    else:
        depth_state = mesh_state = "UNSUPPORTED"

    lines = [
        f"Track: {stats.tracking_state}",
        f"Fail: {stats.last_failure_reason}",
        f"Points: {stats.point_count}",
        f"Map: {stats.map_points} (B:{stats.bearing_landmarks} M:{stats.metric_landmarks})",
        f"Tracks: {stats.tracked_features} (Stable: {stats.stable_tracks})",
        f"Avg age: {stats.avg_track_age:.1f}",
        f"Depth hit: {stats.depth_hit_rate:.0f}%",
        f"Depth: {depth_state} ({stats.depth_width}x{stats.depth_height})",
        f"Depth min/max: {stats.depth_min_m:.2f} / {stats.depth_max_m:.2f} m",
        f"Mesh: {mesh_state} ({stats.depth_mesh_width}x{stats.depth_mesh_height}) "
        f"valid={stats.depth_mesh_valid_ratio * 100:.0f}%",
        f"Planes: {_on_off(stats.planes_enabled)} / Wire: {_on_off(stats.depth_mesh_wireframe)}",
        f"Voxels: {stats.voxels_used} (fused/s: {stats.points_fused_per_second})",
        f"FPS: {stats.fps:.1f}",
        f"Light: {light_state}",
        f"Map: {_on_off(stats.map_enabled)} / Overlay: {_on_off(stats.depth_overlay_enabled)}",
    ]
    return "\n".join(lines)
