"""
Lumen Illumination Control API
"""
from typing import Optional
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
import uuid

from lumen.config import Settings
from lumen.api.websocket import connection_manager

# Global reference to daemon (set by main.py)
_daemon_instance: Optional[object] = None


def set_daemon_instance(daemon):
    """Set the global daemon instance for API access"""
    global _daemon_instance
    _daemon_instance = daemon


def get_daemon_instance():
    """Get the global daemon instance"""
    return _daemon_instance


def create_app(settings: Settings) -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
# Lumen Illumination Control API

Controls the tracking rig's light and exposes engine telemetry:

- **Light** - AUTO / ON / OFF mode selection; AUTO follows the tracking engine
- **Telemetry** - Overlay toggle and the latest rendered status text
- **Features** - Map, planes, wireframe and depth mesh toggles; map/mesh reset
- **Orientation** - Display rotation updates for the engine
- **WebSocket** - Live overlay text and state changes at `/ws`
        """,
        docs_url="/docs" if settings.api_docs_enabled else None,
        redoc_url="/redoc" if settings.api_docs_enabled else None,
        openapi_tags=[
            {"name": "system", "description": "Health and status endpoints."},
            {"name": "websocket", "description": "Live overlay text and state change events."},
            {"name": "light", "description": "Light mode selection and hardware state."},
            {"name": "telemetry", "description": "Telemetry overlay control."},
            {"name": "features", "description": "Engine feature toggles and display orientation."},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", summary="Health Check", tags=["system"])
    async def health_check():
        """Health check endpoint for monitoring"""
        return {
            "status": "healthy",
            "version": settings.api_version,
            "service": "lumen-daemon",
        }

    @app.get("/status", summary="System Status", tags=["system"])
    async def get_status():
        """Controller, poller, hardware and WebSocket statistics"""
        daemon = get_daemon_instance()

        response = {
            "status": "running",
            "version": settings.api_version,
            "service": "lumen-daemon",
        }

        if daemon and daemon.hardware_manager:
            response["hardware"] = daemon.hardware_manager.get_statistics()

        if daemon and daemon.light_controller:
            response["light"] = daemon.light_controller.get_state()
            response["light_controller"] = daemon.light_controller.get_statistics()

        if daemon and daemon.poller:
            response["telemetry"] = daemon.poller.get_statistics()

        if daemon and daemon.features:
            response["features"] = daemon.features.get_state()

        response["websocket"] = connection_manager.get_statistics()
        return response

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        WebSocket endpoint for live updates

        Send `{"action": "subscribe", "event_types": ["telemetry"]}` to filter
        events, `{"action": "ping"}` for keepalive. Event types: `telemetry`,
        `light_state_changed`, `features_changed`.
        """
        connection_id = str(uuid.uuid4())
        await connection_manager.connect(websocket, connection_id)

        try:
            while True:
                data = await websocket.receive_json()
                action = data.get("action")

                if action in ("subscribe", "unsubscribe"):
                    event_types = data.get("event_types", [])
                    if action == "subscribe":
                        connection_manager.subscribe(connection_id, event_types)
                    else:
                        connection_manager.unsubscribe(connection_id, event_types)
                    await connection_manager.send_personal_message(
                        {
                            "type": "subscription",
                            "status": f"{action}d",
                            "event_types": event_types,
                        },
                        connection_id,
                    )

                elif action == "ping":
                    await connection_manager.send_personal_message({"type": "pong"}, connection_id)

        except WebSocketDisconnect:
            connection_manager.disconnect(connection_id)

    @app.get("/ws/stats", summary="WebSocket Statistics", tags=["websocket"])
    async def websocket_stats():
        return connection_manager.get_statistics()

    # Register API routers
    from lumen.api.routes import features, light, telemetry

    app.include_router(light.router, prefix="/api/light", tags=["light"])
    app.include_router(telemetry.router, prefix="/api/telemetry", tags=["telemetry"])
    app.include_router(features.router, prefix="/api/features", tags=["features"])

    return app
