"""
WebSocket Connection Manager and Overlay Broadcasting

Manages WebSocket clients and pushes telemetry overlay text and light state
changes to them.
"""
from typing import Dict, Set, List, Any, Optional
from fastapi import WebSocket
import structlog
import asyncio
from datetime import datetime

from lumen.telemetry.sink import RenderSink

logger = structlog.get_logger(__name__)


class EventType:
    """Event type constants"""
    TELEMETRY = "telemetry"
    LIGHT_STATE_CHANGED = "light_state_changed"
    FEATURES_CHANGED = "features_changed"


class ConnectionManager:
    """
    Tracks WebSocket connections and their event subscriptions

    A connection with no subscriptions receives every event.
    """

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.subscriptions: Dict[str, Set[str]] = {}

        # Statistics
        self.total_connections = 0
        self.total_messages_sent = 0
        self.total_broadcasts = 0

    async def connect(self, websocket: WebSocket, connection_id: str) -> None:
        """
        Accept and register a new WebSocket connection

        Args:
            websocket: WebSocket connection
            connection_id: Unique identifier for this connection
        """
        await websocket.accept()
        self.active_connections[connection_id] = websocket
        self.subscriptions[connection_id] = set()
        self.total_connections += 1

        logger.info(
            "websocket_connected",
            connection_id=connection_id,
            active_connections=len(self.active_connections)
        )

        await self.send_personal_message(
            {
                "type": "connection",
                "status": "connected",
                "connection_id": connection_id,
                "timestamp": datetime.now().isoformat()
            },
            connection_id
        )

    def disconnect(self, connection_id: str) -> None:
        """
        Remove a connection

        Args:
            connection_id: Connection to remove
        """
        if connection_id in self.active_connections:
            del self.active_connections[connection_id]
            del self.subscriptions[connection_id]

            logger.info(
                "websocket_disconnected",
                connection_id=connection_id,
                active_connections=len(self.active_connections)
            )

    async def send_personal_message(self, message: Dict[str, Any], connection_id: str) -> bool:
        """
        Send message to a specific connection

        Args:
            message: Message dictionary to send
            connection_id: Target connection

        Returns:
            True if sent successfully, False otherwise
        """
        if connection_id not in self.active_connections:
            return False

        try:
            await self.active_connections[connection_id].send_json(message)
            self.total_messages_sent += 1
            return True
        except Exception as e:
            logger.error("websocket_send_failed", connection_id=connection_id, error=str(e))
            self.disconnect(connection_id)
            return False

    async def broadcast(self, message: Dict[str, Any], event_type: Optional[str] = None) -> int:
        """
        Broadcast message to all subscribed clients

        Args:
            message: Message dictionary to broadcast
            event_type: Optional event type for subscription filtering

        Returns:
            Number of clients message was sent to
        """
        self.total_broadcasts += 1
        sent_count = 0

        if "timestamp" not in message:
            message["timestamp"] = datetime.now().isoformat()

        disconnected = []

        for connection_id, websocket in list(self.active_connections.items()):
            if event_type:
                subscriptions = self.subscriptions.get(connection_id, set())
                if subscriptions and event_type not in subscriptions:
                    continue

            try:
                await websocket.send_json(message)
                sent_count += 1
                self.total_messages_sent += 1
            except Exception as e:
                logger.error("websocket_broadcast_failed", connection_id=connection_id, error=str(e))
                disconnected.append(connection_id)

        for connection_id in disconnected:
            self.disconnect(connection_id)

        return sent_count

    def subscribe(self, connection_id: str, event_types: List[str]) -> bool:
        """
        Subscribe a connection to specific event types

        Args:
            connection_id: Connection to subscribe
            event_types: List of event types to subscribe to

        Returns:
            True if subscription successful
        """
        if connection_id not in self.subscriptions:
            return False
        self.subscriptions[connection_id].update(event_types)
        return True

    def unsubscribe(self, connection_id: str, event_types: List[str]) -> bool:
        """
        Unsubscribe a connection from specific event types

        Args:
            connection_id: Connection to unsubscribe
            event_types: List of event types to unsubscribe from

        Returns:
            True if unsubscription successful
        """
        if connection_id not in self.subscriptions:
            return False
        for event_type in event_types:
            self.subscriptions[connection_id].discard(event_type)
        return True

    def get_statistics(self) -> dict:
        """
        Get WebSocket statistics

        Returns:
            Dictionary with connection and message counts
        """
        return {
            "active_connections": len(self.active_connections),
            "total_connections": self.total_connections,
            "total_messages_sent": self.total_messages_sent,
            "total_broadcasts": self.total_broadcasts,
        }


# Global connection manager instance
connection_manager = ConnectionManager()


class WebSocketRenderSink(RenderSink):
    """
    Render sink that pushes overlay text to WebSocket clients

    render() only records the text and schedules the broadcast, so the
    polling loop never waits on a slow client.
    """

    def __init__(self, manager: ConnectionManager = connection_manager):
        self.manager = manager
        self.latest_text: Optional[str] = None
        self.render_count = 0
        self._pending: Set[asyncio.Task] = set()

    def render(self, text: str) -> None:
        self.latest_text = text
        self.render_count += 1

        if not self.manager.active_connections:
            return

        task = asyncio.get_running_loop().create_task(
            self.manager.broadcast({"type": EventType.TELEMETRY, "text": text}, EventType.TELEMETRY)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


async def broadcast_light_state(state: dict) -> None:
    """
    Broadcast light mode / hardware state change

    Args:
        state: LightModeController.get_state() output
    """
    await connection_manager.broadcast(
        {"type": EventType.LIGHT_STATE_CHANGED, "light": state},
        EventType.LIGHT_STATE_CHANGED,
    )


async def broadcast_features(state: dict) -> None:
    """
    Broadcast feature toggle change

    Args:
        state: FeatureController.get_state() output
    """
    await connection_manager.broadcast(
        {"type": EventType.FEATURES_CHANGED, "features": state},
        EventType.FEATURES_CHANGED,
    )
