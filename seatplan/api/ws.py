"""
WebSocket rooms for organizer screens.

Each event has one room keyed by its public code. Guest, RSVP and seating
changes are pushed to every screen in the room so lists and seating charts
stay current without polling.
"""

import logging
from typing import Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from seatplan.core.db import get_db
from seatplan.services.repositories import get_store

logger = logging.getLogger(__name__)

# Close code sent when the event does not exist or was deleted
EVENT_GONE = 4004

class WebSocketManager:
    """Tracks open organizer connections per event room"""

    def __init__(self):
        self.rooms: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, event_code: str):
        await websocket.accept()
        self.rooms.setdefault(event_code, []).append(websocket)
        logger.info(f"Screen joined room {event_code} ({self.get_connection_count(event_code)} open)")

    def disconnect(self, websocket: WebSocket, event_code: str):
        room = self.rooms.get(event_code)
        if not room or websocket not in room:
            return

        room.remove(websocket)
        logger.info(f"Screen left room {event_code} ({len(room)} open)")
        if not room:
            del self.rooms[event_code]

    async def send_to(self, websocket: WebSocket, message: dict) -> bool:
        """Send one message; False when the socket is already gone"""
        try:
            await websocket.send_json(jsonable_encoder(message))
            return True
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.error(f"Could not deliver {message.get('type')} message: {e}")
            return False

    async def broadcast_to_event(self, event_code: str, message: dict) -> int:
        """Push a message to every screen in the room; returns how many received it"""
        room = list(self.rooms.get(event_code, []))
        if not room:
            logger.warning(f"No screens open for event {event_code}, dropped {message.get('type')}")
            return 0

        delivered = 0
        for websocket in room:
            if await self.send_to(websocket, message):
                delivered += 1
            else:
                self.disconnect(websocket, event_code)
        return delivered

    async def close_room(self, event_code: str, reason: str = "Event deleted"):
        """Close every connection of a room, e.g. after its event is deleted"""
        for websocket in list(self.rooms.pop(event_code, [])):
            try:
                await websocket.close(code=EVENT_GONE, reason=reason)
            except RuntimeError:
                # Already closed by the client
                pass
        logger.info(f"Closed room {event_code}: {reason}")

    def get_connection_count(self, event_code: str) -> int:
        return len(self.rooms.get(event_code, []))

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

router = APIRouter()

@router.websocket("/events/{event_code}")
async def websocket_endpoint(
    websocket: WebSocket,
    event_code: str,
    db: Session = Depends(get_db)
):
    """Live guest and seating updates for one event"""
    event = get_store(db).get_event_by_code(event_code)
    if not event:
        await websocket.close(code=EVENT_GONE, reason="Event not found")
        return

    await websocket_manager.connect(websocket, event_code)

    try:
        await websocket_manager.send_to(websocket, {
            "type": "connection",
            "message": f"Connected to event: {event.name}",
            "event_code": event_code,
            "connection_count": websocket_manager.get_connection_count(event_code)
        })

        # Only heartbeats are expected from screens
        while True:
            try:
                client_message = await websocket.receive_json()
            except ValueError:
                logger.warning(f"Ignored non-JSON frame in room {event_code}")
                continue

            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                await websocket_manager.send_to(websocket, {
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                })

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, event_code)
