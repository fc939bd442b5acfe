"""
Real-time notifications to organizer screens
"""

from datetime import datetime
from typing import Any, Dict, Optional

from seatplan.api.ws import WebSocketManager
from seatplan.domain import Guest

class NotificationService:
    """Service for broadcasting guest and seating changes"""
    
    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager
    
    async def _broadcast(self, public_code: str, update_type: str, payload: Optional[Dict[str, Any]] = None):
        message = {
            "type": update_type,
            "timestamp": datetime.utcnow().isoformat(),
        }
        message.update(payload or {})
        await self.websocket_manager.broadcast_to_event(public_code, message)
    
    async def broadcast_guest_update(
        self,
        public_code: str,
        guest: Guest,
        update_type: str = "guest_saved"
    ):
        """Broadcast individual guest update"""
        await self._broadcast(public_code, update_type, {
            "guest": {
                "id": guest.id,
                "name": guest.name,
                "status": guest.status,
                "allotted": guest.allotted,
                "confirmed": guest.confirmed,
            }
        })
    
    async def broadcast_guest_deleted(self, public_code: str, guest_id):
        await self._broadcast(public_code, "guest_deleted", {"guest_id": guest_id})
    
    async def broadcast_seating_update(
        self,
        public_code: str,
        table_id=None,
        update_type: str = "seating_updated"
    ):
        """Broadcast seating data update to connected clients"""
        await self._broadcast(public_code, update_type, {
            "table_id": table_id,
            "message": "Seating arrangement has been updated"
        })
