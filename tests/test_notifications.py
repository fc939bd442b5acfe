"""
Tests for organizer screen notifications
"""

import asyncio

from seatplan.api.ws import WebSocketManager
from seatplan.domain import Guest
from seatplan.services.notification_service import NotificationService

class RecordingManager(WebSocketManager):
    """Keeps broadcasts instead of sending them"""
    
    def __init__(self):
        super().__init__()
        self.sent = []
    
    async def broadcast_to_event(self, event_code: str, message: dict):
        self.sent.append((event_code, message))

def test_guest_update_message():
    manager = RecordingManager()
    service = NotificationService(manager)
    guest = Guest.build(3, "Ana", allotted={"adults": 2})
    
    asyncio.run(service.broadcast_guest_update("CODE", guest, update_type="rsvp_received"))
    
    code, message = manager.sent[0]
    assert code == "CODE"
    assert message["type"] == "rsvp_received"
    assert message["guest"]["id"] == 3
    assert message["guest"]["allotted"]["adults"] == 2
    assert "timestamp" in message

def test_seating_and_delete_messages():
    manager = RecordingManager()
    service = NotificationService(manager)
    
    asyncio.run(service.broadcast_seating_update("CODE", 7, "seat_assigned"))
    asyncio.run(service.broadcast_guest_deleted("CODE", 3))
    
    assert [m["type"] for _, m in manager.sent] == ["seat_assigned", "guest_deleted"]
    assert manager.sent[0][1]["table_id"] == 7
    assert manager.sent[1][1]["guest_id"] == 3

def test_broadcast_without_listeners_is_a_no_op():
    manager = WebSocketManager()
    asyncio.run(manager.broadcast_to_event("CODE", {"type": "seating_updated"}))
    assert manager.get_connection_count("CODE") == 0
