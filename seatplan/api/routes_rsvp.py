"""
Guest-facing RSVP routes - rate limited, no authentication
"""

import logging
from fastapi import APIRouter, Depends, Request, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from seatplan.api.routes_admin import guest_data, notifications
from seatplan.core.db import get_db
from seatplan.core.errors import NotFoundError
from seatplan.schemas.guest import RSVPRequest
from seatplan.services.guest_service import GuestService
from seatplan.services.qr_service import QRService
from seatplan.services.repositories import get_store
from seatplan.services.rsvp_service import RSVPService
from seatplan.utils.responses import success_response, rate_limit_error
from seatplan.utils.security import rate_limit_check, get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()

def check_rate_limit(request: Request):
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        logger.warning(f"Rate limit exceeded for {client_ip}")
        rate_limit_error()

def require_event_by_code(store, public_code: str):
    event = store.get_event_by_code(public_code)
    if not event:
        raise NotFoundError("Event", public_code)
    return event

@router.get("/{public_code}")
async def lookup_invitation(
    public_code: str,
    request: Request,
    name: str = Query(..., min_length=1),
    db: Session = Depends(get_db)
):
    """Find a guest's invitation by their name"""
    check_rate_limit(request)
    
    store = get_store(db)
    event = require_event_by_code(store, public_code)
    guest = GuestService.find_by_name(store.load_guests(event.id), name)
    if not guest:
        raise NotFoundError("Guest", name)
    
    data = guest_data(guest)
    data["main_category"] = guest.main_category()
    data["event"] = {"name": event.name, "date": event.date}
    
    return success_response(message="Invitation found", data=data)

@router.post("/{public_code}")
async def submit_rsvp(
    public_code: str,
    rsvp: RSVPRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """Record a guest's confirm/decline answer"""
    check_rate_limit(request)
    
    store = get_store(db)
    event = require_event_by_code(store, public_code)
    guest = GuestService.find_by_name(store.load_guests(event.id), rsvp.name)
    if not guest:
        raise NotFoundError("Guest", rsvp.name)
    
    updated = RSVPService.resolve(
        guest,
        attending=rsvp.attending,
        requested_confirmed=rsvp.confirmed.model_dump() if rsvp.confirmed else None,
        requested_names=rsvp.companion_names.model_dump() if rsvp.companion_names else None
    )
    saved = store.save_guest(event.id, updated)
    if saved is None:
        raise NotFoundError("Guest", rsvp.name)
    
    await notifications.broadcast_guest_update(event.public_code, saved, update_type="rsvp_received")
    
    return success_response(
        message="Thank you, your answer has been recorded",
        data=guest_data(saved)
    )

@router.get("/{public_code}/qr.png")
async def get_rsvp_qr(
    public_code: str,
    request: Request,
    guest: str = Query(""),
    db: Session = Depends(get_db)
):
    """QR code image pointing at the RSVP page, optionally prefilled with a name"""
    check_rate_limit(request)
    
    store = get_store(db)
    require_event_by_code(store, public_code)
    
    qr_bytes = QRService.generate_rsvp_qr(public_code, guest)
    
    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=qr_{public_code}.png"}
    )
