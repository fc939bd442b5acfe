"""
Admin API routes for events and guests - requires authentication
"""

import logging
from typing import Literal, Optional
from fastapi import APIRouter, Depends, UploadFile, File, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from seatplan.api.ws import websocket_manager
from seatplan.core.config import settings
from seatplan.core.db import get_db
from seatplan.core.errors import NotFoundError
from seatplan.domain import Event, Guest
from seatplan.schemas.event import EventCreate, EventResponse
from seatplan.schemas.guest import GuestCreate, GuestResponse, GuestStatus, GuestUpdate
from seatplan.services.excel_service import ExcelService
from seatplan.services.export_service import ExportService
from seatplan.services.guest_service import GuestService
from seatplan.services.notification_service import NotificationService
from seatplan.services.repositories import get_store
from seatplan.services.stats_service import StatsService
from seatplan.utils.responses import success_response, error_response
from seatplan.utils.security import verify_admin_token

logger = logging.getLogger(__name__)

router = APIRouter()

# Initialize notification service
notifications = NotificationService(websocket_manager)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

Category = Literal["adults", "teens", "kids", "infants"]

def event_data(event: Event) -> dict:
    return EventResponse.model_validate(event).model_dump(mode="json")

def guest_data(guest: Guest) -> dict:
    return GuestResponse.model_validate(guest).model_dump(mode="json")

def require_event(store, event_id) -> Event:
    event = store.get_event(event_id)
    if not event:
        raise NotFoundError("Event", event_id)
    return event

def require_guest(store, event: Event, guest_id) -> Guest:
    guest = store.get_guest(event.id, guest_id)
    if not guest:
        raise NotFoundError("Guest", guest_id)
    return guest

# -------- Events --------

@router.post("/events")
async def create_event(
    event_in: EventCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create a new event"""
    store = get_store(db)
    event = store.create_event(event_in.name, event_in.date, event_in.organizer_email)
    logger.info(f"Created event '{event.name}' ({event.public_code})")
    
    return success_response(
        message="Event created successfully",
        data=event_data(event),
        status_code=201
    )

@router.get("/events/{event_id}")
async def get_event_details(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Get event information with attendance totals"""
    store = get_store(db)
    event = require_event(store, event_id)
    guests, tables = store.load_snapshot(event.id)
    
    data = event_data(event)
    data.update({
        "total_parties": len(guests),
        "total_tables": len(tables),
        "seated": sum(len(t.occupants) for t in tables),
        "stats": StatsService.aggregate(guests).to_dict()
    })
    return success_response(message="Event details retrieved", data=data)

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Delete an event with its guests and tables"""
    store = get_store(db)
    event = require_event(store, event_id)
    store.delete_event(event.id)
    logger.info(f"Deleted event {event.id}")
    await websocket_manager.close_room(event.public_code)
    
    return success_response(
        message="Event deleted successfully",
        data={"deleted_event_id": event.id}
    )

# -------- Guests --------

@router.get("/events/{event_id}/guests")
async def list_guests(
    event_id: str,
    status: Optional[GuestStatus] = Query(None),
    category: Optional[Category] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """List guests, optionally filtered by status, category and name"""
    store = get_store(db)
    event = require_event(store, event_id)
    guests = GuestService.filter_guests(
        store.load_guests(event.id),
        status=status,
        category=category,
        search=search
    )
    
    return success_response(
        message="Guests retrieved successfully",
        data={"guests": [guest_data(g) for g in guests], "total": len(guests)}
    )

@router.post("/events/{event_id}/guests")
async def create_guest(
    event_id: str,
    guest_in: GuestCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Invite a new party"""
    store = get_store(db)
    event = require_event(store, event_id)
    
    guest = GuestService.create_guest(
        name=guest_in.name,
        allotted=guest_in.allotted.model_dump(),
        companion_names=guest_in.companion_names.model_dump() if guest_in.companion_names else None,
        sent=guest_in.sent
    )
    guest = store.save_guest(event.id, guest)
    
    await notifications.broadcast_guest_update(event.public_code, guest)
    
    return success_response(
        message="Guest created successfully",
        data=guest_data(guest),
        status_code=201
    )

@router.get("/events/{event_id}/guests/{guest_id}")
async def get_guest(
    event_id: str,
    guest_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Get one guest record"""
    store = get_store(db)
    event = require_event(store, event_id)
    guest = require_guest(store, event, guest_id)
    return success_response(message="Guest retrieved", data=guest_data(guest))

@router.put("/events/{event_id}/guests/{guest_id}")
async def update_guest(
    event_id: str,
    guest_id: str,
    guest_update: GuestUpdate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Apply an organizer edit to a guest"""
    store = get_store(db)
    event = require_event(store, event_id)
    guest = require_guest(store, event, guest_id)
    
    updated = GuestService.edit_guest(
        guest,
        name=guest_update.name,
        allotted=guest_update.allotted.model_dump() if guest_update.allotted else None,
        status=guest_update.status,
        companion_names=guest_update.companion_names.model_dump() if guest_update.companion_names else None,
        sent=guest_update.sent
    )
    saved = store.save_guest(event.id, updated)
    if saved is None:
        raise NotFoundError("Guest", guest_id)
    
    await notifications.broadcast_guest_update(event.public_code, saved)
    
    return success_response(message="Guest updated successfully", data=guest_data(saved))

@router.delete("/events/{event_id}/guests/{guest_id}")
async def delete_guest(
    event_id: str,
    guest_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Delete a guest and free every seat the party held"""
    store = get_store(db)
    event = require_event(store, event_id)
    if not store.delete_guest(event.id, guest_id):
        raise NotFoundError("Guest", guest_id)
    
    await notifications.broadcast_guest_deleted(event.public_code, guest_id)
    await notifications.broadcast_seating_update(event.public_code)
    
    return success_response(
        message="Guest deleted successfully",
        data={"deleted_guest_id": guest_id}
    )

# -------- Reporting --------

@router.get("/events/{event_id}/stats")
async def get_stats(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Attendance totals per category"""
    store = get_store(db)
    event = require_event(store, event_id)
    stats = StatsService.aggregate(store.load_guests(event.id))
    return success_response(message="Stats retrieved", data=stats.to_dict())

@router.get("/events/{event_id}/export")
async def export_rows(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Attendee rows in export order"""
    store = get_store(db)
    event = require_event(store, event_id)
    rows = ExportService.build_rows(store.load_guests(event.id))
    return success_response(message="Export generated", data={"rows": rows})

@router.get("/events/{event_id}/export.xlsx")
async def export_excel(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Attendee rows as an Excel file, with table placements"""
    store = get_store(db)
    event = require_event(store, event_id)
    guests, tables = store.load_snapshot(event.id)
    excel_content = ExcelService.export_rows(ExportService.build_rows(guests), tables)
    
    return Response(
        content=excel_content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=attendees_{event.public_code}.xlsx"}
    )

@router.post("/events/{event_id}/guests/import")
async def import_guests(
    event_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Import parties and allotments from an Excel guest list"""
    store = get_store(db)
    event = require_event(store, event_id)
    
    # Validate file type
    if not file.filename.endswith(('.xlsx', '.xls')):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )
    
    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(message="File too large", status_code=413)
    
    success, errors, rows = ExcelService.parse_guest_import(file_content)
    if success:
        errors = ExcelService.existing_name_errors(rows, [g.name for g in store.load_guests(event.id)])
    if not success or errors:
        return error_response(
            message="Excel file validation failed",
            details=errors,
            status_code=422
        )
    
    for row in rows:
        store.save_guest(event.id, GuestService.create_guest(row["name"], row["allotted"]))
    logger.info(f"Imported {len(rows)} guests into event {event.id}")
    
    await notifications.broadcast_seating_update(event.public_code, update_type="guests_imported")
    
    return success_response(
        message=f"Excel file processed successfully. {len(rows)} guests imported.",
        data={"processed_count": len(rows), "filename": file.filename}
    )

@router.get("/guests/template.xlsx")
async def download_template(token: str = Depends(verify_admin_token)):
    """Download the Excel guest list template"""
    return Response(
        content=ExcelService.create_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=guest_list_template.xlsx"}
    )
