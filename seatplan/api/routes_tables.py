"""
Admin API routes for tables and seat assignment - requires authentication
"""

import logging
from typing import Literal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from seatplan.api.routes_admin import notifications, require_event
from seatplan.core.db import get_db
from seatplan.core.errors import NotFoundError
from seatplan.domain import Table, seat_key
from seatplan.schemas.table import SeatAssignment, SeatUnitResponse, TableCreate, TableOrder, TableResponse, TableUpdate
from seatplan.services.repositories import get_store
from seatplan.services.seating_service import SeatingService
from seatplan.services.table_service import TableService, table_locks
from seatplan.utils.responses import success_response
from seatplan.utils.security import verify_admin_token

logger = logging.getLogger(__name__)

router = APIRouter()

def table_data(table: Table) -> dict:
    return TableResponse.model_validate(table).model_dump()

def tables_data(tables) -> list:
    return [table_data(t) for t in TableService.ordered(tables)]

def require_table(store, event_id, table_id) -> Table:
    # Checked before taking the table lock so unknown ids never get one
    table = store.get_table(event_id, table_id)
    if table is None:
        raise NotFoundError("Table", table_id)
    return table

@router.get("/events/{event_id}/tables")
async def list_tables(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Tables in display order with resolved occupants"""
    store = get_store(db)
    event = require_event(store, event_id)
    tables = store.load_tables(event.id)
    return success_response(message="Tables retrieved", data={"tables": tables_data(tables)})

@router.post("/events/{event_id}/tables")
async def create_table(
    event_id: str,
    table_in: TableCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Add an empty table after the existing ones"""
    store = get_store(db)
    event = require_event(store, event_id)
    table = TableService.create_table(store.load_tables(event.id), table_in.name, table_in.capacity)
    table = store.save_table(event.id, table)
    
    await notifications.broadcast_seating_update(event.public_code, table.id, "table_created")
    
    return success_response(message="Table created successfully", data=table_data(table), status_code=201)

# Declared ahead of /tables/{table_id} so "order" is not read as a table id
@router.put("/events/{event_id}/tables/order")
async def reorder_tables(
    event_id: str,
    order: TableOrder,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Replace the display order of the event's tables"""
    store = get_store(db)
    event = require_event(store, event_id)
    tables = TableService.reorder(store.load_tables(event.id), order.table_ids)
    store.save_order(event.id, [t.id for t in tables])
    
    await notifications.broadcast_seating_update(event.public_code, update_type="tables_reordered")
    
    return success_response(message="Tables reordered", data={"tables": tables_data(tables)})

@router.put("/events/{event_id}/tables/{table_id}")
async def update_table(
    event_id: str,
    table_id: str,
    table_update: TableUpdate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Rename or resize a table. Shrinking below occupancy is reported, not refused."""
    store = get_store(db)
    event = require_event(store, event_id)
    require_table(store, event.id, table_id)
    
    with table_locks.hold(table_id):
        table = store.get_table(event.id, table_id)
        if table is None:
            raise NotFoundError("Table", table_id)
        warnings = TableService.update_table(table, table_update.name, table_update.capacity)
        store.save_table(event.id, table)
    
    await notifications.broadcast_seating_update(event.public_code, table.id, "table_updated")
    
    data = table_data(table)
    data["warnings"] = warnings
    return success_response(message="Table updated successfully", data=data)

@router.delete("/events/{event_id}/tables/{table_id}")
async def delete_table(
    event_id: str,
    table_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Delete a table; its occupants return to the seating pool"""
    store = get_store(db)
    event = require_event(store, event_id)
    require_table(store, event.id, table_id)
    
    with table_locks.hold(table_id):
        if not store.delete_table(event.id, table_id):
            raise NotFoundError("Table", table_id)
    table_locks.discard(table_id)
    logger.info(f"Deleted table {table_id} from event {event.id}")
    
    await notifications.broadcast_seating_update(event.public_code, table_id, "table_deleted")
    
    return success_response(message="Table deleted successfully", data={"deleted_table_id": table_id})

@router.post("/events/{event_id}/tables/{table_id}/move")
async def move_table(
    event_id: str,
    table_id: str,
    direction: Literal["up", "down"] = Query(...),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Swap a table with its neighbour in the display order"""
    store = get_store(db)
    event = require_event(store, event_id)
    tables = TableService.move(store.load_tables(event.id), table_id, direction)
    store.save_order(event.id, [t.id for t in tables])
    
    await notifications.broadcast_seating_update(event.public_code, table_id, "tables_reordered")
    
    return success_response(message="Table moved", data={"tables": tables_data(tables)})

@router.get("/events/{event_id}/seating/pool")
async def get_seating_pool(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Seat-units still waiting for a table"""
    store = get_store(db)
    event = require_event(store, event_id)
    guests, tables = store.load_snapshot(event.id)
    pool = SeatingService.build_pool(guests, tables)
    
    return success_response(
        message="Seating pool retrieved",
        data={
            "pool": [SeatUnitResponse.model_validate(unit).model_dump() for unit in pool],
            "total": len(pool)
        }
    )

@router.post("/events/{event_id}/tables/{table_id}/seats")
async def assign_seat(
    event_id: str,
    table_id: str,
    assignment: SeatAssignment,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Place one seat-unit at a table"""
    store = get_store(db)
    event = require_event(store, event_id)
    key = seat_key(assignment.guest_id, assignment.companion_index)
    require_table(store, event.id, table_id)
    
    with table_locks.hold(table_id):
        guests, tables = store.load_snapshot(event.id)
        table = TableService.find_table(tables, table_id)
        
        seat = next((unit for unit in SeatingService.build_pool(guests, tables) if unit.key == key), None)
        if seat is None:
            # Only a seat that is already placed goes on to the double-seat check
            seat = SeatingService.find_seat(guests, assignment.guest_id, assignment.companion_index)
            if seat is None or seat.key not in SeatingService.seated_keys(tables):
                raise NotFoundError("Seat", f"{assignment.guest_id}:{assignment.companion_index}")
        
        others = [t for t in tables if t is not table]
        TableService.assign(table, seat, others)
        store.save_table(event.id, table)
    
    await notifications.broadcast_seating_update(event.public_code, table.id, "seat_assigned")
    
    return success_response(message="Seat assigned", data=table_data(table))

@router.delete("/events/{event_id}/tables/{table_id}/seats/{guest_id}/{companion_index}")
async def unassign_seat(
    event_id: str,
    table_id: str,
    guest_id: str,
    companion_index: int,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Return one occupant to the seating pool"""
    store = get_store(db)
    event = require_event(store, event_id)
    require_table(store, event.id, table_id)
    
    with table_locks.hold(table_id):
        table = TableService.find_table(store.load_tables(event.id), table_id)
        TableService.unassign(table, guest_id, companion_index)
        store.save_table(event.id, table)
    
    await notifications.broadcast_seating_update(event.public_code, table.id, "seat_removed")
    
    return success_response(message="Seat removed", data=table_data(table))
