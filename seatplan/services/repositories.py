"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Both stores exchange plain domain objects. Table occupants are stored as
``(guest_id, companion_index)`` pairs only; names and confirmation states
are resolved against the guest list every time tables are loaded.
"""

from __future__ import annotations

import json
import logging
import secrets
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seatplan.core.config import settings
from seatplan.domain import (
    CATEGORIES,
    STATUS_PENDING,
    STATUSES,
    Event,
    Guest,
    SeatUnit,
    Table,
    empty_names,
    normalize_counts,
    normalize_names,
)
from seatplan.models import Event as EventRow
from seatplan.models import Guest as GuestRow
from seatplan.models import Table as TableRow
from seatplan.services.firebase_client import get_firestore_client
from seatplan.services.seating_service import SeatingService, pool_sort_key

logger = logging.getLogger(__name__)


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


def get_store(db: Optional[Session]):
    """Store for the configured backend"""
    if use_firestore():
        return FirestoreStore()
    return SqlStore(db)


def new_public_code() -> str:
    return secrets.token_urlsafe(8)


# -------- Record conversion --------

def decode_companion_names(value: Any, allotted: Optional[Dict[str, Any]] = None) -> Dict[str, List[str]]:
    """Read stored companion names, including the older flat-list layout.

    A one-element list holding a JSON object is the per-category mapping.
    Any other list is a flat run of companion names, spread over adults
    (allotted minus the primary guest), teens, kids and infants in turn;
    leftovers go to adults.
    """
    if not value:
        return empty_names()
    if isinstance(value, dict):
        return normalize_names(value)
    if isinstance(value, str):
        value = [value]

    values = list(value)
    if len(values) == 1 and isinstance(values[0], str):
        try:
            parsed = json.loads(values[0])
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            return normalize_names(parsed)

    counts = normalize_counts(allotted)
    slots = {category: counts[category] for category in CATEGORIES}
    slots["adults"] = max(0, counts["adults"] - 1)

    result = empty_names()
    position = 0
    for category in CATEGORIES:
        for _ in range(slots[category]):
            if position >= len(values):
                break
            result[category].append(values[position])
            position += 1
    result["adults"].extend(values[position:])
    return normalize_names(result)


def _guest_from_record(guest_id: Any, data: Dict[str, Any]) -> Guest:
    status = data.get("status") if data.get("status") in STATUSES else STATUS_PENDING
    allotted = data.get("allotted") or {}
    return Guest.build(
        guest_id,
        data.get("name") or "",
        allotted=allotted,
        confirmed=data.get("confirmed") or {},
        companion_names=decode_companion_names(data.get("companion_names"), allotted),
        status=status,
        sent=bool(data.get("sent")),
    )


def _guest_record(guest: Guest) -> Dict[str, Any]:
    return {
        "name": guest.name,
        "status": guest.status,
        "allotted": dict(guest.allotted),
        "confirmed": dict(guest.confirmed),
        "companion_names": {category: list(names) for category, names in guest.companion_names.items()},
        "sent": guest.sent,
    }


def _assignments(table: Table) -> List[Dict[str, Any]]:
    return [
        {"guest_id": occupant.guest_id, "companion_index": occupant.companion_index}
        for occupant in table.occupants
    ]


def _occupants(assignments: Optional[Sequence[Dict[str, Any]]]) -> List[SeatUnit]:
    occupants = []
    for item in assignments or []:
        companion_index = item.get("companion_index")
        occupants.append(SeatUnit(
            guest_id=item.get("guest_id"),
            companion_index=-1 if companion_index is None else int(companion_index),
            name="",
            status=STATUS_PENDING,
        ))
    return occupants


def _int_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# -------- SQLAlchemy store --------

class SqlStore:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # Events

    @staticmethod
    def _event(row: EventRow) -> Event:
        return Event(
            id=row.id,
            name=row.name,
            date=row.date,
            organizer_email=row.organizer_email,
            public_code=row.public_code,
            created_at=row.created_at,
        )

    def create_event(self, name: str, date: datetime, organizer_email: str) -> Event:
        public_code = new_public_code()
        while self.db.query(EventRow).filter(EventRow.public_code == public_code).first():
            public_code = new_public_code()

        row = EventRow(name=name, date=date, organizer_email=organizer_email, public_code=public_code)
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return self._event(row)

    def get_event(self, event_id: Any) -> Optional[Event]:
        row = self.db.query(EventRow).filter(EventRow.id == _int_id(event_id)).first()
        return self._event(row) if row else None

    def get_event_by_code(self, public_code: str) -> Optional[Event]:
        row = self.db.query(EventRow).filter(EventRow.public_code == public_code).first()
        return self._event(row) if row else None

    def delete_event(self, event_id: Any) -> bool:
        row = self.db.query(EventRow).filter(EventRow.id == _int_id(event_id)).first()
        if not row:
            return False
        self.db.delete(row)
        self._commit()
        return True

    # Guests

    def _guest_row(self, event_id: Any, guest_id: Any) -> Optional[GuestRow]:
        return self.db.query(GuestRow).filter(
            GuestRow.event_id == _int_id(event_id),
            GuestRow.id == _int_id(guest_id)
        ).first()

    @staticmethod
    def _guest(row: GuestRow) -> Guest:
        return _guest_from_record(row.id, {
            "name": row.name,
            "status": row.status,
            "allotted": row.allotted,
            "confirmed": row.confirmed,
            "companion_names": row.companion_names,
            "sent": row.sent,
        })

    def load_guests(self, event_id: Any) -> List[Guest]:
        rows = self.db.query(GuestRow).filter(
            GuestRow.event_id == _int_id(event_id)
        ).order_by(GuestRow.id).all()
        return [self._guest(row) for row in rows]

    def get_guest(self, event_id: Any, guest_id: Any) -> Optional[Guest]:
        row = self._guest_row(event_id, guest_id)
        return self._guest(row) if row else None

    def save_guest(self, event_id: Any, guest: Guest) -> Optional[Guest]:
        """Insert a new party or overwrite the whole stored record"""
        record = _guest_record(guest)
        if guest.id is None:
            row = GuestRow(event_id=_int_id(event_id))
            self.db.add(row)
        else:
            row = self._guest_row(event_id, guest.id)
            if row is None:
                return None

        row.name = record["name"]
        row.status = record["status"]
        row.allotted = record["allotted"]
        row.confirmed = record["confirmed"]
        row.companion_names = record["companion_names"]
        row.sent = record["sent"]
        row.updated_at = datetime.utcnow()

        self._commit()
        self.db.refresh(row)
        return self._guest(row)

    def delete_guest(self, event_id: Any, guest_id: Any) -> bool:
        """Delete a party and every seat it holds at any table"""
        row = self._guest_row(event_id, guest_id)
        if not row:
            return False

        for table_row in self.db.query(TableRow).filter(TableRow.event_id == _int_id(event_id)).all():
            remaining = [a for a in (table_row.assignments or []) if str(a.get("guest_id")) != str(guest_id)]
            if len(remaining) != len(table_row.assignments or []):
                table_row.assignments = remaining
                logger.info(f"Freed seats of guest {guest_id} at table {table_row.id}")

        self.db.delete(row)
        self._commit()
        logger.info(f"Deleted guest {guest_id} from event {event_id}")
        return True

    # Tables

    @staticmethod
    def _table(row: TableRow) -> Table:
        return Table(
            id=row.id,
            name=row.name,
            capacity=row.capacity,
            order=row.sort_order if row.sort_order is not None else 999,
            occupants=_occupants(row.assignments),
        )

    def _table_row(self, event_id: Any, table_id: Any) -> Optional[TableRow]:
        return self.db.query(TableRow).filter(
            TableRow.event_id == _int_id(event_id),
            TableRow.id == _int_id(table_id)
        ).first()

    def load_tables(self, event_id: Any, guests: Optional[List[Guest]] = None) -> List[Table]:
        if guests is None:
            guests = self.load_guests(event_id)
        rows = self.db.query(TableRow).filter(
            TableRow.event_id == _int_id(event_id)
        ).order_by(TableRow.sort_order, TableRow.id).all()
        return SeatingService.resolve_occupants([self._table(row) for row in rows], guests)

    def load_snapshot(self, event_id: Any) -> Tuple[List[Guest], List[Table]]:
        guests = self.load_guests(event_id)
        return guests, self.load_tables(event_id, guests)

    def get_table(self, event_id: Any, table_id: Any) -> Optional[Table]:
        for table in self.load_tables(event_id):
            if str(table.id) == str(table_id):
                return table
        return None

    def save_table(self, event_id: Any, table: Table) -> Optional[Table]:
        if table.id is None:
            row = TableRow(event_id=_int_id(event_id))
            self.db.add(row)
        else:
            row = self._table_row(event_id, table.id)
            if row is None:
                return None

        row.name = table.name
        row.capacity = table.capacity
        row.sort_order = table.order
        row.assignments = _assignments(table)
        row.updated_at = datetime.utcnow()

        self._commit()
        self.db.refresh(row)
        table.id = row.id
        return table

    def delete_table(self, event_id: Any, table_id: Any) -> bool:
        row = self._table_row(event_id, table_id)
        if not row:
            return False
        self.db.delete(row)
        self._commit()
        return True

    def save_order(self, event_id: Any, ordered_ids: Sequence[Any]) -> None:
        positions = {str(table_id): position for position, table_id in enumerate(ordered_ids)}
        for row in self.db.query(TableRow).filter(TableRow.event_id == _int_id(event_id)).all():
            if str(row.id) in positions:
                row.sort_order = positions[str(row.id)]
        self._commit()


# -------- Firestore store --------
# Shape: events/{public_code} with subcollections guests/{id} and tables/{id}.
# The event id is its public code.

class FirestoreStore:
    def __init__(self, client=None):
        self.fs = client or get_firestore_client()

    def _event_ref(self, event_id: Any):
        return self.fs.collection("events").document(str(event_id))

    def _guests(self, event_id: Any):
        return self._event_ref(event_id).collection("guests")

    def _tables(self, event_id: Any):
        return self._event_ref(event_id).collection("tables")

    # Events

    @staticmethod
    def _event(doc) -> Event:
        data = doc.to_dict()
        return Event(
            id=data.get("public_code") or doc.id,
            name=data.get("name"),
            date=datetime.fromisoformat(data.get("date")),
            organizer_email=data.get("organizer_email"),
            public_code=data.get("public_code") or doc.id,
            created_at=datetime.fromisoformat(data.get("created_at")),
        )

    def create_event(self, name: str, date: datetime, organizer_email: str) -> Event:
        public_code = new_public_code()
        while self._event_ref(public_code).get().exists:
            public_code = new_public_code()

        data = {
            "name": name,
            "date": date.isoformat(),
            "organizer_email": organizer_email,
            "public_code": public_code,
            "created_at": datetime.utcnow().isoformat(),
        }
        self._event_ref(public_code).set(data)
        return self._event(self._event_ref(public_code).get())

    def get_event(self, event_id: Any) -> Optional[Event]:
        doc = self._event_ref(event_id).get()
        return self._event(doc) if doc.exists else None

    def get_event_by_code(self, public_code: str) -> Optional[Event]:
        return self.get_event(public_code)

    def delete_event(self, event_id: Any) -> bool:
        ref = self._event_ref(event_id)
        if not ref.get().exists:
            return False
        for collection in (self._guests(event_id), self._tables(event_id)):
            for doc in collection.stream():
                collection.document(doc.id).delete()
        ref.delete()
        return True

    # Guests

    def load_guests(self, event_id: Any) -> List[Guest]:
        guests = [_guest_from_record(doc.id, doc.to_dict()) for doc in self._guests(event_id).stream()]
        return sorted(guests, key=lambda g: pool_sort_key(SeatUnit(g.id, -1, g.name, g.status)))

    def get_guest(self, event_id: Any, guest_id: Any) -> Optional[Guest]:
        doc = self._guests(event_id).document(str(guest_id)).get()
        return _guest_from_record(doc.id, doc.to_dict()) if doc.exists else None

    def save_guest(self, event_id: Any, guest: Guest) -> Optional[Guest]:
        collection = self._guests(event_id)
        if guest.id is None:
            ref = collection.document()
        else:
            ref = collection.document(str(guest.id))
            if not ref.get().exists:
                return None

        data = _guest_record(guest)
        data["updated_at"] = datetime.utcnow().isoformat()
        ref.set(data)
        return self.get_guest(event_id, ref.id)

    def delete_guest(self, event_id: Any, guest_id: Any) -> bool:
        ref = self._guests(event_id).document(str(guest_id))
        if not ref.get().exists:
            return False

        tables = self._tables(event_id)
        for doc in tables.stream():
            assignments = doc.to_dict().get("assignments") or []
            remaining = [a for a in assignments if str(a.get("guest_id")) != str(guest_id)]
            if len(remaining) != len(assignments):
                tables.document(doc.id).set({"assignments": remaining}, merge=True)

        ref.delete()
        logger.info(f"Deleted guest {guest_id} from event {event_id}")
        return True

    # Tables

    @staticmethod
    def _table(doc) -> Table:
        data = doc.to_dict()
        sort_order = data.get("sort_order")
        return Table(
            id=doc.id,
            name=data.get("name"),
            capacity=int(data.get("capacity") or settings.DEFAULT_TABLE_CAPACITY),
            order=sort_order if sort_order is not None else 999,
            occupants=_occupants(data.get("assignments")),
        )

    def load_tables(self, event_id: Any, guests: Optional[List[Guest]] = None) -> List[Table]:
        if guests is None:
            guests = self.load_guests(event_id)
        tables = sorted(
            (self._table(doc) for doc in self._tables(event_id).stream()),
            key=lambda t: (t.order, str(t.id)),
        )
        return SeatingService.resolve_occupants(tables, guests)

    def load_snapshot(self, event_id: Any) -> Tuple[List[Guest], List[Table]]:
        guests = self.load_guests(event_id)
        return guests, self.load_tables(event_id, guests)

    def get_table(self, event_id: Any, table_id: Any) -> Optional[Table]:
        for table in self.load_tables(event_id):
            if str(table.id) == str(table_id):
                return table
        return None

    def save_table(self, event_id: Any, table: Table) -> Optional[Table]:
        collection = self._tables(event_id)
        if table.id is None:
            ref = collection.document()
        else:
            ref = collection.document(str(table.id))
            if not ref.get().exists:
                return None

        ref.set({
            "name": table.name,
            "capacity": table.capacity,
            "sort_order": table.order,
            "assignments": _assignments(table),
            "updated_at": datetime.utcnow().isoformat(),
        })
        table.id = ref.id
        return table

    def delete_table(self, event_id: Any, table_id: Any) -> bool:
        ref = self._tables(event_id).document(str(table_id))
        if not ref.get().exists:
            return False
        ref.delete()
        return True

    def save_order(self, event_id: Any, ordered_ids: Sequence[Any]) -> None:
        collection = self._tables(event_id)
        for position, table_id in enumerate(ordered_ids):
            collection.document(str(table_id)).set({"sort_order": position}, merge=True)
