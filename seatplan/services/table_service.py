"""
Table management: creation, resizing, ordering and seat assignment
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from seatplan.core.config import settings
from seatplan.core.errors import (
    CapacityExceededError,
    InvalidOrderError,
    NotFoundError,
    SeatAlreadyAssignedError,
)
from seatplan.domain import GuestId, SeatUnit, Table

logger = logging.getLogger(__name__)


class TableLocks:
    """One lock per table id.

    Seat assignment reads the occupant count and then appends, so callers
    hold the table's lock across the read-modify-write.
    """

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def get(self, table_id) -> threading.Lock:
        key = str(table_id)
        with self._registry_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    @contextmanager
    def hold(self, table_id) -> Iterator[None]:
        with self.get(table_id):
            yield

    def discard(self, table_id) -> None:
        with self._registry_lock:
            self._locks.pop(str(table_id), None)


table_locks = TableLocks()


class TableService:
    """Service for table state changes. All methods work on in-memory tables."""

    @staticmethod
    def find_table(tables: Iterable[Table], table_id) -> Table:
        for table in tables:
            if str(table.id) == str(table_id):
                return table
        raise NotFoundError("Table", table_id)

    @staticmethod
    def ordered(tables: Iterable[Table]) -> List[Table]:
        return sorted(tables, key=lambda t: (t.order, str(t.id)))

    @staticmethod
    def create_table(
        tables: Iterable[Table],
        name: str,
        capacity: Optional[int] = None,
        table_id=None,
    ) -> Table:
        """New empty table placed after every existing table"""
        if capacity is None:
            capacity = settings.DEFAULT_TABLE_CAPACITY
        if capacity < 1:
            raise ValueError("Table capacity must be positive")
        orders = [t.order for t in tables]
        next_order = max(orders) + 1 if orders else 0
        logger.info(f"Created table '{name}' (capacity {capacity}) at position {next_order}")
        return Table(id=table_id, name=name.strip(), capacity=capacity, order=next_order)

    @staticmethod
    def update_table(table: Table, name: Optional[str] = None, capacity: Optional[int] = None) -> List[str]:
        """Rename and/or resize; returns warnings for the caller to show"""
        if name:
            table.name = name.strip()
        if capacity is None:
            return []
        return TableService.resize(table, capacity)

    @staticmethod
    def resize(table: Table, capacity: int) -> List[str]:
        """Change capacity without evicting anyone.

        A table shrunk below its occupancy stays over capacity until
        occupants are removed; the condition is reported, not corrected.
        """
        if capacity < 1:
            raise ValueError("Table capacity must be positive")
        table.capacity = capacity
        if table.over_capacity:
            message = (
                f"Table '{table.name}' has {len(table.occupants)} occupants "
                f"but capacity {capacity}"
            )
            logger.warning(message)
            return [message]
        return []

    @staticmethod
    def assign(table: Table, seat: SeatUnit, tables: Iterable[Table] = ()) -> Table:
        """Seat one unit at ``table``.

        ``tables`` is the rest of the event's snapshot; a unit already
        seated anywhere in it is rejected.
        """
        for other in list(tables) + [table]:
            if other.find_occupant(seat.guest_id, seat.companion_index) is not None:
                logger.warning(f"Rejected double seating of {seat.key} (already at table {other.id})")
                raise SeatAlreadyAssignedError(seat.guest_id, seat.companion_index, other.id)

        if len(table.occupants) >= table.capacity:
            logger.warning(f"Rejected seat {seat.key}: table {table.id} is full")
            raise CapacityExceededError(table.id, table.capacity)

        table.occupants.append(seat)
        logger.info(f"Seated {seat.name} ({seat.key}) at table '{table.name}'")
        return table

    @staticmethod
    def unassign(table: Table, guest_id: GuestId, companion_index: int) -> SeatUnit:
        """Remove an occupant by identity, never by display name"""
        occupant = table.find_occupant(guest_id, companion_index)
        if occupant is None:
            raise NotFoundError("Seat", f"{guest_id}:{companion_index}")
        table.occupants = [o for o in table.occupants if o.key != occupant.key]
        logger.info(f"Removed {occupant.name} ({occupant.key}) from table '{table.name}'")
        return occupant

    @staticmethod
    def reorder(tables: Iterable[Table], ordered_ids: Sequence) -> List[Table]:
        """Replace the display order of all tables.

        Unknown ids are rejected; tables the list leaves out keep their
        relative order after the listed ones.
        """
        tables = TableService.ordered(tables)
        wanted = [str(table_id) for table_id in ordered_ids]
        if len(set(wanted)) != len(wanted):
            raise InvalidOrderError("Table order contains duplicate ids")

        by_id = {str(table.id): table for table in tables}
        for table_id in wanted:
            if table_id not in by_id:
                raise NotFoundError("Table", table_id)

        result = [by_id[table_id] for table_id in wanted]
        result += [table for table in tables if str(table.id) not in wanted]
        for position, table in enumerate(result):
            table.order = position
        logger.info(f"Reordered {len(result)} tables")
        return result

    @staticmethod
    def move(tables: Iterable[Table], table_id, direction: str) -> List[Table]:
        """Swap a table with its neighbour; ``direction`` is ``up`` or ``down``"""
        tables = TableService.ordered(tables)
        ids = [str(table.id) for table in tables]
        if str(table_id) not in ids:
            raise NotFoundError("Table", table_id)
        if direction not in ("up", "down"):
            raise ValueError(f"Unknown direction: {direction!r}")

        index = ids.index(str(table_id))
        other = index - 1 if direction == "up" else index + 1
        if 0 <= other < len(ids):
            ids[index], ids[other] = ids[other], ids[index]
        return TableService.reorder(tables, ids)

    @staticmethod
    def remove_guest(tables: Iterable[Table], guest_id: GuestId) -> List[Table]:
        """Drop every seat of a deleted party; returns the tables that changed"""
        changed = []
        for table in tables:
            remaining = [o for o in table.occupants if str(o.guest_id) != str(guest_id)]
            if len(remaining) != len(table.occupants):
                table.occupants = remaining
                changed.append(table)
        if changed:
            logger.info(f"Removed guest {guest_id} from {len(changed)} table(s)")
        return changed
