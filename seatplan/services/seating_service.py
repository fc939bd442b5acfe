"""
Seating pool: the seat-units still waiting for a table
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from seatplan.domain import (
    CATEGORIES,
    CATEGORY_LABELS,
    PRIMARY_INDEX,
    STATUS_CONFIRMED,
    STATUS_PENDING,
    Guest,
    GuestId,
    SeatUnit,
    Table,
    same_name,
)

logger = logging.getLogger(__name__)


def _guest_sort_key(guest_id: GuestId) -> Tuple[int, int, str]:
    text = str(guest_id)
    if text.lstrip("-").isdigit():
        return 0, int(text), text
    return 1, 0, text


def pool_sort_key(unit: SeatUnit) -> Tuple:
    return _guest_sort_key(unit.guest_id), unit.companion_index


class SeatingService:
    """Service for flattening parties into assignable seat-units"""

    @staticmethod
    def seat_status(guest: Guest) -> str:
        return STATUS_CONFIRMED if guest.is_confirmed else STATUS_PENDING

    @staticmethod
    def companion_seats(guest: Guest) -> List[Tuple[int, str, str]]:
        """List ``(flat_index, display_name, category)`` for every companion seat.

        The flat index runs across categories in priority order and is
        never reset, so a seat keeps its identity when another category's
        count changes. Unnamed seats get ``"<Category> <n> - <guest>"``.
        """
        counts = guest.count_source()
        main = guest.main_category()
        seats = []
        flat_index = 0

        for category in CATEGORIES:
            count = counts[category]
            effective_count = max(0, count - 1) if category == main else count
            names = [n for n in guest.companion_names.get(category, []) if not same_name(n, guest.name)]

            for i in range(effective_count):
                supplied = names[i] if i < len(names) else ""
                display_name = supplied or f"{CATEGORY_LABELS[category]} {i + 1} - {guest.name}"
                seats.append((flat_index, display_name, category))
                flat_index += 1

        return seats

    @staticmethod
    def seated_keys(tables: Iterable[Table]) -> Set[Tuple[str, int]]:
        """Every ``(guest_id, companion_index)`` currently placed at a table"""
        return {occupant.key for table in tables for occupant in table.occupants}

    @staticmethod
    def build_pool(guests: Iterable[Guest], tables: Iterable[Table]) -> List[SeatUnit]:
        """Build the list of seat-units not yet placed at any table.

        Declined parties contribute nothing. Every other party contributes
        its primary guest (companion index -1) and one unit per companion
        seat of its confirmed (or, while pending, allotted) counts.
        """
        seated = SeatingService.seated_keys(tables)
        offered: Set[Tuple[str, int]] = set()
        pool: List[SeatUnit] = []

        def offer(unit: SeatUnit) -> None:
            if unit.key in seated or unit.key in offered:
                return
            offered.add(unit.key)
            pool.append(unit)

        for guest in guests:
            if guest.is_declined:
                continue
            status = SeatingService.seat_status(guest)
            offer(SeatUnit(guest.id, PRIMARY_INDEX, guest.name, status))
            for flat_index, display_name, _ in SeatingService.companion_seats(guest):
                offer(SeatUnit(guest.id, flat_index, display_name, status))

        pool.sort(key=pool_sort_key)
        return pool

    @staticmethod
    def find_seat(guests: Iterable[Guest], guest_id: GuestId, companion_index: int) -> Optional[SeatUnit]:
        """Resolve one seat-unit against the current guest list, seated or not"""
        for guest in guests:
            if str(guest.id) != str(guest_id):
                continue
            status = SeatingService.seat_status(guest)
            if companion_index == PRIMARY_INDEX:
                return SeatUnit(guest.id, PRIMARY_INDEX, guest.name, status)
            for flat_index, display_name, _ in SeatingService.companion_seats(guest):
                if flat_index == companion_index:
                    return SeatUnit(guest.id, flat_index, display_name, status)
            return None
        return None

    @staticmethod
    def resolve_occupants(tables: Iterable[Table], guests: Iterable[Guest]) -> List[Table]:
        """Refresh occupant names and states from the current guest list.

        Occupants whose party no longer exists are dropped. An index past
        the party's current companion count keeps its seat under a
        ``"Companion <n> - <guest>"`` placeholder.
        """
        by_id: Dict[str, Guest] = {str(guest.id): guest for guest in guests}
        resolved = []

        for table in tables:
            occupants = []
            for occupant in table.occupants:
                guest = by_id.get(str(occupant.guest_id))
                if guest is None:
                    logger.debug(f"Dropped occupant of deleted guest {occupant.guest_id} from table {table.id}")
                    continue
                unit = SeatingService.find_seat([guest], guest.id, occupant.companion_index)
                if unit is None:
                    unit = SeatUnit(
                        guest.id,
                        occupant.companion_index,
                        f"Companion {occupant.companion_index + 1} - {guest.name}",
                        SeatingService.seat_status(guest),
                    )
                occupants.append(unit)
            table.occupants = occupants
            resolved.append(table)

        return resolved
