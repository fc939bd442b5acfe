"""
Flat attendee rows for reporting
"""

from typing import Dict, Iterable, List

from seatplan.domain import STATUS_CONFIRMED, STATUS_DECLINED, STATUS_PENDING, Guest
from seatplan.services.seating_service import SeatingService

STATUS_PRIORITY = {STATUS_CONFIRMED: 0, STATUS_PENDING: 1, STATUS_DECLINED: 2}

RELATION_PRIMARY = "primary"
RELATION_COMPANION = "companion"

class ExportService:
    """Service for the attendee export consumed by reporting tools"""

    @staticmethod
    def build_rows(guests: Iterable[Guest]) -> List[Dict]:
        """One row per person: the primary guest, then each companion seat.

        Rows are ordered by status (confirmed, pending, declined), then by
        the party's primary name, with the primary row ahead of its
        companions. Consumers rely on this order.
        """
        keyed = []
        for guest in guests:
            group = guest.name
            base = (STATUS_PRIORITY.get(guest.status, len(STATUS_PRIORITY)), group.casefold(), str(guest.id))

            keyed.append((base + (-1,), {
                "guest_id": guest.id,
                "companion_index": -1,
                "name": guest.name,
                "category": guest.main_category(),
                "status": guest.status,
                "group_primary_name": group,
                "relation": RELATION_PRIMARY,
            }))
            for flat_index, display_name, category in SeatingService.companion_seats(guest):
                keyed.append((base + (flat_index,), {
                    "guest_id": guest.id,
                    "companion_index": flat_index,
                    "name": display_name,
                    "category": category,
                    "status": guest.status,
                    "group_primary_name": group,
                    "relation": RELATION_COMPANION,
                }))

        keyed.sort(key=lambda item: item[0])
        return [row for _, row in keyed]
