"""
Organizer-side guest management: creation, edits, lookup and filtering
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from seatplan.domain import (
    CATEGORIES,
    STATUS_CONFIRMED,
    STATUS_DECLINED,
    STATUSES,
    Guest,
    GuestId,
    clamp_counts,
    clean_name,
    empty_counts,
    normalize_counts,
    same_name,
    total,
)
from seatplan.services.companions import CompanionSlotReconciler
from seatplan.services.rsvp_service import RSVPService

logger = logging.getLogger(__name__)

class GuestService:
    """Service for organizer edits to guest records"""

    @staticmethod
    def create_guest(
        name: str,
        allotted: Mapping[str, Any],
        companion_names: Optional[Mapping[str, Sequence[str]]] = None,
        sent: bool = False,
        guest_id: Optional[GuestId] = None,
    ) -> Guest:
        """Create a pending party with name slots sized to its allotment"""
        guest = Guest.build(guest_id, name, allotted=allotted, companion_names=companion_names, sent=sent)
        reconciler = CompanionSlotReconciler(guest.name, guest.companion_names, counts=guest.allotted)
        guest.companion_names = reconciler.apply_counts(guest.allotted)
        logger.info(f"Created guest '{guest.name}' with {total(guest.allotted)} seat(s)")
        return guest

    @staticmethod
    def edit_guest(
        guest: Guest,
        name: Optional[str] = None,
        allotted: Optional[Mapping[str, Any]] = None,
        status: Optional[str] = None,
        companion_names: Optional[Mapping[str, Sequence[str]]] = None,
        sent: Optional[bool] = None,
    ) -> Guest:
        """Apply a full-record organizer edit and return the new record.

        Confirming on the organizer side grants the full allotment; a party
        that was already confirmed keeps its answer, clamped to the new
        allotment. Resetting to pending clears confirmed counts and declining
        follows the RSVP decline rules.
        """
        if status is not None and status not in STATUSES:
            raise ValueError(f"Unknown guest status: {status!r}")

        updated = guest.copy()
        new_status = status or guest.status
        if sent is not None:
            updated.sent = bool(sent)
        if allotted is not None:
            updated.allotted = normalize_counts(allotted)

        if new_status == STATUS_DECLINED:
            if name:
                updated.name = clean_name(name)
            return RSVPService.resolve(updated, attending=False)

        reconciler = CompanionSlotReconciler(
            guest.name,
            companion_names if companion_names is not None else guest.companion_names,
            counts=guest.count_source(),
        )
        if name and clean_name(name) != guest.name:
            updated.name = clean_name(name)
            reconciler.rename(updated.name)

        if new_status == STATUS_CONFIRMED and guest.is_confirmed:
            updated.confirmed = clamp_counts(guest.confirmed, updated.allotted)
            if total(updated.confirmed) == 0:
                updated.confirmed = dict(updated.allotted)
        elif new_status == STATUS_CONFIRMED:
            updated.confirmed = dict(updated.allotted)
        else:
            updated.confirmed = empty_counts()
        updated.status = new_status
        updated.companion_names = reconciler.apply_counts(updated.count_source())

        logger.info(f"Edited guest {guest.id} ({updated.name}): status={new_status}")
        return updated

    @staticmethod
    def find_by_name(guests: Iterable[Guest], name: str) -> Optional[Guest]:
        """Exact, case-insensitive lookup of a party by its primary guest's name"""
        for guest in guests:
            if same_name(guest.name, name):
                return guest
        return None

    @staticmethod
    def filter_guests(
        guests: Iterable[Guest],
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Guest]:
        """Filter the organizer's guest list.

        ``declined`` also matches confirmed parties with partial absences.
        ``category`` keeps parties with seats in that category, counted the
        way the chosen status counts them. ``search`` matches the primary
        name or any companion name.
        """
        if category is not None and category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category!r}")

        query = (search or "").strip().casefold()
        results = []
        for guest in guests:
            allotted = guest.allotted
            confirmed = guest.effective_confirmed()

            if status == STATUS_DECLINED:
                has_absences = guest.is_confirmed and total(allotted) > total(confirmed)
                if not (guest.is_declined or has_absences):
                    continue
            elif status is not None and guest.status != status:
                continue

            if query:
                every_name = [guest.name] + [n for c in CATEGORIES for n in guest.companion_names[c]]
                if not any(query in n.casefold() for n in every_name if n):
                    continue

            if category is not None:
                if status == STATUS_CONFIRMED:
                    seats = confirmed[category]
                elif status == STATUS_DECLINED:
                    seats = allotted[category] if guest.is_declined else allotted[category] - confirmed[category]
                else:
                    seats = allotted[category]
                if seats <= 0:
                    continue

            results.append(guest)
        return results
