"""
Guest-facing RSVP resolution
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from seatplan.domain import (
    CATEGORIES,
    STATUS_CONFIRMED,
    STATUS_DECLINED,
    Guest,
    clamp_counts,
    empty_counts,
    empty_names,
    main_category,
    normalize_names,
    total,
)
from seatplan.services.companions import CompanionSlotReconciler, reconcile

logger = logging.getLogger(__name__)

class RSVPService:
    """Turns a confirm/decline answer into an updated guest record"""

    @staticmethod
    def resolve(
        guest: Guest,
        attending: bool,
        requested_confirmed: Optional[Mapping[str, Any]] = None,
        requested_names: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> Guest:
        """Apply an RSVP answer to ``guest`` and return the new record.

        Never fails: counts are clamped into the allotment, the primary
        guest is forced into slot 0 of the main category and any other
        slot repeating the primary's name is blanked. With no requested
        counts the party confirms its full allotment.
        """
        updated = guest.copy()

        if not attending:
            updated.status = STATUS_DECLINED
            updated.confirmed = empty_counts()
            updated.companion_names = empty_names()
            logger.info(f"RSVP: guest {guest.id} ({guest.name}) declined")
            return updated

        source = requested_confirmed if requested_confirmed is not None else guest.allotted
        confirmed = clamp_counts(source, guest.allotted)
        if total(confirmed) == 0 and total(guest.allotted) > 0:
            logger.debug(f"RSVP: zero-seat confirmation for guest {guest.id} normalized to full allotment")
            confirmed = dict(guest.allotted)

        if requested_names is None:
            # Same slot moves as an organizer edit when the main category shifts
            reconciler = CompanionSlotReconciler(guest.name, guest.companion_names, counts=guest.count_source())
            names = reconciler.apply_counts(confirmed)
        else:
            # Supplied lists are laid out for the answer being sent
            stored = normalize_names(guest.companion_names)
            supplied = normalize_names(requested_names)
            main = main_category(confirmed)
            names = {}
            for category in CATEGORIES:
                names[category] = reconcile(
                    category,
                    confirmed[category],
                    stored[category],
                    guest.name,
                    category == main,
                    current_names=supplied[category],
                )

        updated.status = STATUS_CONFIRMED
        updated.confirmed = confirmed
        updated.companion_names = names
        logger.info(f"RSVP: guest {guest.id} ({guest.name}) confirmed {total(confirmed)} seat(s)")
        return updated
