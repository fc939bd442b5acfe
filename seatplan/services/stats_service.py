"""
Attendance aggregation for dashboards and capacity planning
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable

from seatplan.domain import CATEGORIES, Guest, empty_counts


@dataclass
class GuestStats:
    """Seat totals, overall and per category.

    ``absent`` counts declined parties plus the unclaimed seats of
    confirmed ones. Headline totals are sums of the category breakdowns.
    """

    total: int = 0
    confirmed: int = 0
    absent: int = 0
    pending: int = 0
    allotted_by_category: Dict[str, int] = field(default_factory=empty_counts)
    confirmed_by_category: Dict[str, int] = field(default_factory=empty_counts)
    absent_by_category: Dict[str, int] = field(default_factory=empty_counts)
    pending_by_category: Dict[str, int] = field(default_factory=empty_counts)

    def to_dict(self) -> dict:
        return asdict(self)


class StatsService:
    """Service folding a guest list into seat totals"""

    @staticmethod
    def aggregate(guests: Iterable[Guest]) -> GuestStats:
        stats = GuestStats()

        for guest in guests:
            allotted = guest.allotted
            confirmed = guest.effective_confirmed()

            for category in CATEGORIES:
                stats.allotted_by_category[category] += allotted[category]

                if guest.is_confirmed:
                    stats.confirmed_by_category[category] += confirmed[category]
                    stats.absent_by_category[category] += max(0, allotted[category] - confirmed[category])
                elif guest.is_declined:
                    stats.absent_by_category[category] += allotted[category]
                else:
                    stats.pending_by_category[category] += allotted[category]

        stats.confirmed = sum(stats.confirmed_by_category.values())
        stats.absent = sum(stats.absent_by_category.values())
        stats.pending = sum(stats.pending_by_category.values())
        stats.total = stats.confirmed + stats.absent + stats.pending
        return stats
