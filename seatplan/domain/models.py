"""
In-memory domain objects for allotments, parties and tables.

A party (``Guest``) is granted seats across four age categories. Every
category mapping carries all four keys; constructors fill in whatever a
raw payload leaves out.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

CATEGORIES: Tuple[str, ...] = ("adults", "teens", "kids", "infants")

CATEGORY_LABELS: Dict[str, str] = {
    "adults": "Adult",
    "teens": "Teen",
    "kids": "Kid",
    "infants": "Infant",
}

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_DECLINED = "declined"
STATUSES: Tuple[str, ...] = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_DECLINED)

PRIMARY_INDEX = -1

GuestId = Union[int, str]
Counts = Dict[str, int]
Names = Dict[str, List[str]]


def empty_counts() -> Counts:
    return {category: 0 for category in CATEGORIES}


def empty_names() -> Names:
    return {category: [] for category in CATEGORIES}


def _to_count(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, number)


def normalize_counts(raw: Optional[Mapping[str, Any]]) -> Counts:
    """Fill missing categories with zero and clamp negatives to zero."""
    counts = empty_counts()
    for category in CATEGORIES:
        counts[category] = _to_count((raw or {}).get(category))
    return counts


def clamp_counts(raw: Optional[Mapping[str, Any]], ceiling: Mapping[str, int]) -> Counts:
    """Clamp every category of ``raw`` into ``[0, ceiling[category]]``."""
    counts = normalize_counts(raw)
    return {category: min(counts[category], ceiling.get(category, 0)) for category in CATEGORIES}


def total(counts: Mapping[str, int]) -> int:
    return sum(counts.get(category, 0) for category in CATEGORIES)


def main_category(counts: Mapping[str, int]) -> Optional[str]:
    """First category, in priority order, with a positive count.

    Every component that needs the primary guest's category calls this
    function; none of them re-derive it.
    """
    for category in CATEGORIES:
        if counts.get(category, 0) > 0:
            return category
    return None


def clean_name(value: Any) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split())


def same_name(a: Any, b: Any) -> bool:
    """Case-insensitive, whitespace-normalized name equality (empty never matches)."""
    left, right = clean_name(a), clean_name(b)
    return bool(left) and left.casefold() == right.casefold()


def normalize_names(raw: Optional[Mapping[str, Iterable[Any]]]) -> Names:
    names = empty_names()
    for category in CATEGORIES:
        values = (raw or {}).get(category) or []
        names[category] = [clean_name(value) for value in values]
    return names


def seat_key(guest_id: GuestId, companion_index: int) -> Tuple[str, int]:
    """Identity of a seat-unit; ids compare as text so int and str ids agree."""
    return str(guest_id), int(companion_index)


@dataclass
class Guest:
    """One invited party"""

    id: Optional[GuestId]
    name: str
    status: str = STATUS_PENDING
    allotted: Counts = field(default_factory=empty_counts)
    confirmed: Counts = field(default_factory=empty_counts)
    companion_names: Names = field(default_factory=empty_names)
    sent: bool = False

    @classmethod
    def build(
        cls,
        id: Optional[GuestId],
        name: str,
        allotted: Optional[Mapping[str, Any]] = None,
        confirmed: Optional[Mapping[str, Any]] = None,
        companion_names: Optional[Mapping[str, Iterable[Any]]] = None,
        status: str = STATUS_PENDING,
        sent: bool = False,
    ) -> "Guest":
        """Normalize a raw record: default missing categories, clamp confirmed counts."""
        if status not in STATUSES:
            raise ValueError(f"Unknown guest status: {status!r}")
        allotted_counts = normalize_counts(allotted)
        return cls(
            id=id,
            name=clean_name(name),
            status=status,
            allotted=allotted_counts,
            confirmed=clamp_counts(confirmed, allotted_counts),
            companion_names=normalize_names(companion_names),
            sent=bool(sent),
        )

    @property
    def is_confirmed(self) -> bool:
        return self.status == STATUS_CONFIRMED

    @property
    def is_declined(self) -> bool:
        return self.status == STATUS_DECLINED

    def effective_confirmed(self) -> Counts:
        """Confirmed counts, reading a zero-total confirmation as full quota."""
        if self.is_confirmed and total(self.confirmed) == 0:
            return dict(self.allotted)
        return dict(self.confirmed)

    def count_source(self) -> Counts:
        """Counts that size the party: confirmed when confirmed, else allotted."""
        if self.is_confirmed:
            return self.effective_confirmed()
        return dict(self.allotted)

    def main_category(self) -> Optional[str]:
        return main_category(self.count_source())

    def copy(self) -> "Guest":
        return copy.deepcopy(self)


@dataclass(frozen=True)
class SeatUnit:
    """One assignable seat; identity is ``(guest_id, companion_index)``"""

    guest_id: GuestId
    companion_index: int
    name: str
    status: str

    @property
    def key(self) -> Tuple[str, int]:
        return seat_key(self.guest_id, self.companion_index)

    @property
    def is_primary(self) -> bool:
        return self.companion_index == PRIMARY_INDEX


@dataclass
class Table:
    id: Optional[GuestId]
    name: str
    capacity: int
    order: int = 0
    occupants: List[SeatUnit] = field(default_factory=list)

    @property
    def free_seats(self) -> int:
        return max(0, self.capacity - len(self.occupants))

    @property
    def over_capacity(self) -> bool:
        return len(self.occupants) > self.capacity

    def find_occupant(self, guest_id: GuestId, companion_index: int) -> Optional[SeatUnit]:
        key = seat_key(guest_id, companion_index)
        for occupant in self.occupants:
            if occupant.key == key:
                return occupant
        return None


@dataclass
class Event:
    id: GuestId
    name: str
    date: datetime
    organizer_email: str
    public_code: str
    created_at: datetime = field(default_factory=datetime.utcnow)
