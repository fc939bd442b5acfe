"""
Domain errors surfaced to callers.

Out-of-range counts and duplicated primary-guest names are corrected in
place and never raised; only the conditions below need caller action.
"""

from typing import Any


class SeatplanError(Exception):
    """Base class for seating and allotment errors"""

    error_code = "seatplan_error"
    status_code = 400


class NotFoundError(SeatplanError):
    """An event, guest, table or seat occupant does not exist"""

    error_code = "not_found"
    status_code = 404

    def __init__(self, resource: str, identifier: Any = None):
        self.resource = resource
        self.identifier = identifier
        if identifier is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message)


class CapacityExceededError(SeatplanError):
    """The table already holds as many occupants as its capacity"""

    error_code = "capacity_exceeded"
    status_code = 409

    def __init__(self, table_id: Any, capacity: int):
        self.table_id = table_id
        self.capacity = capacity
        super().__init__(f"Table '{table_id}' is full (capacity {capacity})")


class SeatAlreadyAssignedError(SeatplanError):
    """The seat-unit already occupies a table"""

    error_code = "seat_already_assigned"
    status_code = 409

    def __init__(self, guest_id: Any, companion_index: int, table_id: Any):
        self.guest_id = guest_id
        self.companion_index = companion_index
        self.table_id = table_id
        super().__init__(
            f"Seat ({guest_id}, {companion_index}) is already assigned to table '{table_id}'"
        )


class InvalidOrderError(SeatplanError):
    """A table reorder request is not a list of distinct table ids"""

    error_code = "invalid_order"
    status_code = 422
