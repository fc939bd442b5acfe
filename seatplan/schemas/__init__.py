"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .guest import *
from .table import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCreate",
    "EventResponse",
    "Allotment",
    "RequestedCounts",
    "CompanionNames",
    "GuestCreate",
    "GuestUpdate",
    "GuestResponse",
    "RSVPRequest",
    "TableCreate",
    "TableUpdate",
    "TableOrder",
    "SeatAssignment",
    "SeatUnitResponse",
    "TableResponse",
]
