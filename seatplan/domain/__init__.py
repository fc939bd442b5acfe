"""
Domain package: plain data objects shared by the allotment and seating engines
"""

from .models import (
    CATEGORIES,
    CATEGORY_LABELS,
    PRIMARY_INDEX,
    STATUS_CONFIRMED,
    STATUS_DECLINED,
    STATUS_PENDING,
    STATUSES,
    Event,
    Guest,
    GuestId,
    SeatUnit,
    Table,
    clamp_counts,
    clean_name,
    empty_counts,
    empty_names,
    main_category,
    normalize_counts,
    normalize_names,
    same_name,
    seat_key,
    total,
)

__all__ = [
    "CATEGORIES",
    "CATEGORY_LABELS",
    "PRIMARY_INDEX",
    "STATUS_CONFIRMED",
    "STATUS_DECLINED",
    "STATUS_PENDING",
    "STATUSES",
    "Event",
    "Guest",
    "GuestId",
    "SeatUnit",
    "Table",
    "clamp_counts",
    "clean_name",
    "empty_counts",
    "empty_names",
    "main_category",
    "normalize_counts",
    "normalize_names",
    "same_name",
    "seat_key",
    "total",
]
