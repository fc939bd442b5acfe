"""
Database models package
"""

from .event import Event
from .table import Table
from .guest import Guest

__all__ = ["Event", "Table", "Guest"]
