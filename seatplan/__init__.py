"""
Guest allotment reconciliation and table seating backend
"""

__version__ = "1.0.0"
