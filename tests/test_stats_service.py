"""
Tests for attendance aggregation
"""

import pytest

from seatplan.domain import CATEGORIES, Guest
from seatplan.services.stats_service import StatsService

@pytest.fixture
def guest_list():
    """One party per status, plus a confirmed party with a partial absence"""
    return [
        Guest.build(1, "Pending Party", allotted={"adults": 2, "kids": 1}),
        Guest.build(2, "Zero Confirm", allotted={"adults": 3}, confirmed={"adults": 0}, status="confirmed"),
        Guest.build(3, "Partial", allotted={"adults": 2, "teens": 2}, confirmed={"adults": 2, "teens": 1}, status="confirmed"),
        Guest.build(4, "Declined", allotted={"adults": 1, "infants": 1}, status="declined"),
    ]

def test_aggregate_breakdown(guest_list):
    stats = StatsService.aggregate(guest_list)
    
    assert stats.allotted_by_category == {"adults": 8, "teens": 2, "kids": 1, "infants": 1}
    assert stats.confirmed_by_category == {"adults": 5, "teens": 1, "kids": 0, "infants": 0}
    assert stats.absent_by_category == {"adults": 1, "teens": 1, "kids": 0, "infants": 1}
    assert stats.pending_by_category == {"adults": 2, "teens": 0, "kids": 1, "infants": 0}
    
    assert stats.confirmed == 6
    assert stats.absent == 3
    assert stats.pending == 3
    assert stats.total == 12

def test_headline_totals_match_breakdown(guest_list):
    stats = StatsService.aggregate(guest_list)
    
    assert stats.total == stats.confirmed + stats.absent + stats.pending
    assert stats.confirmed == sum(stats.confirmed_by_category.values())
    assert stats.absent == sum(stats.absent_by_category.values())
    assert stats.pending == sum(stats.pending_by_category.values())
    assert stats.total == sum(stats.allotted_by_category.values())

def test_zero_confirmed_counts_as_full_allotment():
    guest = Guest.build(1, "Ana", allotted={"adults": 3}, confirmed={"adults": 0}, status="confirmed")
    
    assert guest.effective_confirmed() == {"adults": 3, "teens": 0, "kids": 0, "infants": 0}
    stats = StatsService.aggregate([guest])
    assert stats.confirmed == 3
    assert stats.absent == 0

def test_empty_guest_list():
    stats = StatsService.aggregate([])
    
    assert stats.total == 0
    assert all(stats.allotted_by_category[c] == 0 for c in CATEGORIES)

def test_to_dict_is_serializable(guest_list):
    data = StatsService.aggregate(guest_list).to_dict()
    assert data["total"] == 12
    assert data["confirmed_by_category"]["adults"] == 5
