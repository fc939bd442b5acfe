"""
Tests for companion name slot reconciliation
"""

from seatplan.services.companions import CompanionSlotReconciler, reconcile

def test_grow_main_category_forces_primary_into_slot_zero():
    """Growing the main category from empty puts the primary guest first"""
    assert reconcile("adults", 2, [], "Ana", True) == ["Ana", ""]

def test_grow_restores_previous_names():
    """Re-grown slots get back the names that sat at the same index"""
    names = reconcile("kids", 2, ["Leo", "Mia"], "Ana", False, current_names=[])
    assert names == ["Leo", "Mia"]

def test_grow_skips_restored_duplicate_of_primary():
    """A restored name equal to the primary guest's is appended empty"""
    names = reconcile("kids", 2, ["ana ", "Mia"], "Ana", False, current_names=[])
    assert names == ["", "Mia"]

def test_shrink_truncates_tail():
    assert reconcile("adults", 1, ["Ana", "Luis"], "Ana", True) == ["Ana"]

def test_main_slot_overrides_supplied_name():
    """Whatever sits in the main slot is replaced by the primary guest"""
    assert reconcile("adults", 2, ["Bob", "Luis"], "Ana", True) == ["Ana", "Luis"]

def test_round_trip_from_empty_current_list():
    names = reconcile("adults", 2, ["Ana", "Luis"], "Ana", True, current_names=[])
    assert names == ["Ana", "Luis"]

def test_grow_shrink_grow_keeps_typed_names():
    """Reducing adults to 0 and back to 2 gives back the original names"""
    reconciler = CompanionSlotReconciler("Ana", {"adults": ["Ana", "Luis"]}, counts={"adults": 2})
    
    shrunk = reconciler.apply_counts({"adults": 0})
    assert shrunk["adults"] == []
    
    regrown = reconciler.apply_counts({"adults": 2})
    assert regrown["adults"] == ["Ana", "Luis"]

def test_main_category_shift_moves_primary_slot():
    """The forced slot follows the main category and leaves the old one"""
    reconciler = CompanionSlotReconciler(
        "Ana",
        {"adults": ["Ana", "Bob"], "teens": ["Tom"]},
        counts={"adults": 2, "teens": 1}
    )
    
    names = reconciler.apply_counts({"adults": 0, "teens": 2})
    assert reconciler.main == "teens"
    assert names["teens"] == ["Ana", "Tom"]
    assert names["adults"] == []
    
    names = reconciler.apply_counts({"adults": 2, "teens": 1})
    assert reconciler.main == "adults"
    assert names["adults"] == ["Ana", "Bob"]
    assert names["teens"] == ["Tom"]

def test_legacy_list_without_primary_gets_primary_prepended():
    reconciler = CompanionSlotReconciler("Ana", {"adults": ["Luis"]}, counts={"adults": 2})
    assert reconciler.apply_counts({"adults": 2})["adults"] == ["Ana", "Luis"]

def test_full_length_list_keeps_companions_behind_blank_main_slot():
    """A list already sized to the count gets the primary written over slot 0"""
    reconciler = CompanionSlotReconciler("Ana", {"adults": ["", "Luis"]}, counts={"adults": 2})
    assert reconciler.apply_counts({"adults": 2})["adults"] == ["Ana", "Luis"]

def test_rename_updates_forced_slot():
    reconciler = CompanionSlotReconciler("Ana", {"adults": ["Ana", "Luis"]}, counts={"adults": 2})
    reconciler.rename("Ana Maria")
    assert reconciler.names["adults"] == ["Ana Maria", "Luis"]
