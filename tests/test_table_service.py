"""
Tests for table management and seat assignment
"""

import threading

import pytest

from seatplan.core.config import settings
from seatplan.core.errors import CapacityExceededError, InvalidOrderError, NotFoundError, SeatAlreadyAssignedError
from seatplan.domain import STATUS_PENDING, SeatUnit, Table
from seatplan.services.table_service import TableLocks, TableService

def unit(guest_id, companion_index=-1, name="Guest"):
    return SeatUnit(guest_id, companion_index, name, STATUS_PENDING)

@pytest.fixture
def three_tables():
    return [
        Table(id=1, name="A", capacity=4, order=0),
        Table(id=2, name="B", capacity=4, order=1),
        Table(id=3, name="C", capacity=4, order=2),
    ]

def test_create_table_appends_after_existing(three_tables):
    table = TableService.create_table(three_tables, "  Family  ", 6)
    
    assert table.name == "Family"
    assert table.capacity == 6
    assert table.order == 3
    assert table.occupants == []

def test_create_table_defaults():
    table = TableService.create_table([], "Head")
    
    assert table.order == 0
    assert table.capacity == settings.DEFAULT_TABLE_CAPACITY
    
    with pytest.raises(ValueError):
        TableService.create_table([], "Broken", 0)

def test_assign_respects_capacity():
    table = Table(id=1, name="Small", capacity=2)
    TableService.assign(table, unit(1))
    TableService.assign(table, unit(2))
    
    with pytest.raises(CapacityExceededError) as exc_info:
        TableService.assign(table, unit(3))
    
    assert exc_info.value.capacity == 2
    assert len(table.occupants) == 2
    assert table.free_seats == 0

def test_double_seating_is_rejected(three_tables):
    a, b, _ = three_tables
    TableService.assign(a, unit(1, 0, "Luis"), three_tables)
    
    with pytest.raises(SeatAlreadyAssignedError) as exc_info:
        TableService.assign(b, unit("1", 0, "Renamed"), three_tables)
    assert exc_info.value.table_id == 1
    
    with pytest.raises(SeatAlreadyAssignedError):
        TableService.assign(a, unit(1, 0))
    
    seated = [o.key for t in three_tables for o in t.occupants]
    assert seated.count(("1", 0)) == 1

def test_unassign_by_identity():
    table = Table(id=1, name="A", capacity=4, occupants=[unit(1, -1, "Old Name"), unit(2)])
    
    removed = TableService.unassign(table, "1", -1)
    
    assert removed.name == "Old Name"
    assert [o.key for o in table.occupants] == [("2", -1)]
    with pytest.raises(NotFoundError):
        TableService.unassign(table, 1, -1)

def test_resize_below_occupancy_warns_without_evicting():
    table = Table(id=1, name="A", capacity=3, occupants=[unit(1), unit(2), unit(3)])
    
    warnings = TableService.resize(table, 2)
    
    assert len(warnings) == 1
    assert len(table.occupants) == 3
    assert table.over_capacity
    assert table.free_seats == 0
    with pytest.raises(CapacityExceededError):
        TableService.assign(table, unit(4))
    with pytest.raises(ValueError):
        TableService.resize(table, 0)

def test_update_table_renames_and_resizes():
    table = Table(id=1, name="A", capacity=3)
    
    assert TableService.update_table(table, name=" Head ", capacity=8) == []
    assert table.name == "Head"
    assert table.capacity == 8

def test_reorder(three_tables):
    ordered = TableService.reorder(three_tables, [3, "1"])
    
    assert [t.name for t in ordered] == ["C", "A", "B"]
    assert [t.order for t in ordered] == [0, 1, 2]

def test_reorder_rejects_bad_lists(three_tables):
    with pytest.raises(InvalidOrderError):
        TableService.reorder(three_tables, [1, 1, 2])
    with pytest.raises(NotFoundError):
        TableService.reorder(three_tables, [1, 2, 99])

def test_move(three_tables):
    assert [t.name for t in TableService.move(three_tables, 2, "up")] == ["B", "A", "C"]
    assert [t.name for t in TableService.move(three_tables, 2, "up")] == ["B", "A", "C"]
    assert [t.name for t in TableService.move(three_tables, 3, "down")] == ["B", "A", "C"]
    assert [t.name for t in TableService.move(three_tables, 1, "down")] == ["B", "C", "A"]
    
    with pytest.raises(ValueError):
        TableService.move(three_tables, 1, "sideways")
    with pytest.raises(NotFoundError):
        TableService.move(three_tables, 99, "up")

def test_remove_guest_cascades(three_tables):
    a, b, c = three_tables
    a.occupants = [unit(1, -1), unit(2, -1)]
    b.occupants = [unit(1, 0)]
    
    changed = TableService.remove_guest(three_tables, "1")
    
    assert changed == [a, b]
    assert [o.key for o in a.occupants] == [("2", -1)]
    assert b.occupants == []

def test_find_table(three_tables):
    assert TableService.find_table(three_tables, "2").name == "B"
    with pytest.raises(NotFoundError):
        TableService.find_table(three_tables, 42)

def test_table_locks_share_lock_per_id():
    locks = TableLocks()
    
    assert locks.get(1) is locks.get("1")
    assert locks.get(1) is not locks.get(2)
    
    first = locks.get(1)
    locks.discard(1)
    assert locks.get(1) is not first

def test_concurrent_assigns_never_exceed_capacity():
    """Twenty threads race for a five-seat table"""
    locks = TableLocks()
    table = Table(id=1, name="Race", capacity=5)
    barrier = threading.Barrier(20)
    seated, rejected = [], []
    
    def worker(guest_id):
        barrier.wait()
        with locks.hold(table.id):
            try:
                TableService.assign(table, unit(guest_id))
                seated.append(guest_id)
            except CapacityExceededError:
                rejected.append(guest_id)
    
    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    
    assert len(table.occupants) == 5
    assert len(seated) == 5
    assert len(rejected) == 15
