"""
Tests for the SQL and Firestore stores
"""

import copy
import uuid
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from seatplan.core.db import Base
from seatplan.domain import STATUS_PENDING, SeatUnit, Table, empty_names
from seatplan.models import Guest as GuestRow
from seatplan.services.guest_service import GuestService
from seatplan.services.repositories import FirestoreStore, SqlStore, decode_companion_names

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_repositories.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

# -------- In-memory Firestore stand-in --------

class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
    
    @property
    def exists(self):
        return self._data is not None
    
    def to_dict(self):
        return copy.deepcopy(self._data)

class FakeDocument:
    def __init__(self, docs, path, doc_id):
        self._docs = docs
        self._path = path
        self.id = doc_id
    
    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self._path))
    
    def set(self, data, merge=False):
        if merge and self._path in self._docs:
            self._docs[self._path].update(copy.deepcopy(data))
        else:
            self._docs[self._path] = copy.deepcopy(data)
    
    def delete(self):
        self._docs.pop(self._path, None)
    
    def collection(self, name):
        return FakeCollection(self._docs, f"{self._path}/{name}")

class FakeCollection:
    def __init__(self, docs, path):
        self._docs = docs
        self._path = path
    
    def document(self, doc_id=None):
        if doc_id is None:
            doc_id = uuid.uuid4().hex[:20]
        return FakeDocument(self._docs, f"{self._path}/{doc_id}", doc_id)
    
    def stream(self):
        prefix = self._path + "/"
        for path, data in list(self._docs.items()):
            rest = path[len(prefix):]
            if path.startswith(prefix) and "/" not in rest:
                yield FakeSnapshot(rest, copy.deepcopy(data))

class FakeFirestore:
    def __init__(self):
        self.docs = {}
    
    def collection(self, name):
        return FakeCollection(self.docs, name)

@pytest.fixture(params=["sql", "firestore"])
def store(request, db_session):
    if request.param == "sql":
        return SqlStore(db_session)
    return FirestoreStore(FakeFirestore())

@pytest.fixture
def event(store):
    return store.create_event("Ana & Luis", datetime(2026, 6, 15, 16, 0), "ana@example.com")

# -------- Shared behaviour --------

def test_create_and_find_event(store, event):
    assert event.public_code
    assert store.get_event(event.id).name == "Ana & Luis"
    assert store.get_event_by_code(event.public_code).id == event.id
    assert store.get_event("missing") is None

def test_guest_round_trip(store, event):
    guest = GuestService.create_guest("Ana", {"adults": 2, "kids": 1}, {"adults": ["Ana", "Luis"], "kids": ["Leo"]})
    saved = store.save_guest(event.id, guest)
    
    assert saved.id is not None
    loaded = store.get_guest(event.id, saved.id)
    assert loaded.name == "Ana"
    assert loaded.allotted == {"adults": 2, "teens": 0, "kids": 1, "infants": 0}
    assert loaded.companion_names["adults"] == ["Ana", "Luis"]
    assert loaded.companion_names["kids"] == ["Leo"]
    assert [g.id for g in store.load_guests(event.id)] == [saved.id]

def test_save_unknown_guest_returns_none(store, event):
    guest = GuestService.create_guest("Ghost", {"adults": 1}, guest_id=987654)
    assert store.save_guest(event.id, guest) is None

def test_tables_resolve_occupant_names(store, event):
    guest = store.save_guest(event.id, GuestService.create_guest("Ana", {"adults": 1}))
    table = Table(id=None, name="Head", capacity=4, occupants=[SeatUnit(guest.id, -1, "stale", STATUS_PENDING)])
    store.save_table(event.id, table)
    
    tables = store.load_tables(event.id)
    
    assert len(tables) == 1
    assert tables[0].occupants[0].name == "Ana"
    assert tables[0].occupants[0].key == (str(guest.id), -1)

def test_delete_guest_frees_seats(store, event):
    ana = store.save_guest(event.id, GuestService.create_guest("Ana", {"adults": 2}))
    bob = store.save_guest(event.id, GuestService.create_guest("Bob", {"adults": 1}))
    store.save_table(event.id, Table(id=None, name="A", capacity=4, occupants=[
        SeatUnit(ana.id, -1, "Ana", STATUS_PENDING),
        SeatUnit(bob.id, -1, "Bob", STATUS_PENDING),
    ]))
    store.save_table(event.id, Table(id=None, name="B", capacity=4, order=1, occupants=[
        SeatUnit(ana.id, 0, "Adult 1 - Ana", STATUS_PENDING),
    ]))
    
    assert store.delete_guest(event.id, ana.id)
    
    tables = store.load_tables(event.id)
    assert [[o.key for o in t.occupants] for t in tables] == [[(str(bob.id), -1)], []]
    assert store.get_guest(event.id, ana.id) is None
    assert not store.delete_guest(event.id, ana.id)

def test_save_order_and_delete_table(store, event):
    a = store.save_table(event.id, Table(id=None, name="A", capacity=4, order=0))
    b = store.save_table(event.id, Table(id=None, name="B", capacity=4, order=1))
    
    store.save_order(event.id, [b.id, a.id])
    assert [t.name for t in store.load_tables(event.id)] == ["B", "A"]
    
    assert store.get_table(event.id, a.id).name == "A"
    assert store.get_table(event.id, "missing") is None
    
    assert store.delete_table(event.id, b.id)
    assert not store.delete_table(event.id, b.id)
    assert [t.name for t in store.load_tables(event.id)] == ["A"]

def test_delete_event(store, event):
    store.save_guest(event.id, GuestService.create_guest("Ana", {"adults": 1}))
    
    assert store.delete_event(event.id)
    assert store.get_event(event.id) is None
    assert not store.delete_event(event.id)

# -------- Legacy records --------

def test_decode_companion_names_layouts():
    assert decode_companion_names(None) == empty_names()
    assert decode_companion_names({"kids": ["Leo"]})["kids"] == ["Leo"]
    assert decode_companion_names(['{"adults": ["Ana", "Luis"]}'])["adults"] == ["Ana", "Luis"]

def test_decode_flat_list_spreads_over_categories():
    names = decode_companion_names(["Luis", "Tom", "Leo"], {"adults": 2, "teens": 1, "kids": 1})
    assert names == {"adults": ["Luis"], "teens": ["Tom"], "kids": ["Leo"], "infants": []}
    
    leftovers = decode_companion_names(["A", "B", "C"], {"adults": 2})
    assert leftovers["adults"] == ["A", "B", "C"]

def test_legacy_sql_row_is_readable(db_session):
    store = SqlStore(db_session)
    event = store.create_event("Legacy", datetime(2026, 1, 1), "old@example.com")
    row = GuestRow(
        event_id=event.id,
        name="Ana",
        status="confirmed",
        allotted={"adults": 2},
        confirmed={"adults": 5},
        companion_names=["Luis"]
    )
    db_session.add(row)
    db_session.commit()
    
    guest = store.get_guest(event.id, row.id)
    
    assert guest.confirmed["adults"] == 2
    assert guest.companion_names["adults"] == ["Luis"]
    assert guest.allotted["kids"] == 0
