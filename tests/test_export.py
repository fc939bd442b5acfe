"""
Tests for attendee export rows and Excel import/export
"""

import io

import pandas as pd
import pytest

from seatplan.domain import STATUS_PENDING, Guest, SeatUnit, Table
from seatplan.services.excel_service import ExcelService
from seatplan.services.export_service import ExportService

def create_test_excel(data):
    """Helper function to create Excel bytes from data"""
    df = pd.DataFrame(data)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, index=False)
    return buffer.getvalue()

@pytest.fixture
def guests():
    return [
        Guest.build(1, "Zoe", allotted={"adults": 1}),
        Guest.build(
            2,
            "Ana",
            allotted={"adults": 2, "kids": 1},
            confirmed={"adults": 2, "kids": 1},
            companion_names={"adults": ["Ana", "Luis"], "kids": [""]},
            status="confirmed"
        ),
        Guest.build(3, "Bea", allotted={"adults": 2}, status="declined"),
        Guest.build(4, "bob", allotted={"adults": 1}),
    ]

def test_rows_are_ordered_by_status_then_group(guests):
    rows = ExportService.build_rows(guests)
    
    assert [r["name"] for r in rows] == ["Ana", "Luis", "Kid 1 - Ana", "bob", "Zoe", "Bea", "Adult 1 - Bea"]
    assert [r["status"] for r in rows] == ["confirmed"] * 3 + ["pending"] * 2 + ["declined"] * 2

def test_primary_row_leads_its_group(guests):
    rows = ExportService.build_rows(guests)
    ana_rows = [r for r in rows if r["group_primary_name"] == "Ana"]
    
    assert [r["relation"] for r in ana_rows] == ["primary", "companion", "companion"]
    assert [r["category"] for r in ana_rows] == ["adults", "adults", "kids"]
    assert [r["companion_index"] for r in ana_rows] == [-1, 0, 1]

def test_validate_excel_structure_missing_columns():
    df = pd.DataFrame({'Name': ['Ana'], 'Adults': [2]})
    valid, errors = ExcelService.validate_excel_structure(df)
    
    assert not valid
    assert "teens" in errors[0]

def test_parse_guest_import():
    content = create_test_excel({
        'Name': ['Ana', 'Bob', None],
        'Adults': [2, 1, 0],
        'Teens': [0, 0, 0],
        'Kids': [1, 0, 0],
        'Infants': [0, 0, 0],
    })
    
    success, errors, rows = ExcelService.parse_guest_import(content)
    
    assert success
    assert errors == []
    assert rows == [
        {"name": "Ana", "allotted": {"adults": 2, "teens": 0, "kids": 1, "infants": 0}},
        {"name": "Bob", "allotted": {"adults": 1, "teens": 0, "kids": 0, "infants": 0}},
    ]

def test_parse_guest_import_rejects_bad_rows():
    content = create_test_excel({
        'Name': ['Ana', 'ana', 'Cy'],
        'Adults': [2, 1, -1],
        'Teens': [0, 0, 0],
        'Kids': [0, 0, 0],
        'Infants': [0, 0, 0],
    })
    
    success, errors, rows = ExcelService.parse_guest_import(content)
    
    assert not success
    assert rows == []
    assert any("cannot be negative" in e for e in errors)
    assert any("Duplicate guest name" in e for e in errors)

def test_parse_guest_import_unreadable_file():
    success, errors, rows = ExcelService.parse_guest_import(b"not an excel file")
    
    assert not success
    assert "Error reading Excel file" in errors[0]

def test_template_round_trips_through_import():
    success, errors, rows = ExcelService.parse_guest_import(ExcelService.create_template())
    
    assert success
    assert len(rows) == 3
    assert rows[0]["allotted"] == {"adults": 2, "teens": 1, "kids": 1, "infants": 0}

def test_existing_name_errors():
    errors = ExcelService.existing_name_errors([{"name": "Ana"}, {"name": "Bob"}], ["ANA", "Cy"])
    assert errors == ["Guest 'Ana' already exists"]

def test_export_rows_to_excel(guests):
    table = Table(id=1, name="Head", capacity=8, occupants=[SeatUnit(2, -1, "Ana", STATUS_PENDING)])
    content = ExcelService.export_rows(ExportService.build_rows(guests), [table])
    
    df = pd.read_excel(io.BytesIO(content))
    
    assert list(df.columns) == ExcelService.EXPORT_COLUMNS
    assert len(df) == 7
    assert df.loc[0, 'Name'] == "Ana"
    assert df.loc[0, 'Table'] == "Head"
    assert df.loc[1, 'Relation'] == "companion"
