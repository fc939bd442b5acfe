"""
Excel processing service for guest list import and attendee export
"""

import io
import logging
from typing import Any, Dict, Iterable, List, Tuple
import pandas as pd

from seatplan.domain import CATEGORIES, Table, same_name

logger = logging.getLogger(__name__)

class ExcelService:
    """Service for handling Excel operations"""

    REQUIRED_COLUMNS = ['name', 'adults', 'teens', 'kids', 'infants']
    EXPORT_COLUMNS = ['Name', 'Category', 'Status', 'Group', 'Relation', 'Table']

    @staticmethod
    def create_template() -> bytes:
        """Create Excel template with required columns"""
        df = pd.DataFrame(columns=['Name', 'Adults', 'Teens', 'Kids', 'Infants'])

        # Add sample data for guidance
        sample_data = [
            ['Sample Family', 2, 1, 1, 0],
            ['Sample Couple', 2, 0, 0, 0],
            ['Sample Guest', 1, 0, 0, 0],
        ]

        for row in sample_data:
            df.loc[len(df)] = row

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')

        return buffer.getvalue()

    @staticmethod
    def validate_excel_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate Excel file structure"""
        errors = []

        # Normalize column names for case-insensitive comparison
        normalized_columns = [str(col).lower().strip() for col in df.columns]

        missing_columns = [col for col in ExcelService.REQUIRED_COLUMNS if col not in normalized_columns]
        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def _column_mapping(df: pd.DataFrame) -> Dict[str, Any]:
        mapping = {}
        for col in df.columns:
            col_lower = str(col).lower().strip()
            if col_lower in ExcelService.REQUIRED_COLUMNS:
                mapping[col_lower] = col
        return mapping

    @staticmethod
    def validate_data_constraints(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate seat counts and duplicate party names"""
        errors = []
        mapping = ExcelService._column_mapping(df)

        for category in CATEGORIES:
            values = pd.to_numeric(df[mapping[category]].fillna(0), errors='coerce')
            for position in values[values.isna()].index:
                errors.append(f"Row {position + 2}: {category} must be a number")
            for position in values[values < 0].index:
                errors.append(f"Row {position + 2}: {category} cannot be negative")

        names = df[mapping['name']].dropna().astype(str).str.strip()
        names = names[names != '']
        duplicates = names[names.str.casefold().duplicated()]
        for name in duplicates:
            errors.append(f"Duplicate guest name '{name}'")

        return len(errors) == 0, errors

    @staticmethod
    def parse_guest_import(file_content: bytes) -> Tuple[bool, List[str], List[Dict[str, Any]]]:
        """Read an uploaded guest list into ``{name, allotted}`` rows.

        Every row is validated before any is returned; a file with errors
        yields no rows.
        """
        try:
            df = pd.read_excel(io.BytesIO(file_content))
        except Exception as e:
            return False, [f"Error reading Excel file: {str(e)}"], []

        valid_structure, structure_errors = ExcelService.validate_excel_structure(df)
        if not valid_structure:
            return False, structure_errors, []

        valid_data, data_errors = ExcelService.validate_data_constraints(df)
        if not valid_data:
            return False, data_errors, []

        mapping = ExcelService._column_mapping(df)
        rows = []
        for _, row in df.iterrows():
            # Skip empty rows
            if pd.isna(row[mapping['name']]) or str(row[mapping['name']]).strip() == '':
                continue

            allotted = {}
            for category in CATEGORIES:
                value = row[mapping[category]]
                allotted[category] = 0 if pd.isna(value) else int(value)

            rows.append({"name": str(row[mapping['name']]).strip(), "allotted": allotted})

        logger.info(f"Parsed {len(rows)} guest rows from Excel upload")
        return True, [], rows

    @staticmethod
    def existing_name_errors(rows: Iterable[Dict[str, Any]], existing_names: Iterable[str]) -> List[str]:
        """Errors for imported names that already belong to a party of the event"""
        existing = list(existing_names)
        return [
            f"Guest '{row['name']}' already exists"
            for row in rows
            if any(same_name(row['name'], name) for name in existing)
        ]

    @staticmethod
    def export_rows(rows: Iterable[Dict[str, Any]], tables: Iterable[Table] = ()) -> bytes:
        """Export attendee rows to Excel, with the table each seat occupies"""
        seat_tables = {
            occupant.key: table.name
            for table in tables
            for occupant in table.occupants
        }

        data = []
        for row in rows:
            key = (str(row['guest_id']), int(row['companion_index']))
            data.append({
                'Name': row['name'],
                'Category': row['category'] or '',
                'Status': row['status'],
                'Group': row['group_primary_name'],
                'Relation': row['relation'],
                'Table': seat_tables.get(key, ''),
            })

        df = pd.DataFrame(data, columns=ExcelService.EXPORT_COLUMNS)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Attendees')

        return buffer.getvalue()
