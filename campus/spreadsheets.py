# spreadsheets.py
"""Excel import and template for student admission."""
import logging
from io import BytesIO

import pandas as pd
from django.db import IntegrityError

from .exceptions import CampusError, ValidationError

logger = logging.getLogger(__name__)

TEMPLATE_SHEET = 'Students'

STUDENT_COLUMNS = ['first_name', 'last_name', 'dob', 'gender']
ADMISSION_COLUMNS = ['admission_number', 'gr_number', 'roll_number', 'admission_date', 'form_number']
FAMILY_COLUMNS = ['father_name', 'father_contact', 'mother_name', 'mother_contact']
ADDRESS_COLUMNS = ['address_line', 'village', 'taluka', 'district', 'primary_contact']

TEMPLATE_COLUMNS = STUDENT_COLUMNS + ADMISSION_COLUMNS + FAMILY_COLUMNS + ADDRESS_COLUMNS

SAMPLE_ROW = {
    'first_name': 'Aarav',
    'last_name': 'Patel',
    'dob': '2012-06-15',
    'gender': 'male',
    'admission_number': 'ADM-2025-001',
    'gr_number': 'GR-2025-001',
    'roll_number': 1,
    'admission_date': '2025-06-10',
    'form_number': 'F-001',
    'father_name': 'Rakesh Patel',
    'father_contact': '9876543210',
    'mother_name': 'Meena Patel',
    'mother_contact': '9876543211',
    'address_line': '12 Station Road',
    'village': 'Anand',
    'taluka': 'Anand',
    'district': 'Anand',
    'primary_contact': '9876543210',
}


def build_template():
    """Return an .xlsx workbook with the import columns and one sample row."""
    df = pd.DataFrame([SAMPLE_ROW], columns=TEMPLATE_COLUMNS)
    output = BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=TEMPLATE_SHEET, index=False)

        # Auto-adjust column widths
        worksheet = writer.sheets[TEMPLATE_SHEET]
        for column in worksheet.columns:
            max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
            worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)
    return output.getvalue()


def _clean(value):
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def row_to_payload(class_id, row):
    """Map one spreadsheet row to the nested payload StudentService.create_student expects."""
    def pick(columns):
        return {c: row[c] for c in columns if row.get(c) is not None}

    payload = {
        'class_id': class_id,
        'student': pick(STUDENT_COLUMNS),
        'admission': pick(ADMISSION_COLUMNS),
    }
    for key in ('admission_number', 'gr_number', 'form_number'):
        if key in payload['admission']:
            payload['admission'][key] = str(payload['admission'][key])
    family = pick(FAMILY_COLUMNS)
    if family:
        for key in ('father_contact', 'mother_contact'):
            if key in family:
                family[key] = str(family[key])
        payload['family_details'] = family
    address = pick(ADDRESS_COLUMNS)
    if address.get('address_line'):
        if 'primary_contact' in address:
            address['primary_contact'] = str(address['primary_contact'])
        payload['address'] = address
    return payload


def read_rows(excel_file):
    try:
        df = pd.read_excel(excel_file, engine='openpyxl')
    except (ValueError, OSError) as exc:
        raise ValidationError('Could not read the uploaded Excel file.', details={'file': str(exc)})
    missing = [c for c in ('first_name', 'last_name', 'admission_number', 'gr_number') if c not in df.columns]
    if missing:
        raise ValidationError(f"Missing columns: {', '.join(missing)}", details={'missing': missing})
    return [{key: _clean(value) for key, value in row.items()} for row in df.to_dict('records')]


def _row_error(line, row, message, details):
    logger.error(f"Error importing row {line}: {message}")
    return {
        'row': line,
        'admission_number': row.get('admission_number') or 'N/A',
        'errors': message,
        'details': details,
    }


def import_students(excel_file, class_id, student_service):
    """
    Create one student per row. Each row runs in its own transaction, so a bad
    row is reported without blocking the others.
    """
    rows = read_rows(excel_file)
    created, errors = [], []
    for line, row in enumerate(rows, start=2):  # Row 1 is the header
        try:
            created.append(student_service.create_student(row_to_payload(class_id, row)))
        except CampusError as exc:
            errors.append(_row_error(line, row, exc.message, exc.details))
        except IntegrityError as exc:
            errors.append(_row_error(line, row, "A record with the same unique values already exists.", str(exc)))
    return {'created': created, 'errors': errors, 'total_rows': len(rows)}
