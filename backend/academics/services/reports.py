"""Student and faculty report exports (CSV and Excel)."""
import csv
from io import BytesIO, StringIO
from typing import Any, Iterable, List, Sequence, Tuple

from django.utils import timezone
from openpyxl import Workbook

from .classification import FACULTY_SEARCH_FIELDS, STUDENT_SEARCH_FIELDS, field, full_name, search_records

STUDENT_COLUMNS = ['Student ID', 'Name', 'Course', 'Department', 'School Year', 'Status']
FACULTY_COLUMNS = ['Faculty ID', 'Name', 'Program', 'Department', 'School Year', 'Status']

CSV_CONTENT_TYPE = 'text/csv; charset=utf-8'
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

ALL_DEPARTMENTS = 'All Departments'
ALL_SCHOOL_YEARS = 'All School Years'


def _matches_filter(value: str, selected: str, everything: str) -> bool:
    if not selected or selected == everything:
        return True
    return value == selected


def filter_records(records: Iterable[Any], search: str = '', department: str = '', academic_year: str = '',
                   fields: Sequence = STUDENT_SEARCH_FIELDS) -> List[Any]:
    """Exact department / school-year filters, then the free-text search."""
    kept = [
        r for r in records
        if _matches_filter(field(r, 'department'), department, ALL_DEPARTMENTS)
        and _matches_filter(field(r, 'academic_year'), academic_year, ALL_SCHOOL_YEARS)
    ]
    return search_records(kept, search, fields)


def _pk(record):
    return record.get('id') if isinstance(record, dict) else getattr(record, 'id', None)


def student_rows(students: Iterable[Any]) -> List[Tuple[Any, ...]]:
    return [
        (_pk(s), full_name(s), field(s, 'program'), field(s, 'department'), field(s, 'academic_year'), field(s, 'status'))
        for s in students
    ]


def faculty_rows(faculty: Iterable[Any]) -> List[Tuple[Any, ...]]:
    rows = [
        (_pk(f), full_name(f), field(f, 'assigned_program') or field(f, 'program'), field(f, 'department'),
         field(f, 'academic_year'), field(f, 'status'))
        for f in faculty
    ]
    return sorted(rows, key=lambda r: r[0] or 0)


def csv_bytes(cols: List[str], rows: List[Tuple[Any, ...]]) -> bytes:
    sio = StringIO()
    writer = csv.writer(sio, quoting=csv.QUOTE_ALL)
    writer.writerow(cols)
    for r in rows:
        writer.writerow(['' if v is None else v for v in r])
    return sio.getvalue().encode('utf-8')


def xlsx_bytes(cols: List[str], rows: List[Tuple[Any, ...]], title: str = 'report') -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    ws.append(cols)
    for r in rows:
        ws.append(list(r))
    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf.getvalue()


def export_filename(kind: str, fmt: str) -> str:
    return f'{kind}_reports_{timezone.now().strftime("%Y%m%d%H%M%S")}.{fmt}'


def render(kind: str, cols: List[str], rows: List[Tuple[Any, ...]], fmt: str) -> Tuple[bytes, str, str]:
    """Return ``(payload, content_type, filename)`` for ``fmt`` in {csv, xlsx}."""
    if fmt == 'xlsx':
        return xlsx_bytes(cols, rows, title=kind), XLSX_CONTENT_TYPE, export_filename(kind, 'xlsx')
    return csv_bytes(cols, rows), CSV_CONTENT_TYPE, export_filename(kind, 'csv')


def export_students(students: Iterable[Any], fmt: str = 'csv', **filters) -> Tuple[bytes, str, str]:
    selected = filter_records(students, fields=STUDENT_SEARCH_FIELDS, **filters)
    return render('student', STUDENT_COLUMNS, student_rows(selected), fmt)


def export_faculty(faculty: Iterable[Any], fmt: str = 'csv', **filters) -> Tuple[bytes, str, str]:
    selected = filter_records(faculty, fields=FACULTY_SEARCH_FIELDS, **filters)
    return render('faculty', FACULTY_COLUMNS, faculty_rows(selected), fmt)
