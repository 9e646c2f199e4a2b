"""Grouping and counting of students, faculty and courses.

Every function here works on plain in-memory collections: model instances,
dicts from the API, or a mix. Relations between departments and records are
by name, and names were typed by hand, so every comparison trims, collapses
whitespace and lower-cases first. Missing or ``None`` fields compare as
``''``. Nothing in this module raises for bad data; records with an
unrecognised academic year simply drop out of year-grouped views.
"""
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from academics.models import DEAN_PROGRAM, FACULTY_BUCKETS, LEADERSHIP_POSITIONS, TEACHING_POSITIONS

from .year_labels import BASELINE_YEARS, first_year, label_key, normalize_year_label

Record = Any
LabelFn = Callable[[Record], Any]
KeyFn = Callable[[Record], Any]

# programs offered under each department, in display order
PROGRAM_CATALOGUE = {
    'Accountancy': [
        'Accountancy',
        'Accounting Information System',
        'Internal Auditing',
        'Management Accounting',
    ],
    'Business Administration': [
        'Business Administration Program',
        'Operation Management',
        'Financials Management',
        'Marketing Management',
        'Human Resource Management',
    ],
    'Computer Studies': [
        'Computer Science',
        'Information Technology',
        'Information Technology with special training in Computer Animation',
        'Diploma in Information Technology',
        'Library and Information Science',
        'Entertainment and Multimedia Computing',
    ],
    'Engineering Technology': [
        'Civil Engineering',
        'Industrial Engineering',
    ],
    'Teacher Education': [
        'Elementary Education',
        'Early Childhood Education',
        'Physical Education',
        'Special Needs Education',
        'Secondary Education',
    ],
}


def field(record: Record, name: str) -> str:
    if record is None:
        return ''
    if isinstance(record, dict):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    return '' if value is None else str(value)


def norm(value) -> str:
    return ' '.join(('' if value is None else str(value)).split()).lower()


def same(a, b) -> bool:
    return norm(a) == norm(b)


def full_name(record: Record) -> str:
    return ' '.join(part for part in (field(record, 'first_name'), field(record, 'last_name')) if part)


def academic_year_of(record: Record) -> str:
    return field(record, 'academic_year')


def effective_group_key(record: Record) -> str:
    """``program`` when set, otherwise ``department``."""
    program = field(record, 'program')
    return program if norm(program) else field(record, 'department')


def is_dean(record: Record) -> bool:
    return same(field(record, 'program'), DEAN_PROGRAM)


def resolve_program(faculty: Record) -> str:
    """Deans count under the department they lead, everyone else under ``program``."""
    if is_dean(faculty):
        return field(faculty, 'dean_department')
    return field(faculty, 'program')


def resolve_assigned_program(faculty: Record) -> str:
    if is_dean(faculty):
        return field(faculty, 'dean_department')
    return field(faculty, 'assigned_program')


def _known_lookup(known_years: Optional[Iterable[str]]) -> Dict[str, str]:
    labels = BASELINE_YEARS if known_years is None else known_years
    return {label_key(label): label for label in labels}


def _records_by_year(records: Iterable[Record], label_fn: Optional[LabelFn],
                     known_years: Optional[Iterable[str]]) -> Iterator[Tuple[str, Record]]:
    label_fn = label_fn or academic_year_of
    known = _known_lookup(known_years)
    for record in records or ():
        year = normalize_year_label(label_fn(record))
        if not year:
            continue
        label = known.get(label_key(year))
        if label is None:
            continue
        yield label, record


def group_by_year_and_key(records: Iterable[Record], label_fn: Optional[LabelFn] = None,
                          key_fn: Optional[KeyFn] = None,
                          known_years: Optional[Iterable[str]] = None) -> Dict[str, Dict[str, List[Record]]]:
    """Nest records as ``{year: {key: [records]}}``.

    Years are canonical labels restricted to ``known_years`` (the baseline
    when omitted). Keys that differ only by case or spacing share a bucket
    named after the first spelling seen. Insertion order is kept at every
    level.
    """
    key_fn = key_fn or effective_group_key
    grouped: Dict[str, Dict[str, List[Record]]] = {}
    spellings: Dict[str, Dict[str, str]] = {}
    for year, record in _records_by_year(records, label_fn, known_years):
        raw_key = key_fn(record)
        raw_key = '' if raw_key is None else str(raw_key)
        seen = spellings.setdefault(year, {})
        display = seen.setdefault(norm(raw_key), raw_key.strip())
        grouped.setdefault(year, {}).setdefault(display, []).append(record)
    return grouped


def count_by_year(records: Iterable[Record], label_fn: Optional[LabelFn] = None,
                  known_years: Optional[Iterable[str]] = None) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for year, _ in _records_by_year(records, label_fn, known_years):
        counts[year] = counts.get(year, 0) + 1
    return counts


def count_by_year_and_key(records: Iterable[Record], label_fn: Optional[LabelFn] = None,
                          key_fn: Optional[KeyFn] = None,
                          known_years: Optional[Iterable[str]] = None) -> Dict[str, Dict[str, int]]:
    """Same shape as :func:`group_by_year_and_key` with counts instead of lists."""
    key_fn = key_fn or effective_group_key
    counts: Dict[str, Dict[str, int]] = {}
    spellings: Dict[str, Dict[str, str]] = {}
    for year, record in _records_by_year(records, label_fn, known_years):
        raw_key = key_fn(record)
        raw_key = '' if raw_key is None else str(raw_key)
        display = spellings.setdefault(year, {}).setdefault(norm(raw_key), raw_key.strip())
        bucket = counts.setdefault(year, {})
        bucket[display] = bucket.get(display, 0) + 1
    return counts


def _in_year(record: Record, year: str) -> bool:
    target = normalize_year_label(year)
    return bool(target) and normalize_year_label(academic_year_of(record)) == target


def count_faculty_by_position_and_program(faculty: Iterable[Record], year: str, position: str, program: str) -> int:
    return sum(
        1 for f in faculty or ()
        if _in_year(f, year)
        and same(field(f, 'program'), position)
        and same(field(f, 'assigned_program'), program)
    )


def count_deans_by_program(faculty: Iterable[Record], year: str, program_name: str) -> int:
    if not norm(program_name):
        return 0
    return sum(
        1 for f in faculty or ()
        if _in_year(f, year)
        and same(field(f, 'department'), LEADERSHIP_POSITIONS)
        and same(resolve_program(f), program_name)
    )


def count_students_for_course(students: Iterable[Record], course: Record) -> int:
    course_name = norm(field(course, 'name'))
    if not course_name:
        return 0
    owner = norm(field(course, 'program'))
    return sum(
        1 for s in students or ()
        if norm(field(s, 'program')) == course_name
        and (not owner or norm(field(s, 'department')) == owner)
    )


def count_faculty_for_program(faculty: Iterable[Record], program_name: str) -> int:
    """Active teaching staff assigned to ``program_name``."""
    if not norm(program_name):
        return 0
    return sum(
        1 for f in faculty or ()
        if same(field(f, 'department'), TEACHING_POSITIONS)
        and norm(field(f, 'status')) in ('', 'active')
        and same(resolve_assigned_program(f), program_name)
    )


def count_faculty_by_bucket(faculty: Iterable[Record]) -> Dict[str, int]:
    counts = {bucket: 0 for bucket in FACULTY_BUCKETS}
    lookup = {norm(bucket): bucket for bucket in FACULTY_BUCKETS}
    for f in faculty or ():
        bucket = lookup.get(norm(field(f, 'department')))
        if bucket is not None:
            counts[bucket] += 1
    return counts


def _student_in_department(student: Record, key: str) -> bool:
    return norm(field(student, 'department')) == key or norm(field(student, 'program')) == key


def _faculty_in_department(faculty: Record, key: str) -> bool:
    return norm(field(faculty, 'department')) == key or norm(field(faculty, 'dean_department')) == key


def _course_in_department(course: Record, key: str) -> bool:
    return norm(field(course, 'program')) == key


def records_for_department(name: str, students: Iterable[Record], faculty: Iterable[Record],
                           courses: Iterable[Record]) -> Dict[str, List[Record]]:
    key = norm(name)
    if not key:
        return {'students': [], 'faculty': [], 'courses': []}
    return {
        'students': [s for s in students or () if _student_in_department(s, key)],
        'faculty': [f for f in faculty or () if _faculty_in_department(f, key)],
        'courses': [c for c in courses or () if _course_in_department(c, key)],
    }


def department_overview(departments: Iterable[Record], students: Sequence[Record], faculty: Sequence[Record],
                        courses: Sequence[Record]) -> List[dict]:
    rows = []
    for department in departments or ():
        key = norm(field(department, 'name'))
        rows.append({
            'id': department.get('id') if isinstance(department, dict) else getattr(department, 'id', None),
            'name': field(department, 'name'),
            'status': field(department, 'status') or 'Active',
            'students': sum(1 for s in students if _student_in_department(s, key)),
            'courses': sum(1 for c in courses if _course_in_department(c, key)),
            'faculty': sum(1 for f in faculty if _faculty_in_department(f, key)),
        })
    return rows


def academic_year_summary(students: Iterable[Record]) -> List[dict]:
    """Per stored academic-year value: enrolment and distinct course ids, newest first."""
    years: Dict[str, dict] = {}
    for s in students or ():
        year = field(s, 'academic_year') or 'Unknown'
        entry = years.setdefault(year, {'year': year, 'students': 0, 'courses': []})
        entry['students'] += 1
        course_id = field(s, 'course_id')
        if course_id and course_id not in entry['courses']:
            entry['courses'].append(course_id)
    return sorted(years.values(), key=lambda e: (-first_year(e['year']), e['year']))


def _average(total: int, counts: Iterable[int]) -> int:
    non_empty = sum(1 for c in counts if c > 0) or 1
    return int(round(total / non_empty))


def dashboard_summary(departments: Sequence[Record], students: Sequence[Record], faculty: Sequence[Record],
                      courses: Sequence[Record]) -> dict:
    overview = department_overview(departments, students, faculty, courses)
    return {
        'totals': {
            'students': len(students),
            'faculty': len(faculty),
            'active_courses': sum(1 for c in courses if norm(field(c, 'status')) == 'active'),
            'programs': len(departments),
        },
        'departments': overview,
        'students_per_department': _average(len(students), [r['students'] for r in overview]),
        'faculty_per_department': _average(len(faculty), [r['faculty'] for r in overview]),
        'faculty_by_bucket': count_faculty_by_bucket(faculty),
        'academic_years': academic_year_summary(students),
    }


SearchField = Union[str, Callable[[Record], Any]]

STUDENT_SEARCH_FIELDS: Tuple[SearchField, ...] = (
    full_name, 'id', 'email', 'department', 'program', 'academic_year',
)
FACULTY_SEARCH_FIELDS: Tuple[SearchField, ...] = (
    full_name, 'id', 'email', 'department',
    lambda f: field(f, 'assigned_program') or field(f, 'program'),
    'academic_year',
)


def search_records(records: Iterable[Record], term: str, fields: Sequence[SearchField]) -> List[Record]:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    needle = str(term or '').strip().lower()
    records = list(records or ())
    if not needle:
        return records
    matches = []
    for record in records:
        for f in fields:
            value = f(record) if callable(f) else field(record, f)
            if needle in str(value or '').lower():
                matches.append(record)
                break
    return matches
