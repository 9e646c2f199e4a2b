"""Academic-year label handling.

Labels were entered by hand over several years, so ``SY 2024-2025``,
``2024-2025``, ``sy2024-2025`` and a bare ``2024`` all occur and all mean the
same school year. Everything is compared in the canonical ``SY YYYY-YYYY``
form.
"""
import re
from typing import Iterable, List

BASELINE_YEARS = (
    'SY 2020-2021',
    'SY 2021-2022',
    'SY 2022-2023',
    'SY 2023-2024',
    'SY 2024-2025',
)

_SY_PREFIX = re.compile(r'^sy\s*', re.IGNORECASE)
_YEAR_RANGE = re.compile(r'^[0-9]{4}-[0-9]{4}$')
_SINGLE_YEAR = re.compile(r'^[0-9]{4}$')


def normalize_year_label(raw) -> str:
    """Return the canonical label for ``raw`` or ``''`` when unrecognised.

    >>> normalize_year_label('2024')
    'SY 2024-2025'
    >>> normalize_year_label('sy 2021-2022')
    'SY 2021-2022'
    """
    text = str(raw or '').strip()
    text = _SY_PREFIX.sub('', text).strip()
    if _YEAR_RANGE.match(text):
        return f'SY {text}'
    if _SINGLE_YEAR.match(text):
        start = int(text)
        if start + 1 > 9999:
            return ''
        return f'SY {start:04d}-{start + 1:04d}'
    return ''


def is_year_range(value) -> bool:
    """``YYYY-YYYY`` exactly, as typed into the "add school year" form."""
    return bool(_YEAR_RANGE.match(str(value or '').strip()))


def label_key(label) -> str:
    return str(label or '').strip().lower()


def contains_label(labels: Iterable[str], label: str) -> bool:
    key = label_key(label)
    return any(label_key(existing) == key for existing in labels)


def merge_labels(*groups: Iterable[str]) -> List[str]:
    """Concatenate label lists, dropping case-insensitive repeats."""
    merged: List[str] = []
    for group in groups:
        for label in group or ():
            if label and not contains_label(merged, label):
                merged.append(label)
    return merged


def first_year(label) -> int:
    """Start year of a label, used for newest-first sorting; 0 if none."""
    match = re.search(r'[0-9]{4}', str(label or ''))
    return int(match.group(0)) if match else 0
