"""Year folders for the students and faculty views.

A folder is a canonical academic-year label. The baseline years always
exist; administrators can add custom years, and can archive (hide) or
restore any folder. Archive, restore and delete each require the caller to
type the matching confirmation word.

Folder state lives in the configured state store under
``<scope>.custom_years`` and ``<scope>.archived_years``. Writers in separate
processes are not coordinated, so the last write wins.
"""
import logging
import threading
from typing import List, Optional

from django.core.exceptions import ValidationError

from activity.bus import ActivityBus, EventType, get_activity_bus
from activity.store import StateStore, get_state_store

from .year_labels import BASELINE_YEARS, contains_label, is_year_range, label_key, merge_labels, normalize_year_label

logger = logging.getLogger(__name__)

SCOPES = ('students', 'faculty')

CONFIRM_ARCHIVE = 'Archive'
CONFIRM_RESTORE = 'Restore'
CONFIRM_DELETE = 'Delete'

FOLDER_EVENTS = {
    ('students', 'archive'): EventType.STUDENT_YEAR_ARCHIVED,
    ('students', 'restore'): EventType.STUDENT_YEAR_RESTORED,
    ('faculty', 'archive'): EventType.FACULTY_YEAR_ARCHIVED,
    ('faculty', 'restore'): EventType.FACULTY_YEAR_RESTORED,
}

_write_lock = threading.Lock()


def _error(field: str, message: str, code: str) -> ValidationError:
    return ValidationError({field: ValidationError(message, code=code)})


class YearFolders:
    def __init__(self, scope: str, store: Optional[StateStore] = None, bus: Optional[ActivityBus] = None):
        if scope not in SCOPES:
            raise _error('scope', f'Unknown folder scope "{scope}".', 'not_found')
        self.scope = scope
        self._store = store
        self._bus = bus

    @property
    def store(self) -> StateStore:
        return self._store or get_state_store()

    @property
    def bus(self) -> ActivityBus:
        return self._bus or get_activity_bus()

    @property
    def custom_key(self) -> str:
        return f'{self.scope}.custom_years'

    @property
    def archived_key(self) -> str:
        return f'{self.scope}.archived_years'

    def custom_years(self) -> List[str]:
        return list(self.store.get(self.custom_key, []) or [])

    def archived_years(self) -> List[str]:
        return list(self.store.get(self.archived_key, []) or [])

    def all_folders(self) -> List[str]:
        return merge_labels(BASELINE_YEARS, self.custom_years())

    def known_years(self) -> List[str]:
        """Labels records may be grouped under, archived ones included."""
        return self.all_folders()

    def visible_folders(self) -> List[str]:
        archived = self.archived_years()
        return [label for label in self.all_folders() if not contains_label(archived, label)]

    def state(self) -> dict:
        return {
            'scope': self.scope,
            'baseline': list(BASELINE_YEARS),
            'custom': self.custom_years(),
            'archived': self.archived_years(),
            'all': self.all_folders(),
            'visible': self.visible_folders(),
        }

    def _resolve(self, label: str) -> str:
        key = label_key(normalize_year_label(label) or label)
        for existing in self.all_folders():
            if label_key(existing) == key:
                return existing
        raise _error('label', f'School Year folder "{label}" does not exist.', 'not_found')

    @staticmethod
    def _confirm(confirmation: Optional[str], expected: str) -> None:
        if confirmation != expected:
            raise _error('confirmation', f'Type "{expected}" to confirm.', 'confirmation')

    def _publish(self, action: str, label: str) -> None:
        self.bus.publish(FOLDER_EVENTS[(self.scope, action)], {'label': label, 'scope': self.scope})

    def add_custom_year(self, value: str) -> str:
        text = str(value or '').strip()
        if not is_year_range(text):
            raise _error('label', 'Please enter a valid format (e.g. 2025-2026).', 'invalid')
        label = f'SY {text}'
        with _write_lock:
            if contains_label(self.all_folders(), label):
                raise _error('label', 'This School Year folder already exists.', 'duplicate')
            self.store.set(self.custom_key, self.custom_years() + [label])
        logger.info('Added %s year folder %s', self.scope, label)
        return label

    def archive(self, label: str, confirmation: Optional[str]) -> str:
        self._confirm(confirmation, CONFIRM_ARCHIVE)
        label = self._resolve(label)
        with _write_lock:
            archived = self.archived_years()
            if contains_label(archived, label):
                return label
            self.store.set(self.archived_key, archived + [label])
        logger.info('Archived %s year folder %s', self.scope, label)
        self._publish('archive', label)
        return label

    def restore(self, label: str, confirmation: Optional[str]) -> str:
        self._confirm(confirmation, CONFIRM_RESTORE)
        label = self._resolve(label)
        with _write_lock:
            archived = self.archived_years()
            remaining = [y for y in archived if label_key(y) != label_key(label)]
            if len(remaining) == len(archived):
                return label
            self.store.set(self.archived_key, remaining)
        logger.info('Restored %s year folder %s', self.scope, label)
        self._publish('restore', label)
        return label

    def delete_year(self, label: str, confirmation: Optional[str]) -> str:
        """Remove a custom folder; baseline years cannot be deleted."""
        self._confirm(confirmation, CONFIRM_DELETE)
        label = self._resolve(label)
        if contains_label(BASELINE_YEARS, label):
            raise _error('label', f'{label} is a baseline school year and cannot be deleted.', 'immutable')
        key = label_key(label)
        with _write_lock:
            self.store.set(self.custom_key, [y for y in self.custom_years() if label_key(y) != key])
            self.store.set(self.archived_key, [y for y in self.archived_years() if label_key(y) != key])
        logger.info('Deleted %s year folder %s', self.scope, label)
        return label
