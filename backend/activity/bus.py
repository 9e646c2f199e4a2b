"""Process-wide activity bus.

Domain changes (records created/updated/deleted, year folders archived or
restored) are published as typed events. Each event type has at most one
handler. The default handlers turn an event into a short description,
prepend it to the durable activity feed (newest first, capped) and raise a
toast on the notification center.
"""
import logging
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from .notifications import NotificationCenter, get_notification_center
from .store import StateStore, get_state_store

logger = logging.getLogger(__name__)

FEED_KEY = 'dashboard_activities'


class EventType(str, Enum):
    STUDENT_ADDED = 'studentAdded'
    STUDENT_UPDATED = 'studentUpdated'
    STUDENT_DELETED = 'studentDeleted'
    FACULTY_ADDED = 'facultyAdded'
    FACULTY_UPDATED = 'facultyUpdated'
    FACULTY_DELETED = 'facultyDeleted'
    COURSE_ADDED = 'courseAdded'
    COURSE_UPDATED = 'courseUpdated'
    COURSE_DELETED = 'courseDeleted'
    DEPARTMENT_ADDED = 'departmentAdded'
    DEPARTMENT_UPDATED = 'departmentUpdated'
    DEPARTMENT_DELETED = 'departmentDeleted'
    STUDENT_YEAR_ARCHIVED = 'studentYearArchived'
    STUDENT_YEAR_RESTORED = 'studentYearRestored'
    FACULTY_YEAR_ARCHIVED = 'facultyYearArchived'
    FACULTY_YEAR_RESTORED = 'facultyYearRestored'


@dataclass(frozen=True)
class Event:
    type: EventType
    payload: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[Event], Any]


class ActivityBus:
    def __init__(self, store: Optional[StateStore] = None, notifications: Optional[NotificationCenter] = None,
                 capacity: Optional[int] = None):
        # store/notifications resolve lazily so settings overrides take effect
        self._store = store
        self._notifications = notifications
        self.capacity = capacity or getattr(settings, 'ACTIVITY_FEED_CAPACITY', 20)
        self._handlers: Dict[EventType, Handler] = {}
        self._lock = threading.RLock()

    @property
    def store(self) -> StateStore:
        return self._store or get_state_store()

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications or get_notification_center()

    def subscribe(self, event_type, handler: Handler) -> None:
        event_type = EventType(event_type)
        with self._lock:
            if event_type in self._handlers:
                raise ValueError(f'A handler is already registered for {event_type.value}')
            self._handlers[event_type] = handler

    def unsubscribe(self, event_type) -> bool:
        with self._lock:
            return self._handlers.pop(EventType(event_type), None) is not None

    def is_subscribed(self, event_type) -> bool:
        return EventType(event_type) in self._handlers

    def publish(self, event_type, payload: Optional[Dict[str, Any]] = None) -> Any:
        event = Event(type=EventType(event_type), payload=dict(payload or {}))
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.debug('No handler for event %s', event.type.value)
            return None
        return handler(event)

    def feed(self) -> List[dict]:
        return list(self.store.get(FEED_KEY, []) or [])

    def record(self, activity_type: str, description: str, entity: Optional[dict] = None) -> dict:
        item = {
            'id': uuid.uuid4().hex,
            'type': activity_type,
            'description': description,
            'entity': entity,
            'timestamp': timezone.now().isoformat(),
        }
        with self._lock:
            previous = self.feed()
            self.store.set(FEED_KEY, [item] + previous[:self.capacity - 1])
        logger.info('activity type=%s description=%s', activity_type, description)
        return item

    def clear_feed(self) -> None:
        self.store.set(FEED_KEY, [])


def _full_name(payload: dict, first_fallback: str, last_fallback: str) -> str:
    first = payload.get('first_name') or first_fallback
    last = payload.get('last_name') or last_fallback
    return f'{first} {last}'.strip()


def _course_name(payload: dict) -> str:
    return payload.get('name') or payload.get('course_name') or 'Unknown Course'


def _program_name(payload: dict) -> str:
    return payload.get('name') or 'Unknown Program'


def _label(payload: dict) -> str:
    return payload.get('label') or 'Unknown'


# event -> (token, toast kind, description builder)
DEFAULT_HANDLERS = {
    EventType.STUDENT_ADDED: ('student_added', 'add', lambda p: f'New student enrolled: {_full_name(p, "", "")}'),
    EventType.STUDENT_UPDATED: ('student_updated', 'edit', lambda p: f'Student profile updated: {_full_name(p, "", "")}'),
    EventType.STUDENT_DELETED: ('student_deleted', 'delete', lambda p: f'Student removed: {_full_name(p, "Unknown", "Student")}'),
    EventType.FACULTY_ADDED: ('faculty_added', 'add', lambda p: f'New faculty member added: {_full_name(p, "", "")}'),
    EventType.FACULTY_UPDATED: ('faculty_updated', 'edit', lambda p: f'Faculty profile updated: {_full_name(p, "", "")}'),
    EventType.FACULTY_DELETED: ('faculty_deleted', 'delete', lambda p: f'Faculty member removed: {_full_name(p, "Unknown", "Faculty")}'),
    EventType.COURSE_ADDED: ('course_added', 'add', lambda p: f'New course created: {_course_name(p)}'),
    EventType.COURSE_UPDATED: ('course_updated', 'edit', lambda p: f'Course updated: {_course_name(p)}'),
    EventType.COURSE_DELETED: ('course_deleted', 'delete', lambda p: f'Course deleted: {_course_name(p)}'),
    EventType.DEPARTMENT_ADDED: ('department_added', 'add', lambda p: f'New program created: {_program_name(p)}'),
    EventType.DEPARTMENT_UPDATED: ('department_updated', 'edit', lambda p: f'Program updated: {_program_name(p)}'),
    EventType.DEPARTMENT_DELETED: ('department_deleted', 'delete', lambda p: f'Program deleted: {_program_name(p)}'),
    EventType.STUDENT_YEAR_ARCHIVED: ('event_studentYearArchived', 'info', lambda p: f'Students SY archived: {_label(p)}'),
    EventType.STUDENT_YEAR_RESTORED: ('event_studentYearRestored', 'info', lambda p: f'Students SY restored: {_label(p)}'),
    EventType.FACULTY_YEAR_ARCHIVED: ('event_facultyYearArchived', 'info', lambda p: f'Faculty SY archived: {_label(p)}'),
    EventType.FACULTY_YEAR_RESTORED: ('event_facultyYearRestored', 'info', lambda p: f'Faculty SY restored: {_label(p)}'),
}


def activity_type_for(token: str) -> str:
    """'student_added' -> 'student'; 'event_studentYearArchived' -> 'event'."""
    return str(token or '').split('_')[0] or 'system'


def make_recording_handler(bus: ActivityBus, token: str, kind: str, describe: Callable[[dict], str]) -> Handler:
    def handler(event: Event) -> Optional[dict]:
        try:
            description = describe(event.payload)
            item = bus.record(activity_type_for(token), description, event.payload or None)
            bus.notifications.notify(description, kind)
            return item
        except Exception:
            logger.exception('Activity handler failed for %s', event.type.value)
            return None

    return handler


def install_default_handlers(bus: ActivityBus) -> None:
    for event_type, (token, kind, describe) in DEFAULT_HANDLERS.items():
        if not bus.is_subscribed(event_type):
            bus.subscribe(event_type, make_recording_handler(bus, token, kind, describe))


_bus: Optional[ActivityBus] = None
_initialized = False
_init_lock = threading.Lock()


def init_activity_bus() -> ActivityBus:
    """Create the process-wide bus and its default handlers exactly once."""
    global _bus, _initialized
    with _init_lock:
        if _initialized and _bus is not None:
            return _bus
        _bus = ActivityBus()
        install_default_handlers(_bus)
        _initialized = True
        logger.debug('Activity bus initialised with %d handlers', len(DEFAULT_HANDLERS))
        return _bus


def get_activity_bus() -> ActivityBus:
    return init_activity_bus()


def publish(event_type, payload: Optional[Dict[str, Any]] = None) -> Any:
    return get_activity_bus().publish(event_type, payload)
