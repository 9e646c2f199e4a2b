"""Transient, auto-dismissing notifications ("toasts").

Each toast has a deadline. Hovering a toast pauses its timer; leaving it
resumes the timer with whatever time was left, not the full duration. The
center is driven by an injectable millisecond clock so callers (and tests)
decide what "now" is.
"""
import itertools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from django.conf import settings

logger = logging.getLogger(__name__)

KIND_STYLES = {
    'add': {'color': '#10b981', 'icon': '✓'},
    'edit': {'color': '#f59e0b', 'icon': '✎'},
    'delete': {'color': '#ef4444', 'icon': '✖'},
    'info': {'color': '#3b82f6', 'icon': 'ℹ'},
}

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class Toast:
    id: int
    message: str
    kind: str
    icon: str
    color: str
    duration_ms: int
    created_at: float
    deadline: Optional[float] = None
    remaining_ms: float = 0.0
    hovered: bool = False
    dismissed: bool = False

    def remaining(self, now: float) -> float:
        if self.hovered or self.deadline is None:
            return self.remaining_ms
        return max(0.0, self.deadline - now)

    def is_expired(self, now: float) -> bool:
        return not self.hovered and self.deadline is not None and now >= self.deadline

    def as_dict(self, now: float) -> dict:
        return {
            'id': self.id,
            'message': self.message,
            'kind': self.kind,
            'icon': self.icon,
            'color': self.color,
            'duration_ms': self.duration_ms,
            'remaining_ms': int(round(self.remaining(now))),
            'hovered': self.hovered,
        }


class NotificationCenter:
    def __init__(self, clock: Optional[Clock] = None, max_toasts: Optional[int] = None,
                 default_duration_ms: Optional[int] = None):
        self.clock = clock or monotonic_ms
        self.max_toasts = max_toasts or getattr(settings, 'NOTIFICATION_MAX_TOASTS', 5)
        self.default_duration_ms = default_duration_ms or getattr(settings, 'NOTIFICATION_DEFAULT_DURATION_MS', 3000)
        self._toasts: Dict[int, Toast] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def notify(self, message: str, kind: str = 'info', duration_ms: Optional[int] = None,
               icon: Optional[str] = None) -> Toast:
        if kind not in KIND_STYLES:
            logger.debug('Unknown notification kind %r, falling back to info', kind)
            kind = 'info'
        duration = int(self.default_duration_ms if duration_ms is None else duration_ms)
        style = KIND_STYLES[kind]
        now = self.clock()
        with self._lock:
            self._sweep(now)
            toast = Toast(
                id=next(self._ids),
                message=str(message),
                kind=kind,
                icon=icon or style['icon'],
                color=style['color'],
                duration_ms=duration,
                created_at=now,
                deadline=now + duration,
                remaining_ms=float(duration),
            )
            self._toasts[toast.id] = toast
            self._enforce_stack_limit()
        logger.info('notification kind=%s message=%s', kind, toast.message)
        return toast

    def add(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, 'add', duration_ms)

    def edit(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, 'edit', duration_ms)

    def delete(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, 'delete', duration_ms)

    def info(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, 'info', duration_ms)

    def pointer_enter(self, toast_id: int) -> Optional[Toast]:
        """Pause the dismissal timer, remembering the time left."""
        now = self.clock()
        with self._lock:
            self._sweep(now)
            toast = self._toasts.get(toast_id)
            if toast is None or toast.hovered:
                return toast
            toast.remaining_ms = max(0.0, toast.deadline - now)
            toast.deadline = None
            toast.hovered = True
            return toast

    def pointer_leave(self, toast_id: int) -> Optional[Toast]:
        """Resume the timer with the remaining time recorded on enter."""
        now = self.clock()
        with self._lock:
            toast = self._toasts.get(toast_id)
            if toast is None or not toast.hovered:
                return toast
            toast.hovered = False
            toast.deadline = now + toast.remaining_ms
            return toast

    def dismiss(self, toast_id: int) -> bool:
        with self._lock:
            toast = self._toasts.pop(toast_id, None)
        if toast is None:
            return False
        toast.dismissed = True
        return True

    def clear_all(self) -> None:
        with self._lock:
            for toast in self._toasts.values():
                toast.dismissed = True
            self._toasts.clear()

    def get(self, toast_id: int) -> Optional[Toast]:
        with self._lock:
            self._sweep(self.clock())
            return self._toasts.get(toast_id)

    def active(self) -> List[Toast]:
        """Toasts still on screen, oldest first."""
        with self._lock:
            self._sweep(self.clock())
            return list(self._toasts.values())

    def snapshot(self) -> List[dict]:
        now = self.clock()
        return [t.as_dict(now) for t in self.active()]

    def _sweep(self, now: float) -> None:
        for toast_id in [t.id for t in self._toasts.values() if t.is_expired(now)]:
            self._toasts.pop(toast_id).dismissed = True

    def _enforce_stack_limit(self) -> None:
        excess = len(self._toasts) - self.max_toasts
        if excess <= 0:
            return
        for toast_id in list(self._toasts)[:excess]:
            self._toasts.pop(toast_id).dismissed = True


_center: Optional[NotificationCenter] = None


def get_notification_center() -> NotificationCenter:
    global _center
    if _center is None:
        _center = NotificationCenter()
    return _center
