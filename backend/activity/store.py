"""Key/value state that lives outside the relational schema.

Year-folder state (custom and archived labels) and the activity feed are
kept here rather than in tables. Every backend offers the same small
interface (``get`` / ``set`` / ``delete`` / ``subscribe``) so the
persistence can be swapped without touching the callers.

Writers are not coordinated across processes: two workers writing the same
key race and the last write wins. That is acceptable for a single-admin
deployment and is not papered over here.
"""
import json
import logging
import os
import tempfile
import threading
from copy import deepcopy
from typing import Any, Callable, Dict, List, Optional

from django.conf import settings
from django.core.cache import caches
from django.core.serializers.json import DjangoJSONEncoder
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, Any], None]


def _json_safe(value: Any) -> Any:
    # dates, decimals and UUIDs become plain JSON values
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


class StateStore:
    """Base class; subclasses implement ``_read``, ``_write`` and ``_remove``."""

    def __init__(self, **options):
        self._subscribers: Dict[str, List[Subscriber]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        value = self._read(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        value = _json_safe(value)
        self._write(key, value)
        logger.debug('state store write key=%s', key)
        self._notify(key, value)

    def delete(self, key: str) -> None:
        self._remove(key)
        self._notify(key, None)

    def subscribe(self, key: str, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(key, value)`` after every write to ``key``.

        Returns a function that removes the subscription again.
        """
        self._subscribers.setdefault(key, []).append(callback)

        def unsubscribe():
            callbacks = self._subscribers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def _notify(self, key: str, value: Any) -> None:
        for callback in list(self._subscribers.get(key, [])):
            try:
                callback(key, deepcopy(value))
            except Exception:
                logger.exception('State store subscriber failed for key %s', key)

    def _read(self, key: str) -> Any:
        raise NotImplementedError

    def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def _remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStateStore(StateStore):
    """Process-local store; used by tests and throwaway deployments."""

    def __init__(self, **options):
        super().__init__(**options)
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _read(self, key):
        with self._lock:
            return deepcopy(self._data.get(key))

    def _write(self, key, value):
        with self._lock:
            self._data[key] = deepcopy(value)

    def _remove(self, key):
        with self._lock:
            self._data.pop(key, None)


class JsonFileStateStore(StateStore):
    """All keys in one JSON document on disk, replaced atomically on write."""

    def __init__(self, path: Optional[str] = None, **options):
        super().__init__(**options)
        if not path:
            raise ValueError('JsonFileStateStore requires a path')
        self.path = str(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, encoding='utf-8') as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning('State file %s is unreadable; starting from empty state', self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path) or '.'
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix='.state-', suffix='.json', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _read(self, key):
        with self._lock:
            return self._load().get(key)

    def _write(self, key, value):
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def _remove(self, key):
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)


class CacheStateStore(StateStore):
    """Keeps state in a Django cache alias (no expiry)."""

    def __init__(self, alias: str = 'default', prefix: str = 'registrar-state:', **options):
        super().__init__(**options)
        self.alias = alias
        self.prefix = prefix

    @property
    def cache(self):
        return caches[self.alias]

    def _read(self, key):
        return self.cache.get(self.prefix + key)

    def _write(self, key, value):
        self.cache.set(self.prefix + key, value, timeout=None)

    def _remove(self, key):
        self.cache.delete(self.prefix + key)


_store: Optional[StateStore] = None
_store_lock = threading.Lock()


def get_state_store() -> StateStore:
    """Return the process-wide store configured by ``settings.STATE_STORE``."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                conf = getattr(settings, 'STATE_STORE', None) or {}
                backend = import_string(conf.get('BACKEND', 'activity.store.MemoryStateStore'))
                _store = backend(**(conf.get('OPTIONS') or {}))
                logger.info('State store initialised: %s', backend.__name__)
    return _store


def reset_state_store() -> None:
    global _store
    with _store_lock:
        _store = None


@receiver(setting_changed)
def _reset_on_settings_change(sender, setting, **kwargs):
    if setting == 'STATE_STORE':
        reset_state_store()
