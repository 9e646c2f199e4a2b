import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger('django.request')
write_logger = logging.getLogger('registrar.requests')


def _actor(request: HttpRequest) -> str:
    user = getattr(request, 'user', None)
    if user is not None and getattr(user, 'is_authenticated', False):
        return getattr(user, 'username', '') or str(user.pk)
    return 'anonymous'


class RequestTimingMiddleware:
    """Log API requests that cross the slow-request threshold.

    JWT users are resolved by DRF inside the view, so `request.user` here is
    only populated for session logins; token callers show as anonymous.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        if not getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True):
            return self.get_response(request)

        threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))
        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        if elapsed_ms >= threshold_ms:
            logger.warning(
                'SLOW_REQUEST method=%s path=%s status=%s duration_ms=%.2f user=%s',
                request.method,
                request.path,
                getattr(response, 'status_code', 'NA'),
                elapsed_ms,
                _actor(request),
            )
        elif request.method not in ('GET', 'HEAD', 'OPTIONS') and request.path.startswith('/api/'):
            write_logger.info(
                'API_WRITE method=%s path=%s status=%s duration_ms=%.2f',
                request.method,
                request.path,
                getattr(response, 'status_code', 'NA'),
                elapsed_ms,
            )
        return response
