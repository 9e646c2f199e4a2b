import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _not_found_message(exc):
    """Message of a service error whose every entry has code ``not_found``, else None."""
    errors = exc.error_dict.values() if hasattr(exc, 'error_dict') else [exc.error_list]
    entries = [e for group in errors for e in group]
    if entries and all(e.code == 'not_found' for e in entries):
        return entries[0].messages[0]
    return None


def api_exception_handler(exc, context):
    """Shape every API error the same way.

    - validation failures -> 422 ``{message, errors}`` with field messages verbatim
    - missing objects -> 404 ``{message}`` (views may set ``not_found_message``);
      service errors coded ``not_found`` keep their own message
    - anything DRF does not know -> logged, 500 ``{message}`` without detail

    Views that answer with a ``success`` flag set ``response_envelope = True``.
    """
    view = context.get('view')
    envelope = bool(getattr(view, 'response_envelope', False))
    missing = None

    if isinstance(exc, DjangoValidationError):
        missing = _not_found_message(exc)
        if missing is not None:
            exc = NotFound(missing)
        else:
            exc = ValidationError(detail=as_serializer_error(exc))

    response = exception_handler(exc, context)

    if response is None:
        logger.exception('Unhandled API error in %s', view.__class__.__name__ if view else 'unknown view')
        data = {'message': getattr(view, 'failure_message', 'Something went wrong. Please try again.')}
        if envelope:
            data['success'] = False
        return Response(data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        errors = response.data
        if not isinstance(errors, dict):
            errors = {'non_field_errors': errors}
        data = {'message': 'Validation failed', 'errors': errors}
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif missing is not None:
        data = {'message': missing}
    elif isinstance(exc, (Http404, NotFound)):
        data = {'message': getattr(view, 'not_found_message', None) or 'Not found.'}
    else:
        detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
        data = {'message': str(detail)}

    if envelope:
        data['success'] = False
    response.data = data
    return response
