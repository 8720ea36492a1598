"""
Uniform JSON errors for the API: ``{"error": message, "details": ...}``.
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import set_rollback

from apps.core.exceptions import ConflictError

logger = logging.getLogger(__name__)


def _first_message(details):
    if isinstance(details, dict):
        for value in details.values():
            return _first_message(value)
        return ''
    if isinstance(details, (list, tuple)):
        return _first_message(details[0]) if details else ''
    return str(details)


def _django_validation_details(exc: DjangoValidationError):
    if hasattr(exc, 'error_dict'):
        details = exc.message_dict
        non_field = details.pop('__all__', None)
        if non_field and not details:
            return non_field[0], None
        return _first_message(non_field or details), details
    messages = exc.messages
    return (messages[0] if messages else 'Invalid request'), None


def _response(message, code, details=None, headers=None):
    body = {'error': message}
    if details:
        body['details'] = details
    set_rollback()
    return Response(body, status=code, headers=headers)


def api_exception_handler(exc, context):
    """DRF exception handler that also maps domain exceptions to HTTP codes."""
    if isinstance(exc, DjangoValidationError):
        message, details = _django_validation_details(exc)
        return _response(message, status.HTTP_400_BAD_REQUEST, details)

    if isinstance(exc, ConflictError):
        return _response(exc.message, status.HTTP_409_CONFLICT)

    if isinstance(exc, Http404):
        message = str(exc) or 'Not found'
        if message.startswith('No ') and 'matches the given query' in message:
            message = 'Not found'
        return _response(message, status.HTTP_404_NOT_FOUND)

    if isinstance(exc, DjangoPermissionDenied):
        return _response(str(exc) or 'Forbidden', status.HTTP_403_FORBIDDEN)

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return _response('Unauthorized', status.HTTP_401_UNAUTHORIZED)

    if isinstance(exc, exceptions.ValidationError):
        details = exc.detail
        return _response(_first_message(details) or 'Invalid request', status.HTTP_400_BAD_REQUEST,
                         details if isinstance(details, dict) else None)

    if isinstance(exc, exceptions.APIException):
        headers = {}
        if getattr(exc, 'wait', None):
            headers['Retry-After'] = '%d' % exc.wait
        return _response(_first_message(exc.detail), exc.status_code, headers=headers)

    view = context.get('view')
    logger.error(f"Unhandled API error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
                 exc_info=exc)
    return _response('Internal server error', status.HTTP_500_INTERNAL_SERVER_ERROR)
