"""
Error handlers for the car-rental back-office.
API paths get JSON bodies; other paths fall back to Django's default pages.
"""

import logging

from django.http import JsonResponse
from django.views import defaults
from django.views.csrf import csrf_failure as default_csrf_failure
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import requires_csrf_token

logger = logging.getLogger(__name__)


def _is_api(request):
    return request.path.startswith('/api/')


@never_cache
@requires_csrf_token
def handler404(request, exception=None):
    logger.warning(f"404 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    if _is_api(request):
        return JsonResponse({'error': 'Resource not found', 'details': {'path': request.path}}, status=404)
    return defaults.page_not_found(request, exception)


@never_cache
@requires_csrf_token
def handler500(request):
    logger.error(f"500 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    if _is_api(request):
        return JsonResponse({'error': 'Internal server error'}, status=500)
    return defaults.server_error(request)


@never_cache
@requires_csrf_token
def handler403(request, exception=None):
    logger.warning(f"403 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    if _is_api(request):
        return JsonResponse({'error': 'Forbidden'}, status=403)
    return defaults.permission_denied(request, exception)


def csrf_failure(request, reason=""):
    logger.warning(f"CSRF failure for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')} - Reason: {reason}")
    if _is_api(request):
        return JsonResponse({
            'error': 'CSRF verification failed',
            'details': {'reason': reason},
        }, status=403)
    return default_csrf_failure(request, reason=reason)
