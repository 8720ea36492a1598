from django.http import HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .models import PlatformConfig

MAINTENANCE_MESSAGE = 'The platform is currently under maintenance. Please try again later.'


class MaintenanceModeMiddleware(MiddlewareMixin):
    """
    While maintenance mode is on, answer non-admin requests with 503.

    Admins, authentication, health checks, static files and the Django admin
    stay reachable.
    """

    ALLOW_PATH_PREFIXES = (
        '/static/',
        '/health',
        '/admin/',
        '/api/v1/auth/',
        '/__debug__/',
    )

    def process_request(self, request):
        path = request.path or ''
        if any(path.startswith(p) for p in self.ALLOW_PATH_PREFIXES):
            return None

        cfg = PlatformConfig.get_solo()
        if not cfg.maintenance_mode:
            return None

        user = getattr(request, 'user', None)
        if user and user.is_authenticated and getattr(user, 'role', None) == 'admin':
            return None

        if path.startswith('/api/'):
            return JsonResponse({'error': MAINTENANCE_MESSAGE}, status=503)
        return HttpResponse(
            '<!doctype html><html><head><title>Maintenance</title><meta charset="utf-8"></head>'
            f'<body><h1>We\'ll be back soon</h1><p>{MAINTENANCE_MESSAGE}</p></body></html>',
            status=503,
            content_type='text/html',
        )
