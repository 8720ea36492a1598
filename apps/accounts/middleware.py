import json

from django.core.cache import cache
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .signals import _client_ip, rate_limit_keys

RATE_LIMITED_PATHS = (
    ('/api/v1/auth/login', 'login', 'Too many failed login attempts. Please try again later.'),
    ('/api/v1/auth/register', 'register', 'Too many sign-up attempts. Please try again later.'),
)


class LoginRateLimitMiddleware(MiddlewareMixin):
    """
    Reject login attempts from a blocked (IP, username) pair, and sign-ups
    from a blocked IP, with 429.

    Attempts are counted by ``accounts.signals``; this only reads the block key.
    """

    def _username(self, request):
        if request.content_type == 'application/json':
            try:
                data = json.loads(request.body or b'{}')
            except ValueError:
                return ''
            if not isinstance(data, dict):
                return ''
        else:
            data = request.POST
        return str(data.get('email') or data.get('username') or '')

    def process_request(self, request):
        if request.method != 'POST':
            return None
        path = request.path or ''
        for prefix, kind, message in RATE_LIMITED_PATHS:
            if path.startswith(prefix):
                break
        else:
            return None

        username = self._username(request) if kind == 'login' else ''
        _, block_key = rate_limit_keys(_client_ip(request), username, kind)
        try:
            blocked = cache.get(block_key)
        except Exception:
            blocked = False

        if blocked:
            return JsonResponse(
                {'error': message},
                status=429,
            )
        return None
