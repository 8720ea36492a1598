import logging

from django.conf import settings
from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.core.cache import cache
from django.dispatch import receiver
from django.utils import timezone

from apps.audit.models import AuditLog
from apps.audit.services import get_client_ip, log_audit_action

logger = logging.getLogger(__name__)

ATTEMPTS = getattr(settings, 'LOGIN_RATE_LIMIT_ATTEMPTS', 5)
WINDOW = getattr(settings, 'LOGIN_RATE_LIMIT_WINDOW_SECONDS', 300)
BLOCK = getattr(settings, 'LOGIN_RATE_LIMIT_BLOCK_SECONDS', 900)
REGISTER_ATTEMPTS = getattr(settings, 'REGISTER_RATE_LIMIT_ATTEMPTS', 5)


def rate_limit_keys(ip, username, kind='login'):
    """Cache keys counting attempts and blocking one (IP, username) pair."""
    username = (username or '').strip().lower()
    if username:
        return f"{kind}_fail:{ip}:{username}", f"{kind}_block:{ip}:{username}"
    return f"{kind}_fail:{ip}", f"{kind}_block:{ip}"


def _client_ip(request):
    if not request:
        return '0.0.0.0'
    return get_client_ip(request) or '0.0.0.0'


def _count_attempt(fail_key, block_key, limit):
    """Bump the counter; returns the new count, or 0 when the cache is down."""
    try:
        count = cache.get(fail_key, 0) + 1
        cache.set(fail_key, count, timeout=WINDOW)
        if count >= limit:
            cache.set(block_key, 1, timeout=BLOCK)
        return count
    except Exception as e:
        logger.error(f"Login rate limit cache unavailable: {e}")
        return 0


def note_registration_attempt(request):
    """Count a sign-up from this IP; the middleware blocks the IP past the limit."""
    count = _count_attempt(*rate_limit_keys(_client_ip(request), '', 'register'), REGISTER_ATTEMPTS)
    if count >= REGISTER_ATTEMPTS:
        logger.warning(f"Sign-up blocked for {_client_ip(request)} after {count} attempts")


@receiver(user_login_failed)
def on_user_login_failed(sender, credentials, request=None, **kwargs):
    username = (credentials or {}).get('username', '')
    fail_key, block_key = rate_limit_keys(_client_ip(request), username)

    count = _count_attempt(fail_key, block_key, ATTEMPTS)
    if count >= ATTEMPTS:
        logger.warning(f"Login blocked for {username or 'anonymous'} after {count} failed attempts")

    log_audit_action(request, 'auth', username or '-', AuditLog.ACTION_LOGIN_FAILED,
                     after_state={'username': username})


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    user.last_login_at = timezone.now()
    user.save(update_fields=['last_login_at'])

    ip = _client_ip(request)
    try:
        for name in {user.username, user.email}:
            cache.delete_many(rate_limit_keys(ip, name))
    except Exception as e:
        logger.error(f"Login rate limit cache unavailable: {e}")

    log_audit_action(request, 'auth', user.pk, AuditLog.ACTION_LOGIN, user=user)


@receiver(user_logged_out)
def on_user_logged_out(sender, request, user, **kwargs):
    if user is None:
        return
    log_audit_action(request, 'auth', user.pk, AuditLog.ACTION_LOGOUT, user=user)
