"""
Development settings for the Car Rental Back-Office.
"""

import sys

from .base import *

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env('DEBUG', default=True)

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['localhost', '127.0.0.1'])

# Optional: allow SQLite locally to simplify onboarding
USE_SQLITE = env.bool('USE_SQLITE', default=False)
if USE_SQLITE:
    DATABASES['default'] = {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }

# Debug toolbar stays out of test runs
if "test" not in sys.argv:
    INSTALLED_APPS += [
        'debug_toolbar',
    ]
    MIDDLEWARE = MIDDLEWARE + [
        'debug_toolbar.middleware.DebugToolbarMiddleware',
    ]

INTERNAL_IPS = [
    '127.0.0.1',
]


# Show toolbar only for superusers
def show_toolbar(request):
    user = getattr(request, 'user', None)
    return bool(user and user.is_authenticated and user.is_superuser)


DEBUG_TOOLBAR_CONFIG = {
    'SHOW_TOOLBAR_CALLBACK': 'config.settings.development.show_toolbar',
}

# Disable HTTPS-only cookies in development
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# Use in-memory cache in development so features depending on cache (e.g.,
# login rate limiting) work without a running Redis instance.
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'car_rental_dev_local_cache',
        'TIMEOUT': 300,
        'KEY_PREFIX': 'car_rental_dev',
    },
}

# Email backend for development (console output)
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

SECURE_SSL_REDIRECT = False
SECURE_HSTS_SECONDS = 0
SECURE_HSTS_INCLUDE_SUBDOMAINS = False
SECURE_HSTS_PRELOAD = False

# CORS settings for development (allow the local front-end)
CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
CORS_ALLOW_CREDENTIALS = True
