"""
Production settings for the Car Rental Back-Office.
"""

from .base import *

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = False

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS')

# Security settings for production
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

# CORS settings for production
CORS_ALLOWED_ORIGINS = env.list('CORS_ALLOWED_ORIGINS', default=[])
CORS_ALLOW_CREDENTIALS = True

CSRF_TRUSTED_ORIGINS = env.list('CSRF_TRUSTED_ORIGINS', default=[])

# Email configuration for production
EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
EMAIL_HOST = env('EMAIL_HOST', default='smtp.gmail.com')
EMAIL_PORT = env.int('EMAIL_PORT', default=587)
EMAIL_USE_TLS = env.bool('EMAIL_USE_TLS', default=True)
EMAIL_HOST_USER = env('EMAIL_HOST_USER', default='')
EMAIL_HOST_PASSWORD = env('EMAIL_HOST_PASSWORD', default='')
DEFAULT_FROM_EMAIL = env('DEFAULT_FROM_EMAIL', default='noreply@car-rental.local')

LOGGING['handlers']['file']['filename'] = env('LOG_FILE', default='/var/log/car_rental/app.log')
LOGGING['handlers']['error_file']['filename'] = env('ERROR_LOG_FILE', default='/var/log/car_rental/error.log')

# Provide Redis URLs via environment variables (fallback to REDIS_URL)
_CACHE_DEFAULT_URL = env('CACHE_DEFAULT_URL', default=REDIS_URL)

CACHES = {
    'default': {
        **CACHE_PERFORMANCE['default'],
        'LOCATION': _CACHE_DEFAULT_URL,
    },
}
