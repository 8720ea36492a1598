"""
Performance settings for the Car Rental Back-Office.
Cache layout, cache lifetimes per data class, task routing and log formats.
"""

# Cache Configuration (Redis-based)
CACHE_PERFORMANCE = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': 'redis://localhost:6379/0',
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'CONNECTION_POOL_KWARGS': {
                'max_connections': 50,
                'retry_on_timeout': True,
            },
            'COMPRESSOR': 'django_redis.compressors.zlib.ZlibCompressor',
            'SERIALIZER': 'django_redis.serializers.json.JSONSerializer',
        },
        'KEY_PREFIX': 'car_rental',
        'TIMEOUT': 300,  # 5 minutes default
        'VERSION': 1,
    },
}

# Cache lifetimes (seconds) per class of data served by the API
CACHE_TTL = {
    'REFERENCE_DATA': 3600,  # brands, models, locations, currencies
    'DYNAMIC': 60,           # company stats, fleet lists
    'USER_DATA': 30,         # bookings, per-user lists
}

# Static Files Performance
STATICFILES_BACKEND = 'whitenoise.storage.CompressedManifestStaticFilesStorage'
WHITENOISE_USE_FINDERS = True

# Celery routing
CELERY_TASK_ROUTES = {
    'apps.core.tasks.report_fleet_attention': {'queue': 'fleet'},
}

# Pagination (DataTable contract)
PAGINATION_SETTINGS = {
    'DEFAULT_PAGE_SIZE': 20,
    'MAX_PAGE_SIZE': 100,
    'PAGE_SIZE_QUERY_PARAM': 'pageSize',
}

# Log formats shared by all environments
LOGGING_FORMATTERS = {
    'verbose': {
        'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
        'style': '{',
    },
    'simple': {
        'format': '{levelname} {message}',
        'style': '{',
    },
    'json': {
        '()': 'pythonjsonlogger.json.JsonFormatter',
        'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
    },
}
