"""
Health checks and metrics for the Car Rental Back-Office.
"""

import logging
import time

import psutil
from django.conf import settings
from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from django.views import View

logger = logging.getLogger(__name__)


def _system_check():
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')
    cpu_percent = psutil.cpu_percent(interval=0.1)
    disk_percent = (disk.used / disk.total) * 100

    check = {
        'status': 'healthy',
        'memory_usage_percent': memory.percent,
        'disk_usage_percent': round(disk_percent, 2),
        'cpu_usage_percent': cpu_percent,
        'load_average': psutil.getloadavg()[0] if hasattr(psutil, 'getloadavg') else None,
    }
    # Resources critically low
    if memory.percent > 90 or disk_percent > 90 or cpu_percent > 90:
        check['status'] = 'warning'
    return check


class HealthCheckView(View):
    """
    Database, cache, system and application health in one document.
    """

    def get(self, request):
        start_time = time.time()

        health_data = {
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'version': getattr(settings, 'VERSION', '1.0.0'),
            'checks': {}
        }

        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            health_data['checks']['database'] = {
                'status': 'healthy',
                'response_time_ms': round((time.time() - start_time) * 1000, 2)
            }
        except Exception as e:
            logger.error(f"Health check: database unavailable: {e}")
            health_data['checks']['database'] = {'status': 'unhealthy', 'error': str(e)}
            health_data['status'] = 'unhealthy'

        try:
            cache_start = time.time()
            cache.set('health_check', 'ok', 10)
            if cache.get('health_check') != 'ok':
                raise RuntimeError("Cache round trip failed")
            health_data['checks']['cache'] = {
                'status': 'healthy',
                'response_time_ms': round((time.time() - cache_start) * 1000, 2)
            }
        except Exception as e:
            logger.error(f"Health check: cache unavailable: {e}")
            health_data['checks']['cache'] = {'status': 'unhealthy', 'error': str(e)}
            health_data['status'] = 'unhealthy'

        try:
            health_data['checks']['system'] = _system_check()
        except Exception as e:
            health_data['checks']['system'] = {'status': 'unhealthy', 'error': str(e)}

        try:
            from apps.companies.models import Company
            from apps.core.models import CompanyCar, Contract

            health_data['checks']['application'] = {
                'status': 'healthy',
                'active_companies': Company.objects.filter(is_active=True, deleted_at__isnull=True).count(),
                'cars': CompanyCar.objects.filter(deleted_at__isnull=True).count(),
                'active_contracts': Contract.objects.filter(status=Contract.STATUS_ACTIVE).count(),
            }
        except Exception as e:
            health_data['checks']['application'] = {'status': 'unhealthy', 'error': str(e)}
            health_data['status'] = 'unhealthy'

        health_data['response_time_ms'] = round((time.time() - start_time) * 1000, 2)
        status_code = 200 if health_data['status'] == 'healthy' else 503
        return JsonResponse(health_data, status=status_code)


class MetricsView(View):
    """
    Business and system gauges in Prometheus text format, wrapped in JSON.
    """

    def get(self, request):
        try:
            from apps.companies.models import Company
            from apps.core.models import CompanyCar, Contract

            cars = CompanyCar.objects.filter(deleted_at__isnull=True)
            metrics = [
                f'car_rental_active_companies {Company.objects.filter(is_active=True, deleted_at__isnull=True).count()}',
                f'car_rental_cars_total {cars.count()}',
                f'car_rental_cars_rented {cars.filter(status=CompanyCar.STATUS_RENTED).count()}',
                f'car_rental_active_contracts {Contract.objects.filter(status=Contract.STATUS_ACTIVE).count()}',
            ]

            memory = psutil.virtual_memory()
            disk = psutil.disk_usage('/')
            metrics.extend([
                f'system_memory_usage_percent {memory.percent}',
                f'system_disk_usage_percent {(disk.used / disk.total) * 100:.2f}',
                f'system_cpu_usage_percent {psutil.cpu_percent()}',
            ])

            return JsonResponse({
                'metrics': '\n'.join(metrics) + '\n',
                'timestamp': timezone.now().isoformat()
            })
        except Exception as e:
            logger.error(f"Error generating metrics: {e}")
            return JsonResponse({'error': 'Failed to generate metrics'}, status=500)


class ReadinessView(View):
    """Ready when the database and the cache answer."""

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")

            cache.set('readiness_check', 'ok', 5)
            if cache.get('readiness_check') != 'ok':
                raise RuntimeError("Cache not ready")

            return JsonResponse({'status': 'ready', 'timestamp': timezone.now().isoformat()})
        except Exception as e:
            return JsonResponse({
                'status': 'not_ready',
                'error': str(e),
                'timestamp': timezone.now().isoformat()
            }, status=503)


class LivenessView(View):
    def get(self, request):
        return JsonResponse({'status': 'alive', 'timestamp': timezone.now().isoformat()})
