"""
EXIM Desk Monitoring & Health Check Endpoints
==============================================

Provides:
1. /health/ - Basic liveness check (for load balancers/Docker)
2. /health/ready/ - Readiness check (job database, cache, loaded years)
"""

import time
import logging
from django.http import JsonResponse
from django.db import connection
from django.core.cache import cache
from django.views.decorators.http import require_GET
from django.views.decorators.csrf import csrf_exempt
from django.utils import timezone

logger = logging.getLogger('exim.monitoring')

SERVICE_NAME = 'exim-desk'


def _check_database():
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return {'vendor': connection.vendor}


def _check_cache():
    cache.set('_healthcheck_ping', 'pong', 10)
    if cache.get('_healthcheck_ping') != 'pong':
        raise RuntimeError("Cache read/write mismatch")
    return {}


def _check_jobs():
    from jobs.models import Job
    return {'years': list(Job.objects.order_by('-year').values_list('year', flat=True).distinct())}


READINESS_CHECKS = (
    ('database', _check_database),
    ('cache', _check_cache),
    ('jobs', _check_jobs),
)


def _run_check(name, check):
    started = time.monotonic()
    try:
        details = check()
    except Exception as e:
        logger.error(f"Health check - {name} unhealthy: {e}")
        return {'status': 'unhealthy', 'error': str(e)}
    return {
        'status': 'healthy',
        'response_time_ms': round((time.monotonic() - started) * 1000, 2),
        **details,
    }


@csrf_exempt
@require_GET
def health_check(request):
    """
    Basic liveness probe.
    Returns 200 if the Django process is alive.
    """
    return JsonResponse({
        'status': 'ok',
        'service': SERVICE_NAME,
        'timestamp': timezone.now().isoformat(),
    })


@csrf_exempt
@require_GET
def readiness_check(request):
    """
    Readiness probe.
    Returns 503 when the database, the cache or the jobs table is unavailable.
    """
    checks = {name: _run_check(name, check) for name, check in READINESS_CHECKS}
    all_healthy = all(result['status'] == 'healthy' for result in checks.values())

    return JsonResponse({
        'status': 'healthy' if all_healthy else 'unhealthy',
        'service': SERVICE_NAME,
        'timestamp': timezone.now().isoformat(),
        'checks': checks,
    }, status=200 if all_healthy else 503)
