"""
Health check endpoints for monitoring and load balancer integration.

Provides health checks including:
- Basic liveness check
- Database connectivity
- Cache connectivity
- Box number pool consistency
- Pool metrics
"""

import logging
import time
from typing import Any

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import connection
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

from ..box_numbers import get_pool_counters, get_pool_status
from ..models import Box, BoxNumberPool, Item

logger = logging.getLogger(__name__)


@require_GET
@never_cache
def health_check(request: HttpRequest) -> JsonResponse:
    """
    Comprehensive health check endpoint.

    Returns:
        200 OK if all checks pass
        503 Service Unavailable if any check fails

    Response format:
        {
            "status": "healthy" | "unhealthy",
            "timestamp": "2025-01-02T10:30:00Z",
            "checks": {
                "database": {"status": "ok", "latency_ms": 5.2},
                "cache": {"status": "ok"},
                "box_number_pool": {"status": "ok", "total_numbers": 12, ...}
            },
            "version": "1.0.0"
        }
    """
    checks = {}
    all_healthy = True

    for name, check in (
        ('database', check_database),
        ('cache', check_cache),
        ('box_number_pool', check_box_number_pool),
    ):
        try:
            result = check()
        except Exception as e:
            logger.exception(f"Health check: {name} check failed")
            result = {'status': 'error', 'error': str(e)}
        checks[name] = result
        # 'degraded' and 'warning' keep the service healthy
        if result['status'] == 'error':
            all_healthy = False

    response_data = {
        'status': 'healthy' if all_healthy else 'unhealthy',
        'timestamp': timezone.now().isoformat(),
        'checks': checks,
        'version': getattr(settings, 'VERSION', '1.0.0'),
    }

    status_code = 200 if all_healthy else 503
    return JsonResponse(response_data, status=status_code)


@require_GET
@never_cache
def liveness_check(request: HttpRequest) -> JsonResponse:
    """
    Simple liveness check for Kubernetes/container orchestration.

    Returns:
        200 OK with {"status": "alive"}
    """
    return JsonResponse({
        'status': 'alive',
        'timestamp': timezone.now().isoformat(),
    })


@require_GET
@never_cache
def readiness_check(request: HttpRequest) -> JsonResponse:
    """
    Readiness check for Kubernetes/load balancers.

    Returns:
        200 OK if ready to serve traffic
        503 Service Unavailable if not ready
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return JsonResponse({
            'status': 'ready',
            'timestamp': timezone.now().isoformat(),
        })

    except Exception as e:
        logger.warning(f"Readiness check failed: {str(e)}")
        return JsonResponse({
            'status': 'not_ready',
            'timestamp': timezone.now().isoformat(),
            'reason': 'database_unavailable',
        }, status=503)


def check_database() -> dict[str, Any]:
    """
    Check database connectivity and measure latency.

    Returns:
        dict with status, latency_ms, and optionally error
    """
    start_time = time.time()

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()

        latency_ms = (time.time() - start_time) * 1000

        if latency_ms > 100:
            logger.warning(f"Database latency is high: {latency_ms:.2f}ms")

        return {
            'status': 'ok',
            'latency_ms': round(latency_ms, 2),
        }

    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return {
            'status': 'error',
            'error': str(e),
        }


def check_cache() -> dict[str, Any]:
    """
    Check cache connectivity.

    Returns:
        dict with status and optionally error
    """
    try:
        test_key = 'health_check_test'
        test_value = 'ok'

        cache.set(test_key, test_value, timeout=10)
        retrieved_value = cache.get(test_key)

        if retrieved_value != test_value:
            return {
                'status': 'degraded',
                'error': 'Cache set/get mismatch',
            }

        cache.delete(test_key)

        return {'status': 'ok'}

    except Exception as e:
        # Cache only holds drift counters, so log as warning not error
        logger.warning(f"Cache health check failed: {str(e)}")
        return {
            'status': 'degraded',
            'error': str(e),
            'note': 'Cache is optional, application continues without it',
        }


def check_box_number_pool() -> dict[str, Any]:
    """
    Check that the pool and the boxes agree.

    - Every number from 1 to the highest issued one has a pool row.
    - Every numbered box points at a pool row that is marked in use.

    Returns:
        dict with status ('ok' or 'warning') and the figures behind it
    """
    status = get_pool_status()
    in_use = status.total_numbers - status.available_numbers
    numbered_boxes = Box.objects.filter(box_number__isnull=False).count()
    orphaned = (
        Box.objects
        .filter(box_number__isnull=False)
        .exclude(box_number__in=BoxNumberPool.objects.filter(is_available=False).values('box_number'))
        .count()
    )

    problems = []
    if status.total_numbers != status.highest_number:
        problems.append('pool has unminted gaps below the highest number')
    if orphaned:
        problems.append(f'{orphaned} box(es) carry a number the pool considers free or unknown')

    if problems:
        logger.warning(f"Box number pool inconsistency: {'; '.join(problems)}")

    return {
        'status': 'warning' if problems else 'ok',
        'total_numbers': status.total_numbers,
        'numbers_in_use': in_use,
        'numbered_boxes': numbered_boxes,
        'problems': problems,
    }


@require_GET
@never_cache
def metrics(request: HttpRequest) -> JsonResponse:
    """
    Expose basic metrics for monitoring systems.

    Returns:
        {
            "active_users": 3,
            "total_boxes": 42,
            "total_items": 310,
            "box_numbers": {"total": 45, "available": 3, "highest": 45,
                            "release_misses": 0, "allocation_conflicts": 0},
            "timestamp": "..."
        }
    """
    try:
        User = get_user_model()
        status = get_pool_status()

        metrics_data = {
            'active_users': User.objects.filter(is_active=True).count(),
            'total_boxes': Box.objects.count(),
            'unnumbered_boxes': Box.objects.filter(box_number__isnull=True).count(),
            'total_items': Item.objects.count(),
            'box_numbers': {
                'total': status.total_numbers,
                'available': status.available_numbers,
                'highest': status.highest_number,
                **get_pool_counters(),
            },
            'timestamp': timezone.now().isoformat(),
        }

        return JsonResponse(metrics_data)

    except Exception as e:
        logger.exception("Metrics endpoint failed")
        return JsonResponse({
            'error': 'Failed to collect metrics',
            'detail': str(e),
        }, status=500)
