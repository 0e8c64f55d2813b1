"""
Operator view of the box number pool (staff only).
"""

import logging

from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, JsonResponse
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

from ..box_numbers import get_pool_counters, get_pool_status
from .helpers import json_err, json_ok

logger = logging.getLogger(__name__)


@login_required
@require_GET
@never_cache
def pool_status(request: HttpRequest) -> JsonResponse:
    """
    Current state of the box number pool.

    Returns:
        {
            "ok": true,
            "totalNumbers": 12,
            "availableNumbers": 2,
            "highestNumber": 12,
            "nextNumber": 4,
            "availableNumbersList": [4, 9],
            "counters": {"release_misses": 0, "allocation_conflicts": 1}
        }
    """
    if not request.user.is_staff:
        logger.warning(f"Non-staff user {request.user.username} requested box number pool status")
        return json_err("Admin privileges required", 403)

    status = get_pool_status()
    return json_ok(**status.as_dict(), counters=get_pool_counters())
