"""
Error handling views.
Custom 404 and 500 error handlers returning JSON.
"""

import logging

from django.http import HttpRequest, JsonResponse

logger = logging.getLogger(__name__)


def error_404(request: HttpRequest, exception: Exception) -> JsonResponse:
    """Custom 404 error handler."""
    logger.warning(f"404 error for path: {request.path}", extra={"request": request})
    return JsonResponse({"ok": False, "error": "Not found"}, status=404)


def error_500(request: HttpRequest) -> JsonResponse:
    """Custom 500 error handler."""
    logger.error(f"500 error for path: {request.path}", extra={"request": request})
    return JsonResponse({"ok": False, "error": "Internal server error"}, status=500)
