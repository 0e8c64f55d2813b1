"""
Box endpoints.
Thin JSON views over ``inventory.box_utils``: every create claims a box number
and every delete releases one.
"""

import logging

from django.contrib.auth.decorators import login_required
from django.db.models import Count
from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from ..box_utils import create_box, delete_box, update_box
from ..forms import BoxForm
from ..models import Box
from .helpers import box_preview_to_dict, box_to_dict, item_to_dict, json_err, json_ok, request_data

logger = logging.getLogger(__name__)


def _boxes():
    # Meta.ordering does not apply to GROUP BY queries
    return Box.objects.annotate(num_items=Count("items")).order_by("-box_number", "-id")


@login_required
@require_http_methods(["GET", "POST"])
def box_list(request: HttpRequest) -> JsonResponse:
    """
    GET: list all boxes, highest box number first.
    POST: create a box; the server assigns its box number.
    """
    if request.method == "GET":
        boxes = [box_to_dict(box) for box in _boxes()]
        logger.debug(f"Retrieved {len(boxes)} boxes")
        return json_ok(boxes=boxes, count=len(boxes))

    try:
        data = request_data(request)
    except ValueError as e:
        return json_err(str(e), 400)

    form = BoxForm(data)
    if not form.is_valid():
        return json_err("Invalid box data", 400, errors=form.errors.get_json_data())

    try:
        box = create_box(**form.submitted_fields())
    except Exception:
        logger.exception("Error creating box")
        return json_err("Could not create box", 500)

    return json_ok(http_status=201, box=box_to_dict(box))


@login_required
@require_http_methods(["GET", "POST"])
def box_detail(request: HttpRequest, pk: int) -> JsonResponse:
    """
    GET: a single box.
    POST: update descriptive fields (partial updates; box_number is ignored).
    """
    box = get_object_or_404(_boxes(), pk=pk)

    if request.method == "GET":
        return json_ok(box=box_to_dict(box))

    try:
        data = request_data(request)
    except ValueError as e:
        return json_err(str(e), 400)

    # Validate only; binding the instance would blank fields the client left out
    form = BoxForm(data)
    if not form.is_valid():
        return json_err("Invalid box data", 400, errors=form.errors.get_json_data())

    box = update_box(box, **form.submitted_fields())
    return json_ok(box=box_to_dict(box))


@require_GET
def box_by_uuid(request: HttpRequest, uuid: str) -> JsonResponse:
    """
    Look up a box by its UUID (the identifier encoded in printed labels).

    Public, so a scanned label works without logging in: anonymous callers get
    a read-only preview with item names only; signed-in users get the full box.
    """
    box = get_object_or_404(_boxes().prefetch_related("items"), uuid=uuid)
    if not request.user.is_authenticated:
        logger.debug(f"Public preview for box {box.box_number}")
        return json_ok(box=box_preview_to_dict(box))
    return json_ok(box=box_to_dict(box), items=[item_to_dict(item) for item in box.items.all()])


@login_required
@require_POST
def box_delete(request: HttpRequest, pk: int) -> JsonResponse:
    """Delete a box and hand its number back to the pool."""
    box = get_object_or_404(Box, pk=pk)

    try:
        released = delete_box(box)
    except Exception:
        logger.exception(f"Error deleting box {pk}")
        return json_err("Could not delete box", 500)

    return json_ok(deleted=pk, released_number=released)
