"""
Item endpoints.
JSON views over ``inventory.item_utils``: list, search, create, update, delete and move items between boxes.
"""

import logging

from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from ..forms import ItemForm
from ..item_utils import create_item, delete_item, move_item, move_items, search_items, update_item
from ..models import Box, Item
from .helpers import item_to_dict, json_err, json_ok, request_data

logger = logging.getLogger(__name__)


def _items():
    return Item.objects.select_related("box")


def _parse_ids(value) -> list[int]:
    """Accept a JSON list or a comma-separated string of item ids."""
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    if not isinstance(value, list) or not value:
        raise ValueError("item_ids must be a non-empty list")
    try:
        return [int(pk) for pk in value]
    except (TypeError, ValueError) as e:
        raise ValueError("item_ids must contain integers") from e


def _target_box(data: dict):
    box_uuid = str(data.get("target_box_uuid") or "").strip()
    if not box_uuid:
        raise ValueError("target_box_uuid is required")
    return get_object_or_404(Box, uuid=box_uuid)


@login_required
@require_http_methods(["GET", "POST"])
def item_list(request: HttpRequest) -> JsonResponse:
    """
    GET: all items.
    POST: create an item in the box given by ``box_uuid``.
    """
    if request.method == "GET":
        items = [item_to_dict(item) for item in _items()]
        return json_ok(items=items, count=len(items))

    try:
        data = request_data(request)
    except ValueError as e:
        return json_err(str(e), 400)

    box_uuid = str(data.get("box_uuid") or "").strip()
    if not box_uuid:
        return json_err("box_uuid is required", 400)
    box = get_object_or_404(Box, uuid=box_uuid)

    form = ItemForm(data)
    if not form.is_valid():
        return json_err("Invalid item data", 400, errors=form.errors.get_json_data())

    try:
        item = create_item(box, **form.submitted_fields())
    except ValueError as e:
        return json_err(str(e), 400)
    return json_ok(http_status=201, item=item_to_dict(item))


@login_required
@require_GET
def item_list_by_box(request: HttpRequest, box_uuid: str) -> JsonResponse:
    box = get_object_or_404(Box, uuid=box_uuid)
    items = [item_to_dict(item) for item in _items().filter(box=box)]
    logger.debug(f"Retrieved {len(items)} items for box {box.box_number}")
    return json_ok(items=items, count=len(items))


@login_required
@require_GET
def item_search(request: HttpRequest) -> JsonResponse:
    """Search item names (``q``), optionally within one box (``box``, a box UUID)."""
    box = None
    box_uuid = request.GET.get("box", "").strip()
    if box_uuid:
        box = get_object_or_404(Box, uuid=box_uuid)

    items = [item_to_dict(item) for item in search_items(request.GET.get("q", ""), box=box)]
    return json_ok(items=items, count=len(items))


@login_required
@require_http_methods(["GET", "POST"])
def item_detail(request: HttpRequest, pk: int) -> JsonResponse:
    """
    GET: a single item.
    POST: update name and/or description.
    """
    item = get_object_or_404(_items(), pk=pk)

    if request.method == "GET":
        return json_ok(item=item_to_dict(item))

    try:
        data = request_data(request)
    except ValueError as e:
        return json_err(str(e), 400)

    form = ItemForm(data, partial=True)
    if not form.is_valid():
        return json_err("Invalid item data", 400, errors=form.errors.get_json_data())

    try:
        item = update_item(item, **form.submitted_fields())
    except ValueError as e:
        return json_err(str(e), 400)
    return json_ok(item=item_to_dict(item))


@login_required
@require_POST
def item_delete(request: HttpRequest, pk: int) -> JsonResponse:
    item = get_object_or_404(Item, pk=pk)
    delete_item(item)
    return json_ok(deleted=pk)


@login_required
@require_POST
def item_move(request: HttpRequest, pk: int) -> JsonResponse:
    """Move one item into the box given by ``target_box_uuid``."""
    item = get_object_or_404(_items(), pk=pk)

    try:
        target = _target_box(request_data(request))
    except ValueError as e:
        return json_err(str(e), 400)

    item = move_item(item, target)
    return json_ok(item=item_to_dict(item))


@login_required
@require_POST
def item_move_bulk(request: HttpRequest) -> JsonResponse:
    """Move several items (``item_ids``) into ``target_box_uuid``; unknown ids are skipped."""
    try:
        data = request_data(request)
        item_ids = _parse_ids(data.get("item_ids"))
        target = _target_box(data)
    except ValueError as e:
        return json_err(str(e), 400)

    moved = move_items(item_ids, target)
    return json_ok(moved=moved, requested=len(item_ids))
