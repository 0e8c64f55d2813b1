"""
Shared helper functions and utilities for views.
Includes type hints for better code clarity and IDE support.
"""

import json
from typing import Any

from django.http import HttpRequest, JsonResponse

from ..models import Box, Item


# -------------------------------------------------------------------------------------------------
# JSON Response Helpers
# -------------------------------------------------------------------------------------------------

def json_ok(http_status: int = 200, **payload: Any) -> JsonResponse:
    """Return a successful JSON response with ok=True."""
    data = {"ok": True}
    data.update(payload)
    return JsonResponse(data, status=http_status)


def json_err(msg: str, status: int = 400, **extra: Any) -> JsonResponse:
    """Return an error JSON response with ok=False."""
    data = {"ok": False, "error": msg}
    data.update(extra)
    return JsonResponse(data, status=status)


# -------------------------------------------------------------------------------------------------
# Request Parsing
# -------------------------------------------------------------------------------------------------

def request_data(request: HttpRequest) -> dict[str, Any]:
    """
    Return the submitted fields from either a JSON body or form-encoded POST data.

    Raises:
        ValueError: if a JSON body cannot be parsed or is not an object.
    """
    if request.content_type == "application/json":
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e.msg}") from e
        if not isinstance(data, dict):
            raise ValueError("JSON body must be an object")
        return data
    return request.POST.dict()


# -------------------------------------------------------------------------------------------------
# Serialization
# -------------------------------------------------------------------------------------------------

def box_to_dict(box: Box) -> dict[str, Any]:
    """Serialize a box for API responses."""
    item_count = getattr(box, "num_items", None)
    if item_count is None:
        item_count = box.item_count
    return {
        "id": box.pk,
        "uuid": box.uuid,
        "box_number": box.box_number,
        "current_room": box.current_room,
        "target_room": box.target_room,
        "description": box.description,
        "is_fragile": box.is_fragile,
        "no_stack": box.no_stack,
        "is_moved_to_target": box.is_moved_to_target,
        "label_printed": box.label_printed,
        "item_count": item_count,
        "created_at": box.created_at.isoformat() if box.created_at else None,
    }


def item_to_dict(item: Item) -> dict[str, Any]:
    """Serialize an item together with the box it sits in."""
    return {
        "id": item.pk,
        "name": item.name,
        "description": item.description,
        "box_id": item.box_id,
        "box_uuid": item.box.uuid,
        "box_number": item.box.box_number,
        "created_at": item.created_at.isoformat() if item.created_at else None,
    }


def box_preview_to_dict(box: Box) -> dict[str, Any]:
    """Public view of a box, as reached by scanning its label: no ids beyond the label, item names only."""
    return {
        "uuid": box.uuid,
        "box_number": box.box_number,
        "current_room": box.current_room,
        "target_room": box.target_room,
        "description": box.description,
        "is_fragile": box.is_fragile,
        "no_stack": box.no_stack,
        "items": [{"name": item.name} for item in box.items.all()],
    }
