"""
Box lifecycle operations.
Creating a box claims a box number; deleting one hands its number back to the pool.
"""

import logging
from typing import Any, Optional

from django.db import transaction

from .box_numbers import get_next_available_box_number, release_box_number
from .constants import MAX_ROOM_LENGTH
from .models import Box
from .utils import sanitize_text

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("current_room", "target_room", "description")
FLAG_FIELDS = ("is_fragile", "no_stack", "is_moved_to_target", "label_printed")
EDITABLE_FIELDS = TEXT_FIELDS + FLAG_FIELDS


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported box field(s): {', '.join(sorted(unknown))}")

    cleaned = {}
    for name, value in fields.items():
        if name == "description":
            cleaned[name] = sanitize_text(value)
        elif name in TEXT_FIELDS:
            cleaned[name] = sanitize_text(value, max_length=MAX_ROOM_LENGTH)
        else:
            cleaned[name] = bool(value)
    return cleaned


@transaction.atomic
def create_box(**fields: Any) -> Box:
    """
    Create a box carrying the next available box number.

    The number claim and the insert share one transaction, so a failed insert
    leaves the number available.
    """
    values = _clean_fields(fields)
    number = get_next_available_box_number()
    box = Box.objects.create(box_number=number, **values)
    logger.info(f"Box created with ID: {box.pk}, number: {number}, UUID: {box.uuid}")
    return box


def update_box(box: Box, **fields: Any) -> Box:
    """Update descriptive fields. The box number never changes here."""
    values = _clean_fields(fields)
    if not values:
        return box

    for name, value in values.items():
        setattr(box, name, value)
    box.save(update_fields=[*values.keys(), "updated_at"])
    logger.info(f"Box updated - ID: {box.pk}, number: {box.box_number}")
    return box


@transaction.atomic
def delete_box(box: Box) -> Optional[int]:
    """Delete a box (and its items) and release its number. Returns the released number."""
    number = box.box_number
    box_id = box.pk
    box.delete()
    release_box_number(number)
    logger.info(f"Box with ID {box_id} deleted, number {number} released")
    return number
