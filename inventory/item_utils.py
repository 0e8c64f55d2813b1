"""
Item operations.
Items belong to exactly one box and can be moved between boxes; they never touch box numbers.
"""

import logging
from typing import Any, Iterable, Optional

from django.db import transaction
from django.db.models import QuerySet

from .constants import MAX_ITEM_NAME_LENGTH
from .models import Box, Item
from .utils import sanitize_text

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("name", "description")


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(ITEM_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported item field(s): {', '.join(sorted(unknown))}")

    cleaned = {}
    for name, value in fields.items():
        if name == "name":
            cleaned[name] = sanitize_text(value, max_length=MAX_ITEM_NAME_LENGTH)
        else:
            cleaned[name] = sanitize_text(value)
    if "name" in cleaned and not cleaned["name"]:
        raise ValueError("Item name cannot be empty")
    return cleaned


def create_item(box: Box, **fields: Any) -> Item:
    values = _clean_fields(fields)
    if "name" not in values:
        raise ValueError("Item name is required")
    item = Item.objects.create(box=box, **values)
    logger.info(f"Item created with ID: {item.pk} in box {box.box_number}")
    return item


def update_item(item: Item, **fields: Any) -> Item:
    values = _clean_fields(fields)
    if not values:
        return item

    for name, value in values.items():
        setattr(item, name, value)
    item.save(update_fields=list(values.keys()))
    logger.info(f"Item updated - ID: {item.pk}")
    return item


def delete_item(item: Item) -> None:
    item_id = item.pk
    item.delete()
    logger.info(f"Item with ID {item_id} deleted")


def move_item(item: Item, target: Box) -> Item:
    """Move a single item into ``target``."""
    item.box = target
    item.save(update_fields=["box"])
    logger.info(f"Item ID: {item.pk} moved to box {target.box_number}")
    return item


@transaction.atomic
def move_items(item_ids: Iterable[int], target: Box) -> int:
    """
    Move several items into ``target``.

    Ids that do not exist are skipped with a warning. Returns how many items moved.
    """
    item_ids = list(item_ids)
    items = Item.objects.select_for_update().filter(pk__in=item_ids)
    found = {item.pk: item for item in items}
    missing = [pk for pk in item_ids if pk not in found]
    if missing:
        logger.warning(f"Skipping unknown item IDs during bulk move: {missing}")

    # Saved one by one so the audit trail records every move
    for item in found.values():
        item.box = target
        item.save(update_fields=["box"])

    logger.info(f"Moved {len(found)} out of {len(item_ids)} items to box {target.box_number}")
    return len(found)


def search_items(query: str, box: Optional[Box] = None) -> QuerySet:
    """Case-insensitive name search, optionally within one box. A blank query matches nothing."""
    query = (query or "").strip()
    if not query:
        return Item.objects.none()

    items = Item.objects.select_related("box").filter(name__icontains=query)
    if box is not None:
        items = items.filter(box=box)
    return items.order_by("name", "id")
