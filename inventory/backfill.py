"""
One-time reconciliation of existing boxes with the box number pool.

Runs at startup before any worker serves traffic (gunicorn ``on_starting`` hook
or ``manage.py backfill_box_numbers``). Two passes, in this order:

1. Reserve every number already carried by a box, so none of them can be
   handed out again.
2. Give every unnumbered box the next available number, oldest box first.

Everything happens in one transaction: any failure leaves the pool and the
boxes exactly as they were and propagates to the caller.
"""

import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.db.models import F

from .box_numbers import get_next_available_box_number, reserve_box_number
from .models import Box

logger = logging.getLogger(__name__)


@dataclass
class BackfillResult:
    reserved: int = 0
    assigned: int = 0
    assignments: list[tuple[int, int]] = field(default_factory=list)  # (box id, number)

    @property
    def changed(self) -> bool:
        return bool(self.reserved or self.assigned)


def _boxes_in_creation_order():
    # Row locks keep a second concurrent backfill waiting until this one commits
    return (
        Box.objects
        .select_for_update()
        .order_by(F("created_at").asc(nulls_last=True), "id")
    )


@transaction.atomic
def backfill_box_numbers() -> BackfillResult:
    """
    Reserve existing box numbers and assign numbers to unnumbered boxes.

    Idempotent: a second run with no new unnumbered boxes changes nothing.
    """
    result = BackfillResult()
    boxes = list(_boxes_in_creation_order())

    if not boxes:
        logger.debug("No boxes found, skipping box number backfill")
        return result

    for box in boxes:
        if box.box_number is not None and reserve_box_number(box.box_number):
            result.reserved += 1

    if result.reserved:
        logger.info(f"Reserved {result.reserved} box number(s) already in use")

    unnumbered = [box for box in boxes if box.box_number is None]
    if not unnumbered:
        return result

    logger.info(f"Starting box number backfill for {len(unnumbered)} box(es)")

    for box in unnumbered:
        number = get_next_available_box_number()
        box.box_number = number
        box.save(update_fields=["box_number"])
        result.assigned += 1
        result.assignments.append((box.pk, number))
        logger.debug(f"Assigned box number {number} to box ID {box.pk}")

    logger.info(f"Box number backfill completed. Assigned {result.assigned} number(s)")
    return result
