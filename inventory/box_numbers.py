"""
Box number allocation.

Hands out the short numbers printed on box labels, reclaims them when boxes
are deleted, and reports the state of the pool. The ``BoxNumberPool`` table is
the only source of truth: nothing is cached in process memory, so any number of
workers can allocate concurrently.

Concurrency:
- Claims lock the selected pool row with ``select_for_update(skip_locked=True)``
  inside ``transaction.atomic``, so parallel claims take different free rows.
- Minting a new number relies on the primary key; a racing mint raises
  ``IntegrityError`` and the whole claim is retried in a fresh savepoint.
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Optional

from django.conf import settings
from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import Max
from django.utils import timezone

from .constants import (
    BOX_NUMBER_MAX_ATTEMPTS_DEFAULT,
    POOL_ALLOCATION_CONFLICTS_KEY,
    POOL_RELEASE_MISSES_KEY,
)
from .models import BoxNumberPool

logger = logging.getLogger(__name__)


class BoxNumberAllocationError(RuntimeError):
    """Raised when a box number could not be claimed after all retries."""


@dataclass(frozen=True)
class PoolStatus:
    total_numbers: int
    available_numbers: int
    highest_number: int
    next_number: Optional[int]
    available_numbers_list: list[int] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "totalNumbers": self.total_numbers,
            "availableNumbers": self.available_numbers,
            "highestNumber": self.highest_number,
            "nextNumber": self.next_number,
            "availableNumbersList": list(self.available_numbers_list),
        }


# -------------------------------------------------------------------------------------------------
# Counters
# -------------------------------------------------------------------------------------------------

def _bump_counter(key: str) -> int:
    try:
        cache.add(key, 0, timeout=None)
        try:
            return cache.incr(key)
        except ValueError:
            cache.set(key, 1, timeout=None)
            return 1
    except Exception as e:
        # Counters are best-effort; the cache is optional
        logger.warning(f"Could not update pool counter {key}: {e}")
        return 0


def _count_after_commit(key: str) -> None:
    """
    Bump ``key`` once the caller's transaction commits.

    The database cache shares the request's connection, so a counter write
    inside an open transaction would be rolled back with it (or, on PostgreSQL,
    abort it on error). Outside any transaction the bump happens immediately.
    """
    transaction.on_commit(partial(_bump_counter, key))


def get_pool_counters() -> dict[str, int]:
    """Counters that hint at drift between boxes and the pool."""
    try:
        return {
            "release_misses": cache.get(POOL_RELEASE_MISSES_KEY, 0),
            "allocation_conflicts": cache.get(POOL_ALLOCATION_CONFLICTS_KEY, 0),
        }
    except Exception as e:
        logger.warning(f"Could not read pool counters: {e}")
        return {"release_misses": 0, "allocation_conflicts": 0}


# -------------------------------------------------------------------------------------------------
# Allocation
# -------------------------------------------------------------------------------------------------

def _highest_box_number() -> int:
    return BoxNumberPool.objects.aggregate(highest=Max("box_number"))["highest"] or 0


def _claim_box_number() -> int:
    now = timezone.now()
    # Rows locked by a concurrent claim are about to become unavailable; take the next one
    entry = (
        BoxNumberPool.objects
        .select_for_update(skip_locked=True)
        .filter(is_available=True)
        .order_by("box_number")
        .first()
    )
    if entry is not None:
        entry.is_available = False
        entry.last_used_at = now
        entry.save(update_fields=["is_available", "last_used_at"])
        logger.info(f"Assigned box number {entry.box_number} from pool")
        return entry.box_number

    return _create_new_box_number(now)


def _create_new_box_number(now) -> int:
    new_number = _highest_box_number() + 1
    BoxNumberPool.objects.create(
        box_number=new_number,
        is_available=False,
        last_used_at=now,
        created_at=now,
    )
    logger.info(f"Created new box number {new_number}")
    return new_number


def get_next_available_box_number() -> int:
    """
    Claim the smallest available box number, minting ``max + 1`` when none is free.

    The returned number is already marked unavailable. Callers should persist the
    box carrying it inside the same transaction so a failed insert hands the
    number back automatically.

    Raises:
        BoxNumberAllocationError: if every attempt lost a race on the primary key.
    """
    attempts = max(1, getattr(settings, "BOX_NUMBER_MAX_ATTEMPTS", BOX_NUMBER_MAX_ATTEMPTS_DEFAULT))

    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                return _claim_box_number()
        except IntegrityError as e:
            last_error = e
            _count_after_commit(POOL_ALLOCATION_CONFLICTS_KEY)
            if attempt < attempts:
                logger.warning(f"Box number allocation conflict (attempt {attempt}/{attempts}), retrying")

    logger.error(f"Giving up on box number allocation after {attempts} attempts: {last_error}")
    raise BoxNumberAllocationError(
        f"Could not allocate a box number after {attempts} attempts"
    ) from last_error


def release_box_number(box_number: Optional[int]) -> None:
    """
    Return a number to the pool.

    Releasing ``None`` or a number the pool has never issued is tolerated: it is
    logged and counted, but never blocks the box deletion that triggered it.
    """
    if box_number is None:
        logger.warning("Attempted to release null box number")
        return

    was_available = False
    with transaction.atomic():
        entry = BoxNumberPool.objects.select_for_update().filter(box_number=box_number).first()
        if entry is not None:
            was_available = entry.is_available
            if not was_available:
                entry.is_available = True
                entry.save(update_fields=["is_available"])

    if entry is None:
        _count_after_commit(POOL_RELEASE_MISSES_KEY)
        logger.warning(f"Box number {box_number} not found in pool during release")
    elif was_available:
        logger.warning(f"Box number {box_number} was already available when released")
    else:
        logger.info(f"Released box number {box_number} back to pool")


def reserve_box_number(box_number: int) -> bool:
    """
    Make sure ``box_number`` exists in the pool and is marked in use.

    Used by the backfill for boxes that already carry a number. Numbers between
    the current maximum and ``box_number`` are minted as available so the pool
    stays dense from 1 upwards.

    Returns:
        True if the pool changed, False if the number was already reserved.
    """
    if box_number is None or box_number < 1:
        raise ValueError(f"Invalid box number to reserve: {box_number!r}")

    now = timezone.now()
    with transaction.atomic():
        entry = BoxNumberPool.objects.select_for_update().filter(box_number=box_number).first()

        if entry is None:
            highest = _highest_box_number()
            if box_number > highest + 1:
                BoxNumberPool.objects.bulk_create([
                    BoxNumberPool(box_number=n, is_available=True, created_at=now)
                    for n in range(highest + 1, box_number)
                ])
                logger.info(f"Minted box numbers {highest + 1}-{box_number - 1} as available")
            BoxNumberPool.objects.create(
                box_number=box_number,
                is_available=False,
                last_used_at=now,
                created_at=now,
            )
            logger.info(f"Reserved new box number {box_number}")
            return True

        if not entry.is_available:
            return False

        entry.is_available = False
        entry.last_used_at = now
        entry.save(update_fields=["is_available", "last_used_at"])
        logger.info(f"Reserved existing box number {box_number}")
        return True


# -------------------------------------------------------------------------------------------------
# Reporting
# -------------------------------------------------------------------------------------------------

def get_pool_status() -> PoolStatus:
    """Read-only snapshot of the pool; may be momentarily stale under load."""
    total = BoxNumberPool.objects.count()
    available = list(
        BoxNumberPool.objects
        .filter(is_available=True)
        .order_by("box_number")
        .values_list("box_number", flat=True)
    )
    return PoolStatus(
        total_numbers=total,
        available_numbers=len(available),
        highest_number=_highest_box_number(),
        next_number=available[0] if available else None,
        available_numbers_list=available,
    )
