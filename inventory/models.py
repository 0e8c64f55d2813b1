import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q, CheckConstraint
from django.utils import timezone


def _box_uuid():
    return str(uuid.uuid4())


# === BOX NUMBER POOL ===

class BoxNumberPool(models.Model):
    """
    One row per box number ever issued.

    Rows are never deleted; a number only flips between available and
    unavailable. All writes go through ``inventory.box_numbers``.
    """
    box_number = models.PositiveIntegerField(
        primary_key=True,
        validators=[MinValueValidator(1)],
    )
    is_available = models.BooleanField(default=True)
    last_used_at = models.DateTimeField(
        null=True, blank=True,
        help_text="When the number was last handed out (not touched on release)",
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "box_number_pool"
        ordering = ["box_number"]
        verbose_name = "Box number"
        verbose_name_plural = "Box number pool"
        indexes = [
            # Smallest-available lookup
            models.Index(fields=["is_available", "box_number"], name="boxpool_available_idx"),
        ]
        constraints = [
            CheckConstraint(condition=Q(box_number__gte=1), name="boxpool_number_positive"),
        ]

    def __str__(self):
        state = "available" if self.is_available else "in use"
        return f"#{self.box_number} ({state})"


# === BOXES & ITEMS ===

class Box(models.Model):
    uuid = models.CharField(max_length=36, unique=True, default=_box_uuid, editable=False)
    # Assigned by the allocator; null only for legacy rows awaiting the backfill
    box_number = models.PositiveIntegerField(null=True, blank=True, unique=True, editable=False)
    current_room = models.CharField(max_length=255, blank=True)
    target_room = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    is_fragile = models.BooleanField(default=False)
    no_stack = models.BooleanField(default=False)
    is_moved_to_target = models.BooleanField(default=False)
    label_printed = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-box_number", "-id"]
        verbose_name_plural = "Boxes"
        indexes = [
            models.Index(fields=["created_at"], name="box_created_at_idx"),
            models.Index(fields=["current_room"], name="box_current_room_idx"),
        ]

    def __str__(self):
        label = f"Box #{self.box_number}" if self.box_number is not None else "Box (unnumbered)"
        room = self.current_room or "?"
        return f"{label} in {room}"

    @property
    def item_count(self) -> int:
        return self.items.count()


class Item(models.Model):
    box = models.ForeignKey(Box, on_delete=models.CASCADE, related_name="items")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["box", "name"], name="item_box_name_idx"),
        ]

    def __str__(self):
        return f"{self.name} (box {self.box_id})"
