from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """
    Boxes, their items, and the box number pool.

    Box numbers are handed out by ``inventory.box_numbers``; legacy boxes are
    reconciled with the pool by ``inventory.backfill`` before workers start.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory'
    verbose_name = 'Inventory'
