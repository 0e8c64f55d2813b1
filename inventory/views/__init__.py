"""
Views package for the inventory application.

This package is organized into logical modules:
- boxes: JSON endpoints for box CRUD (drives box number allocation) and the public label preview
- items: JSON endpoints for items, including search and moving items between boxes
- box_numbers: staff-only box number pool status
- health: liveness/readiness/health checks and metrics
- errors: JSON 404/500 handlers
- helpers: Shared utilities and helper functions
"""

from .boxes import (
    box_list,
    box_detail,
    box_by_uuid,
    box_delete,
)

from .items import (
    item_list,
    item_list_by_box,
    item_search,
    item_detail,
    item_delete,
    item_move,
    item_move_bulk,
)

from .box_numbers import (
    pool_status,
)

from .errors import (
    error_404,
    error_500,
)

__all__ = [
    # Boxes
    'box_list',
    'box_detail',
    'box_by_uuid',
    'box_delete',
    # Items
    'item_list',
    'item_list_by_box',
    'item_search',
    'item_detail',
    'item_delete',
    'item_move',
    'item_move_bulk',
    # Box numbers
    'pool_status',
    # Errors
    'error_404',
    'error_500',
]
