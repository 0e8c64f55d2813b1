"""
Constants for the inventory application.
Centralizes magic numbers and configuration values for better maintainability.
"""

# --------------------------------------------------------------------------------------
# Box number pool
# --------------------------------------------------------------------------------------
BOX_NUMBER_MAX_ATTEMPTS_DEFAULT = 5   # Claim retries after a primary-key race

# Cache keys for drift counters (shared across workers via the cache backend)
POOL_RELEASE_MISSES_KEY = "box_numbers:release_misses"
POOL_ALLOCATION_CONFLICTS_KEY = "box_numbers:allocation_conflicts"

# --------------------------------------------------------------------------------------
# Backfill
# --------------------------------------------------------------------------------------
BACKFILL_LOG_PREVIEW = 10          # Boxes listed individually by the command before "... and N more"

# --------------------------------------------------------------------------------------
# Text Limits
# --------------------------------------------------------------------------------------
MAX_TEXT_LENGTH = 10_000           # Maximum length for sanitized text
MAX_ROOM_LENGTH = 255              # Matches Box.current_room / target_room
MAX_ITEM_NAME_LENGTH = 255         # Matches Item.name
