"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date

DEFAULT_REFERENCE_DATE = date(2025, 3, 3)
CYCLE_CONFIG_VERSION = 1

DAYS_PER_WEEK = 7
WEEKS_PER_CYCLE = 4
DAYS_PER_CYCLE = DAYS_PER_WEEK * WEEKS_PER_CYCLE

# Monday..Saturday after a cycle closes
GRACE_PERIOD_DAYS = 6

DEFAULT_APPROVED_VISIBILITY_HOURS = 24
DEFAULT_LIST_LIMIT = 500
DEFAULT_DELETION_REASON = "Administrative cleanup"

MIN_RECORD_HOURS = 0.5
MAX_RECORD_HOURS = 24
MIN_LEAVE_DAYS = 0.5
MAX_LEAVE_DAYS = 365
