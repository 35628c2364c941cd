"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MIN_OT_MINUTES = 15

# Check-in window falls back to this when a shift has no grace-before set.
DEFAULT_CHECK_IN_GRACE_MINUTES = 30
CHECK_OUT_WINDOW_MINUTES = 30

DEFAULT_PRESENCE_TIME_SECONDS = 3
DEFAULT_PRESENCE_COUNT = 3
DEFAULT_PRESENCE_WINDOW_SECONDS = 5
DEFAULT_PRESENCE_RETENTION_DAYS = 7

DEFAULT_AUTO_CHECKOUT_FIXED_HOURS = 4
DEFAULT_AUTO_CHECKOUT_INTERVAL_SECONDS = 5 * 60
DEFAULT_ABSENCE_MARK_INTERVAL_SECONDS = 60 * 60
INITIAL_ABSENCE_MARK_DELAY_SECONDS = 5
SCHEDULER_MISFIRE_GRACE_SECONDS = 60 * 60

AUTO_CHECKOUT_LOCATION = "Auto Checkout"
UNKNOWN_SHIFT_NAME = "Unknown Shift"
