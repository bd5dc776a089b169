"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Upper bound for date navigation loops (previous/next allowed or school day).
MAX_NAVIGATION_ATTEMPTS = 30

DEFAULT_RISK_THRESHOLD_PERCENTAGE = 80.0
DEFAULT_CONSECUTIVE_ABSENCE_ALERT = 3
DEFAULT_MAX_PAST_DAYS = 30
DEFAULT_TIMEZONE = "America/Guatemala"

# Risk bands below the threshold, in percentage points.
RISK_BAND_WIDTH = 10.0
