"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SUBJECT = "Class Session"
UNKNOWN_NAME = "Unknown"
DEFAULT_LATE_THRESHOLD_MINUTES = 15
REFRESH_INTERVAL_SECONDS = 5
CSV_DELIMITER = ","
NOT_AVAILABLE = "N/A"
DEFAULT_SESSION_LIST_LIMIT = 50
