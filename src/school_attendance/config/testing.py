import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_db_test"),
    "time_zone": os.getenv("DB_TIME_ZONE") or None,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "America/Guatemala"

RISK_THRESHOLD_PERCENTAGE = 80.0
CONSECUTIVE_ABSENCE_ALERT = 3
MAX_PAST_DAYS = 30
MAX_NAVIGATION_ATTEMPTS = 30
