import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "school"),
    "password": os.getenv("DB_PASSWORD", "please-set-DB_PASSWORD"),
    "database": os.getenv("DB_NAME", "school_db"),
    "time_zone": os.getenv("DB_TIME_ZONE") or None,
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "America/Guatemala")

RISK_THRESHOLD_PERCENTAGE = float(os.getenv("RISK_THRESHOLD_PERCENTAGE", "80"))
CONSECUTIVE_ABSENCE_ALERT = int(os.getenv("CONSECUTIVE_ABSENCE_ALERT", "3"))
MAX_PAST_DAYS = int(os.getenv("MAX_PAST_DAYS", "30"))
MAX_NAVIGATION_ATTEMPTS = int(os.getenv("MAX_NAVIGATION_ATTEMPTS", "30"))
