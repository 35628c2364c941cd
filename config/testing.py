import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

API_TOKEN = "test-token"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MIN_OT_MINUTES = 15
ENFORCE_PRESENCE = False

PUNCH_WINDOW_POLICY = "grace"
AUTO_CHECKOUT_POLICY = "grace_after"
AUTO_CHECKOUT_FIXED_HOURS = 4

RUN_BACKGROUND_TASKS = False
AUTO_CHECKOUT_INTERVAL_SECONDS = 300
ABSENCE_MARK_INTERVAL_SECONDS = 3600
PRESENCE_RETENTION_DAYS = 7
