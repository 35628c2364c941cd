import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

API_TOKEN = os.getenv("API_TOKEN", "please-set-API_TOKEN")

# Startup migrations still run; schema creation is opt-in
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MIN_OT_MINUTES = int(os.getenv("MIN_OT_MINUTES", "15"))
ENFORCE_PRESENCE = bool(int(os.getenv("ENFORCE_PRESENCE", "0")))

PUNCH_WINDOW_POLICY = os.getenv("PUNCH_WINDOW_POLICY", "grace")
AUTO_CHECKOUT_POLICY = os.getenv("AUTO_CHECKOUT_POLICY", "grace_after")
AUTO_CHECKOUT_FIXED_HOURS = int(os.getenv("AUTO_CHECKOUT_FIXED_HOURS", "4"))

RUN_BACKGROUND_TASKS = bool(int(os.getenv("RUN_BACKGROUND_TASKS", "1")))
AUTO_CHECKOUT_INTERVAL_SECONDS = int(os.getenv("AUTO_CHECKOUT_INTERVAL_SECONDS", "300"))
ABSENCE_MARK_INTERVAL_SECONDS = int(os.getenv("ABSENCE_MARK_INTERVAL_SECONDS", "3600"))
PRESENCE_RETENTION_DAYS = int(os.getenv("PRESENCE_RETENTION_DAYS", "7"))
