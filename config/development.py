import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Empty token disables the bearer check (local development only)
API_TOKEN = os.getenv("API_TOKEN", "")

# Apply schema.sql and startup migrations on boot (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

MIN_OT_MINUTES = int(os.getenv("MIN_OT_MINUTES", "15"))
ENFORCE_PRESENCE = bool(int(os.getenv("ENFORCE_PRESENCE", "0")))

# grace | windows
PUNCH_WINDOW_POLICY = os.getenv("PUNCH_WINDOW_POLICY", "grace")
# grace_after | fixed_hours
AUTO_CHECKOUT_POLICY = os.getenv("AUTO_CHECKOUT_POLICY", "grace_after")
AUTO_CHECKOUT_FIXED_HOURS = int(os.getenv("AUTO_CHECKOUT_FIXED_HOURS", "4"))

RUN_BACKGROUND_TASKS = bool(int(os.getenv("RUN_BACKGROUND_TASKS", "1")))
AUTO_CHECKOUT_INTERVAL_SECONDS = int(os.getenv("AUTO_CHECKOUT_INTERVAL_SECONDS", "300"))
ABSENCE_MARK_INTERVAL_SECONDS = int(os.getenv("ABSENCE_MARK_INTERVAL_SECONDS", "3600"))
PRESENCE_RETENTION_DAYS = int(os.getenv("PRESENCE_RETENTION_DAYS", "7"))
