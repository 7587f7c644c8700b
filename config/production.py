import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "care_timesheet"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

CYCLE_REFERENCE_DATE = os.getenv("CYCLE_REFERENCE_DATE", "2025-03-03")
CYCLE_CONFIG_VERSION = int(os.getenv("CYCLE_CONFIG_VERSION", "1"))

APPROVED_VISIBILITY_HOURS = float(os.getenv("APPROVED_VISIBILITY_HOURS", "24"))
DEFAULT_HOURLY_RATE = float(os.getenv("DEFAULT_HOURLY_RATE", "0"))
