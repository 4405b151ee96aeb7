import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

AUTO_CLOCKOUT_GRACE_MINUTES = os.getenv("AUTO_CLOCKOUT_GRACE_MINUTES", "25")
RECONCILE_INTERVAL_MINUTES = os.getenv("RECONCILE_INTERVAL_MINUTES", "5")
RECONCILE_PAGE_SIZE = os.getenv("RECONCILE_PAGE_SIZE", "500")
RECONCILE_ORGANIZATION_ID = os.getenv("RECONCILE_ORGANIZATION_ID") or None
MAX_BATCH_OPERATIONS = os.getenv("MAX_BATCH_OPERATIONS", "500")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
