import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_test"),
}

AUTO_CLOCKOUT_GRACE_MINUTES = "25"
RECONCILE_INTERVAL_MINUTES = "5"
RECONCILE_PAGE_SIZE = "500"
RECONCILE_ORGANIZATION_ID = None
MAX_BATCH_OPERATIONS = "500"

LOG_LEVEL = "DEBUG"
TESTING = True

AUTO_INIT_DB = False
