"""Create the reconciliation tables in the database named by the active settings module.

Usage: APP_ENV=production python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_ledger.attendance_ledger.database.bootstrap import apply_schema, missing_tables
from src.attendance_ledger.attendance_ledger.settings import load_worker_settings


def main() -> int:
    load_dotenv(override=False)
    settings = load_worker_settings(importlib.import_module(get_settings_module()))
    db = settings.db_config

    apply_schema(db, schema_path=REPO_ROOT / "database" / "schema.sql")
    missing = missing_tables(db)
    target = f"{db.get('user')}@{db.get('host')}:{db.get('port', 3306)}/{db.get('database')}"
    if missing:
        print(f"FAILED: {target} is missing {', '.join(missing)}")
        return 1
    print(f"OK: reconciliation tables ready in {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
