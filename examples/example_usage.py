"""Example: one reconciliation run and a ledger audit, without the scheduler.

Needs LEDGER_HASH_SALT in the environment and a database with schema.sql applied.
"""

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_ledger.attendance_ledger.common.logging import configure_logging
from src.attendance_ledger.attendance_ledger.container import build_container
from src.attendance_ledger.attendance_ledger.settings import load_worker_settings


def main():
    load_dotenv(override=False)
    settings = load_worker_settings(importlib.import_module(get_settings_module()))
    configure_logging(settings.log_level)

    container = build_container(settings=settings)
    report = container.reconciliation_worker.run()
    print(report.as_dict())

    audit = container.ledger_audit_service.audit(limit=50)
    print(f"checked={audit.checked} tampered={audit.tampered} missing={audit.missing_timesheets}")


if __name__ == "__main__":
    main()
