from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from apscheduler.schedulers.blocking import BlockingScheduler
from dotenv import load_dotenv

from config import get_settings_module

from .common.datetime_utils import utc_now
from .common.logging import configure_logging, get_logger
from .container import Container, build_container
from .core.constants import RECONCILE_JOB_ID
from .core.exceptions import ConfigurationError, StoreUnavailableError
from .database.bootstrap import apply_schema, missing_tables
from .reconciliation.worker import ReconciliationWorker, RunReport
from .settings import load_worker_settings

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def run_reconciliation(worker: ReconciliationWorker) -> Optional[RunReport]:
    """Scheduled job body: one reconciliation run.

    Configuration and store failures end the run and are retried on the next tick.
    """
    try:
        return worker.run()
    except ConfigurationError as exc:
        logger.error("Auto clock-out run skipped: %s", exc)
    except StoreUnavailableError as exc:
        logger.error("Auto clock-out run aborted, will retry on next tick: %s", exc)
    return None


def register_jobs(scheduler: BlockingScheduler, container: Container) -> None:
    scheduler.add_job(
        run_reconciliation,
        "interval",
        minutes=container.settings.interval_minutes,
        args=[container.reconciliation_worker],
        id=RECONCILE_JOB_ID,
        max_instances=1,
        coalesce=True,
        next_run_time=utc_now(),
        replace_existing=True,
    )


def create_scheduler() -> BlockingScheduler:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = load_worker_settings(importlib.import_module(settings_module))
    configure_logging(settings.log_level)

    db = settings.db_config
    logger.info(
        "settings=%s db=%s@%s:%s/%s interval=%d min",
        settings_module,
        db.get("user"),
        db.get("host"),
        db.get("port", 3306),
        db.get("database"),
        settings.interval_minutes,
    )

    if settings.auto_init_db:
        apply_schema(settings.db_config, schema_path=SCHEMA_PATH)
        missing = missing_tables(settings.db_config)
        if missing:
            raise ConfigurationError(f"Schema is missing tables: {', '.join(missing)}")
        logger.info("schema ready")

    container = build_container(settings=settings)

    scheduler = BlockingScheduler(timezone="UTC", job_defaults={"coalesce": True, "max_instances": 1})
    register_jobs(scheduler, container)
    return scheduler


def main() -> None:
    scheduler = create_scheduler()
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
