from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.secrets import EnvironmentSecretStore, SecretStore
from .ledger.service import LedgerAuditService
from .reconciliation.mysql_batch_writer import MySQLBatchWriter
from .reconciliation.query import OpenRecordQuery
from .reconciliation.worker import ReconciliationWorker
from .settings import WorkerSettings
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: WorkerSettings

    shifts_repo: MySQLShiftRepository
    timesheets_repo: MySQLTimesheetRepository
    ledger_repo: MySQLLedgerRepository
    batch_writer: MySQLBatchWriter
    secrets: SecretStore

    open_record_query: OpenRecordQuery
    reconciliation_worker: ReconciliationWorker
    ledger_audit_service: LedgerAuditService


def build_container(*, settings: WorkerSettings, secrets: Optional[SecretStore] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(settings.db_config))
    secrets = secrets or EnvironmentSecretStore()

    shifts_repo = MySQLShiftRepository(conn)
    timesheets_repo = MySQLTimesheetRepository(conn)
    ledger_repo = MySQLLedgerRepository(conn)
    batch_writer = MySQLBatchWriter(conn)

    open_record_query = OpenRecordQuery(
        timesheets_repo,
        shifts_repo,
        page_size=settings.page_size,
        organization_id=settings.organization_id,
    )
    reconciliation_worker = ReconciliationWorker(
        open_record_query,
        batch_writer,
        secrets,
        grace_minutes=settings.grace_minutes,
        max_batch_operations=settings.max_batch_operations,
    )
    ledger_audit_service = LedgerAuditService(ledger_repo, timesheets_repo, secrets)

    return Container(
        conn=conn,
        settings=settings,
        shifts_repo=shifts_repo,
        timesheets_repo=timesheets_repo,
        ledger_repo=ledger_repo,
        batch_writer=batch_writer,
        secrets=secrets,
        open_record_query=open_record_query,
        reconciliation_worker=reconciliation_worker,
        ledger_audit_service=ledger_audit_service,
    )
