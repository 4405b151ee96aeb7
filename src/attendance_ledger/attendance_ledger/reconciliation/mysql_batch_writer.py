from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, to_db_datetime
from .batch import BatchWriter, StagedClosure


class MySQLBatchWriter(BatchWriter):
    """One MySQL transaction per group: every write applies or none does."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def write_group(self, closures: Sequence[StagedClosure]) -> Sequence[str]:
        applied: list[str] = []
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            for closure in closures:
                ts = closure.timesheet
                cur.execute(
                    """
                    UPDATE timesheets
                    SET clock_out_at=%s, auto_clock_out_at=%s, source=%s, updated_at=%s
                    WHERE timesheet_id=%s AND clock_out_at IS NULL AND auto_clock_out_at IS NULL
                    """,
                    (
                        to_db_datetime(ts.clock_out_at),
                        to_db_datetime(ts.auto_clock_out_at),
                        ts.source.value,
                        to_db_datetime(ts.auto_clock_out_at),
                        ts.timesheet_id,
                    ),
                )
                if cur.rowcount != 1:
                    # Closed by a manual clock-out since the query ran.
                    continue

                entry = closure.ledger_entry
                cur.execute(
                    """
                    INSERT INTO attendance_ledger(
                        entry_id, shift_id, organization_id, worker_id,
                        clock_in_at, clock_out_at, auto_clock_out, recorded_at, hash
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        entry.entry_id,
                        entry.shift_id,
                        entry.organization_id,
                        entry.worker_id,
                        to_db_datetime(entry.clock_in_at),
                        to_db_datetime(entry.clock_out_at),
                        int(entry.auto_clock_out),
                        to_db_datetime(entry.recorded_at),
                        entry.hash,
                    ),
                )

                alert = closure.alert
                cur.execute(
                    """
                    INSERT INTO alerts(
                        alert_id, organization_id, type, severity, message,
                        worker_id, shift_id, resolved, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        alert.alert_id,
                        alert.organization_id,
                        alert.type.value,
                        alert.severity.value,
                        alert.message,
                        alert.worker_id,
                        alert.shift_id,
                        int(alert.resolved),
                        to_db_datetime(alert.created_at),
                    ),
                )
                applied.append(ts.timesheet_id)
        return applied
