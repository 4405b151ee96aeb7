from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional

from ..core.enums import TimesheetSource
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from .model import Timesheet
from .repository import TimesheetRepository

_COLUMNS = """
    timesheet_id, organization_id, worker_id, shift_id,
    clock_in_at, clock_out_at, auto_clock_out_at, source
"""

_OPEN_COLUMNS = """
    t.timesheet_id, t.organization_id, t.worker_id, t.shift_id,
    t.clock_in_at, t.clock_out_at, t.auto_clock_out_at, t.source
"""


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_open(
        self,
        *,
        limit: int,
        organization_id: Optional[str] = None,
        due_before: Optional[datetime] = None,
    ) -> Iterator[Timesheet]:
        joins = ""
        clauses = ["t.clock_in_at IS NOT NULL", "t.clock_out_at IS NULL", "t.auto_clock_out_at IS NULL"]
        params: list[object] = []
        if organization_id is not None:
            clauses.append("t.organization_id=%s")
            params.append(organization_id)
        if due_before is not None:
            # Records of missing, overnight or not-yet-ended shifts never take a slot in the page.
            joins = "JOIN shifts s ON s.shift_id = t.shift_id"
            clauses.append("TIME(s.end_time) > TIME(s.start_time)")
            clauses.append("TIMESTAMP(s.day, s.end_time) <= %s")
            params.append(to_db_datetime(due_before))
        params.append(int(limit))
        where = " AND ".join(clauses)

        # The connection is released before the first record is handed out.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_OPEN_COLUMNS}
                FROM timesheets t
                {joins}
                WHERE {where}
                ORDER BY t.clock_in_at ASC, t.timesheet_id ASC
                LIMIT %s
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        for r in rows:
            yield self._to_model(r)

    def get_for_worker_and_shift(self, *, worker_id: str, shift_id: str) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timesheets
                WHERE worker_id=%s AND shift_id=%s
                """,
                (worker_id, shift_id),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    @staticmethod
    def _to_model(r: dict) -> Timesheet:
        return Timesheet(
            timesheet_id=str(r["timesheet_id"]),
            organization_id=str(r["organization_id"]),
            worker_id=str(r["worker_id"]),
            shift_id=r.get("shift_id"),
            clock_in_at=as_utc(r.get("clock_in_at")),
            clock_out_at=as_utc(r.get("clock_out_at")),
            auto_clock_out_at=as_utc(r.get("auto_clock_out_at")),
            source=TimesheetSource(r.get("source") or TimesheetSource.MANUAL.value),
        )
