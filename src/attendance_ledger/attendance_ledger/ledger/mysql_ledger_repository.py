from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall
from .model import LedgerEntry
from .repository import LedgerRepository


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_entries(
        self,
        *,
        limit: int,
        organization_id: Optional[str] = None,
        shift_id: Optional[str] = None,
    ) -> Sequence[LedgerEntry]:
        clauses = ["1=1"]
        params: list[object] = []
        if organization_id is not None:
            clauses.append("organization_id=%s")
            params.append(organization_id)
        if shift_id is not None:
            clauses.append("shift_id=%s")
            params.append(shift_id)
        params.append(int(limit))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT entry_id, shift_id, organization_id, worker_id,
                       clock_in_at, clock_out_at, auto_clock_out, recorded_at, hash
                FROM attendance_ledger
                WHERE {where}
                ORDER BY recorded_at DESC, entry_id ASC
                LIMIT %s
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                LedgerEntry(
                    entry_id=str(r["entry_id"]),
                    shift_id=str(r["shift_id"]),
                    organization_id=str(r["organization_id"]),
                    worker_id=str(r["worker_id"]),
                    clock_in_at=as_utc(r["clock_in_at"]),
                    clock_out_at=as_utc(r["clock_out_at"]),
                    recorded_at=as_utc(r["recorded_at"]),
                    hash=str(r["hash"]),
                    auto_clock_out=bool(r.get("auto_clock_out", 1)),
                )
                for r in rows
            ]
