from __future__ import annotations

from typing import Optional

from ..core.enums import ShiftStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_time_of_day
from .model import Shift
from .repository import ShiftRepository


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, organization_id, day, start_time, end_time, assigned_worker_id, status
                FROM shifts
                WHERE shift_id=%s
                """,
                (shift_id,),
            )
            r = fetchone(cur)
        if not r:
            return None
        return self._to_model(r)

    @staticmethod
    def _to_model(r: dict) -> Shift:
        """Raises ``ValidationError`` for a row that cannot describe a shift."""
        try:
            return Shift(
                shift_id=str(r["shift_id"]),
                organization_id=str(r["organization_id"]),
                day=r["day"],
                start=normalize_time_of_day(r["start_time"]),
                end=normalize_time_of_day(r["end_time"]),
                assigned_worker_id=r.get("assigned_worker_id"),
                status=ShiftStatus(r["status"]),
            )
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Shift {r.get('shift_id')} is unreadable: {exc}") from exc
