from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional, Protocol

from .model import Timesheet


class TimesheetRepository(Protocol):
    def find_open(
        self,
        *,
        limit: int,
        organization_id: Optional[str] = None,
        due_before: Optional[datetime] = None,
    ) -> Iterator[Timesheet]:
        """Records clocked in with neither a clock-out nor an auto clock-out, oldest clock-in first.

        With ``due_before``, only records whose same-day shift exists and ended at or
        before that instant are returned.
        """
        raise NotImplementedError

    def get_for_worker_and_shift(self, *, worker_id: str, shift_id: str) -> Optional[Timesheet]:
        raise NotImplementedError
