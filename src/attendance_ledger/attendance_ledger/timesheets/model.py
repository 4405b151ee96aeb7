from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import TimesheetSource


@dataclass(frozen=True)
class Timesheet:
    """Attendance record: one per (worker, shift).

    ``clock_out_at`` is set at most once. ``source`` is ``auto`` exactly when
    ``auto_clock_out_at`` is set.
    """

    timesheet_id: str
    organization_id: str
    worker_id: str
    shift_id: Optional[str]
    clock_in_at: Optional[datetime]
    clock_out_at: Optional[datetime] = None
    auto_clock_out_at: Optional[datetime] = None
    source: TimesheetSource = TimesheetSource.MANUAL

    @property
    def is_open(self) -> bool:
        return self.clock_in_at is not None and self.clock_out_at is None and self.auto_clock_out_at is None


@dataclass(frozen=True)
class TimesheetClosure:
    """Staged mutation closing an open timesheet at its shift's scheduled end."""

    timesheet_id: str
    clock_out_at: datetime
    auto_clock_out_at: datetime
    source: TimesheetSource = TimesheetSource.AUTO
