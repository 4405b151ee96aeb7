from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional

from ..common.logging import get_logger
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import ReferenceNotFoundError, ValidationError
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from ..timesheets.model import Timesheet
from ..timesheets.repository import TimesheetRepository

logger = get_logger(__name__)


class OpenRecordQuery:
    """Read-only scan for attendance records still waiting for a clock-out.

    There is no cursor to resume: a record closed by a committed batch no longer
    matches the predicate, so each run simply queries again.
    """

    def __init__(
        self,
        timesheets: TimesheetRepository,
        shifts: ShiftRepository,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        organization_id: Optional[str] = None,
    ):
        if int(page_size) < 1:
            raise ValidationError("Page size must be at least 1")
        self._timesheets = timesheets
        self._shifts = shifts
        self._page_size = int(page_size)
        self._organization_id = organization_id

    @property
    def page_size(self) -> int:
        return self._page_size

    def find_open_records(
        self,
        page_size: Optional[int] = None,
        *,
        organization_id: Optional[str] = None,
        due_before: Optional[datetime] = None,
    ) -> Iterator[Timesheet]:
        """Open records, at most one page.

        ``due_before`` pushes the cutoff into the store query so that records which
        cannot be closed yet do not crowd due ones out of the page.
        """
        limit = int(page_size or self._page_size)
        scope = organization_id if organization_id is not None else self._organization_id

        seen = 0
        for record in self._timesheets.find_open(limit=limit, organization_id=scope, due_before=due_before):
            if seen >= limit:
                break
            if not record.is_open:
                logger.debug("Ignoring timesheet %s returned as open but already closed", record.timesheet_id)
                continue
            seen += 1
            yield record

    def shift_for(self, record: Timesheet) -> Shift:
        if not record.shift_id:
            raise ReferenceNotFoundError(f"Timesheet {record.timesheet_id} references no shift")
        shift = self._shifts.get_by_id(record.shift_id)
        if shift is None:
            raise ReferenceNotFoundError(f"Shift {record.shift_id} for timesheet {record.timesheet_id} not found")
        return shift
