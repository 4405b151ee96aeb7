from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from ..alerts.model import Alert
from ..common.logging import get_logger
from ..core.constants import MAX_BATCH_OPERATIONS, OPERATIONS_PER_CLOSURE
from ..core.exceptions import StoreUnavailableError, ValidationError
from ..ledger.model import LedgerEntry
from ..timesheets.model import TimesheetClosure

logger = get_logger(__name__)


@dataclass(frozen=True)
class StagedClosure:
    """The three writes that close one record. They always land in the same group."""

    timesheet: TimesheetClosure
    ledger_entry: LedgerEntry
    alert: Alert

    @property
    def timesheet_id(self) -> str:
        return self.timesheet.timesheet_id

    @property
    def operation_count(self) -> int:
        return OPERATIONS_PER_CLOSURE


class BatchWriter(Protocol):
    def write_group(self, closures: Sequence[StagedClosure]) -> Sequence[str]:
        """Apply every closure in one atomic batch.

        The timesheet update is conditional on the record still being open; a closure
        whose record was closed meanwhile writes nothing. Returns the ids of the
        timesheets actually closed. Raises ``StoreUnavailableError`` when nothing was applied.
        """
        raise NotImplementedError


class BatchCommitter:
    """Partitions staged closures into bounded atomic groups and commits them in order.

    A group is committed as soon as it is full; ``flush`` commits the remainder. Groups
    never run concurrently, so a failure leaves every earlier group durable and every
    later record open for the next run.
    """

    def __init__(self, writer: BatchWriter, *, max_operations: int = MAX_BATCH_OPERATIONS):
        if max_operations < OPERATIONS_PER_CLOSURE:
            raise ValidationError(f"A batch must allow at least {OPERATIONS_PER_CLOSURE} operations")
        self._writer = writer
        self._group_size = max_operations // OPERATIONS_PER_CLOSURE
        self._pending: list[StagedClosure] = []

        self.closed: list[str] = []
        self.superseded: list[str] = []
        self.groups_committed = 0

    @property
    def group_size(self) -> int:
        return self._group_size

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def stage(self, closure: StagedClosure) -> None:
        self._pending.append(closure)
        if len(self._pending) >= self._group_size:
            self._commit_pending()

    def flush(self) -> None:
        if self._pending:
            self._commit_pending()

    def _commit_pending(self) -> None:
        group, self._pending = self._pending, []
        group_no = self.groups_committed + 1
        try:
            applied = set(self._writer.write_group(group))
        except StoreUnavailableError:
            logger.error("Batch group %d (%d closures) failed to commit", group_no, len(group))
            raise

        for closure in group:
            if closure.timesheet_id in applied:
                self.closed.append(closure.timesheet_id)
            else:
                self.superseded.append(closure.timesheet_id)
        self.groups_committed = group_no

        logger.info(
            "Committed batch group %d: %d closed, %d already closed by another writer",
            group_no,
            len(applied),
            len(group) - len(applied),
        )
