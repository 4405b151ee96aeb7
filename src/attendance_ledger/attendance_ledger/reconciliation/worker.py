from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..alerts.emitter import SeverityPolicy, build_late_clockout_alert
from ..common.datetime_utils import cutoff_instant, ensure_same_day_shift, shift_end_instant, to_utc, utc_now
from ..common.logging import get_logger
from ..core.constants import LEDGER_SALT_ENV, MAX_BATCH_OPERATIONS
from ..core.enums import RecordState, SkipReason
from ..core.exceptions import (
    ConfigurationError,
    HashComputationError,
    ReferenceNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from ..ledger.hasher import normalize_salt
from ..ledger.secrets import SecretStore
from ..ledger.service import build_ledger_entry
from ..timesheets.model import Timesheet, TimesheetClosure
from .batch import BatchCommitter, BatchWriter, StagedClosure
from .query import OpenRecordQuery

logger = get_logger(__name__)


@dataclass
class RunReport:
    started_at: datetime
    scanned: int = 0
    closed: list[str] = field(default_factory=list)
    superseded: list[str] = field(default_factory=list)
    skipped: Counter = field(default_factory=Counter)
    groups_committed: int = 0
    states: dict[str, RecordState] = field(default_factory=dict)
    completed: bool = False

    def as_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "scanned": self.scanned,
            "closed": len(self.closed),
            "superseded": len(self.superseded),
            "skipped": {reason.value: count for reason, count in self.skipped.items()},
            "groups_committed": self.groups_committed,
            "completed": self.completed,
        }


class ReconciliationWorker:
    """Closes attendance records left open past their shift's cutoff.

    Per record: ``open`` -> ``skipped`` (shift missing, invalid or not yet due) or
    ``eligible_for_close`` -> ``closed`` once its batch group commits. The record is
    closed at the shift's scheduled end, never at the time of the run.

    Runs are safe to repeat: closed records drop out of the open-record query. The
    trigger must not start two runs at once; nothing here locks.
    """

    def __init__(
        self,
        query: OpenRecordQuery,
        writer: BatchWriter,
        secrets: SecretStore,
        *,
        grace_minutes: int,
        max_batch_operations: int = MAX_BATCH_OPERATIONS,
        severity_policy: Optional[SeverityPolicy] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        if int(grace_minutes) < 0:
            raise ConfigurationError("AUTO_CLOCKOUT_GRACE_MINUTES must be >= 0")
        self._query = query
        self._writer = writer
        self._secrets = secrets
        self._grace_minutes = int(grace_minutes)
        self._max_batch_operations = int(max_batch_operations)
        self._policy = severity_policy or SeverityPolicy(grace_minutes=self._grace_minutes)
        self._clock = clock

        self.last_report: Optional[RunReport] = None

    def run(self, *, now: Optional[datetime] = None, organization_id: Optional[str] = None) -> RunReport:
        try:
            salt = normalize_salt(self._secrets.get_ledger_salt())
        except ConfigurationError:
            logger.error("%s is not configured; skipping auto clock-out run with no writes", LEDGER_SALT_ENV)
            raise

        now = to_utc(now) if now else self._clock()
        report = RunReport(started_at=now)
        self.last_report = report
        committer = BatchCommitter(self._writer, max_operations=self._max_batch_operations)

        logger.info(
            "Starting auto clock-out run at %s (grace=%d min, page_size=%d, organization=%s)",
            now.isoformat(),
            self._grace_minutes,
            self._query.page_size,
            organization_id or "all",
        )

        due_before = now - timedelta(minutes=self._grace_minutes)
        try:
            for record in self._query.find_open_records(organization_id=organization_id, due_before=due_before):
                report.scanned += 1
                report.states[record.timesheet_id] = RecordState.OPEN

                reason = None
                try:
                    closure = self._stage(record, now=now, salt=salt)
                except ReferenceNotFoundError as exc:
                    logger.warning("Skipping timesheet %s: %s", record.timesheet_id, exc)
                    reason = SkipReason.MISSING_SHIFT
                except ValidationError as exc:
                    logger.warning("Skipping timesheet %s: %s", record.timesheet_id, exc)
                    reason = SkipReason.INVALID_SHIFT
                except HashComputationError as exc:
                    logger.warning("Skipping timesheet %s: ledger hash failed: %s", record.timesheet_id, exc)
                    reason = SkipReason.HASH_FAILED
                else:
                    if closure is None:
                        logger.debug("Timesheet %s is not yet due", record.timesheet_id)
                        reason = SkipReason.NOT_DUE

                if reason is not None:
                    report.skipped[reason] += 1
                    report.states[record.timesheet_id] = RecordState.SKIPPED
                    continue

                report.states[record.timesheet_id] = RecordState.ELIGIBLE_FOR_CLOSE
                committer.stage(closure)

            committer.flush()
            report.completed = True
        except StoreUnavailableError as exc:
            logger.error(
                "Auto clock-out run aborted: %s; %d batch groups (%d records) already durable",
                exc,
                committer.groups_committed,
                len(committer.closed),
            )
            raise
        finally:
            self._collect(report, committer)

        logger.info(
            "Auto clock-out run finished: scanned=%d closed=%d superseded=%d skipped=%d groups=%d",
            report.scanned,
            len(report.closed),
            len(report.superseded),
            sum(report.skipped.values()),
            report.groups_committed,
        )
        return report

    def _stage(self, record: Timesheet, *, now: datetime, salt: str) -> Optional[StagedClosure]:
        shift = self._query.shift_for(record)
        ensure_same_day_shift(shift.start, shift.end)

        shift_end = shift_end_instant(shift.day, shift.end)
        if now < cutoff_instant(shift_end, self._grace_minutes):
            return None

        # A clock-in after the scheduled end closes with zero duration, not a negative one.
        clock_out_at = shift_end
        if record.clock_in_at is not None and record.clock_in_at > shift_end:
            clock_out_at = record.clock_in_at

        entry = build_ledger_entry(
            salt=salt,
            timesheet=record,
            organization_id=shift.organization_id,
            clock_out_at=clock_out_at,
            recorded_at=now,
        )
        alert = build_late_clockout_alert(record, shift, now=now, policy=self._policy)
        return StagedClosure(
            timesheet=TimesheetClosure(
                timesheet_id=record.timesheet_id,
                clock_out_at=clock_out_at,
                auto_clock_out_at=now,
            ),
            ledger_entry=entry,
            alert=alert,
        )

    @staticmethod
    def _collect(report: RunReport, committer: BatchCommitter) -> None:
        report.closed = list(committer.closed)
        report.superseded = list(committer.superseded)
        report.groups_committed = committer.groups_committed
        for timesheet_id in committer.closed:
            report.states[timesheet_id] = RecordState.CLOSED
        for timesheet_id in committer.superseded:
            report.states[timesheet_id] = RecordState.SKIPPED
        if committer.superseded:
            report.skipped[SkipReason.SUPERSEDED] += len(committer.superseded)
