from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

import pytest

from src.attendance_ledger.attendance_ledger.alerts.model import Alert
from src.attendance_ledger.attendance_ledger.core.enums import AlertSeverity, AlertType
from src.attendance_ledger.attendance_ledger.core.exceptions import StoreUnavailableError, ValidationError
from src.attendance_ledger.attendance_ledger.ledger.model import LedgerEntry
from src.attendance_ledger.attendance_ledger.reconciliation.batch import BatchCommitter, StagedClosure
from src.attendance_ledger.attendance_ledger.timesheets.model import TimesheetClosure

NOW = datetime(2026, 3, 2, 17, 26, tzinfo=timezone.utc)
END = datetime(2026, 3, 2, 17, 0, tzinfo=timezone.utc)


def _closure(n: int) -> StagedClosure:
    return StagedClosure(
        timesheet=TimesheetClosure(timesheet_id=f"ts-{n}", clock_out_at=END, auto_clock_out_at=NOW),
        ledger_entry=LedgerEntry(
            entry_id=f"e-{n}",
            shift_id=f"s-{n}",
            organization_id="org-1",
            worker_id=f"w-{n}",
            clock_in_at=END,
            clock_out_at=END,
            recorded_at=NOW,
            hash="0" * 64,
        ),
        alert=Alert(
            alert_id=f"a-{n}",
            organization_id="org-1",
            type=AlertType.LATE_CLOCKOUT,
            severity=AlertSeverity.LOW,
            message="late",
            worker_id=f"w-{n}",
            shift_id=f"s-{n}",
            created_at=NOW,
        ),
    )


class RecordingWriter:
    def __init__(self, *, fail_on_group: int | None = None, already_closed: set[str] | None = None):
        self.groups: list[list[str]] = []
        self.fail_on_group = fail_on_group
        self.already_closed = already_closed or set()

    def write_group(self, closures: Sequence[StagedClosure]) -> Sequence[str]:
        if self.fail_on_group == len(self.groups) + 1:
            raise StoreUnavailableError("store down")
        ids = [c.timesheet_id for c in closures]
        self.groups.append(ids)
        return [i for i in ids if i not in self.already_closed]


def test_group_size_counts_three_writes_per_closure():
    assert BatchCommitter(RecordingWriter(), max_operations=500).group_size == 166
    assert BatchCommitter(RecordingWriter(), max_operations=6).group_size == 2


def test_batch_must_fit_one_closure():
    with pytest.raises(ValidationError):
        BatchCommitter(RecordingWriter(), max_operations=2)


def test_full_groups_commit_as_staged_and_flush_commits_remainder():
    writer = RecordingWriter()
    committer = BatchCommitter(writer, max_operations=6)

    for n in range(5):
        committer.stage(_closure(n))

    assert writer.groups == [["ts-0", "ts-1"], ["ts-2", "ts-3"]]
    assert committer.pending_count == 1

    committer.flush()

    assert writer.groups[-1] == ["ts-4"]
    assert committer.groups_committed == 3
    assert committer.closed == ["ts-0", "ts-1", "ts-2", "ts-3", "ts-4"]


def test_flush_without_pending_writes_nothing():
    writer = RecordingWriter()
    committer = BatchCommitter(writer)

    committer.flush()

    assert writer.groups == []
    assert committer.groups_committed == 0


def test_failure_keeps_earlier_groups_and_drops_failed_group():
    writer = RecordingWriter(fail_on_group=2)
    committer = BatchCommitter(writer, max_operations=6)
    committer.stage(_closure(0))
    committer.stage(_closure(1))
    committer.stage(_closure(2))

    with pytest.raises(StoreUnavailableError):
        committer.stage(_closure(3))

    assert committer.closed == ["ts-0", "ts-1"]
    assert committer.groups_committed == 1
    assert committer.pending_count == 0


def test_records_closed_by_another_writer_are_superseded():
    writer = RecordingWriter(already_closed={"ts-1"})
    committer = BatchCommitter(writer)
    committer.stage(_closure(0))
    committer.stage(_closure(1))

    committer.flush()

    assert committer.closed == ["ts-0"]
    assert committer.superseded == ["ts-1"]
