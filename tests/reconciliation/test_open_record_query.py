from __future__ import annotations

import inspect
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from src.attendance_ledger.attendance_ledger.core.exceptions import ReferenceNotFoundError, ValidationError
from src.attendance_ledger.attendance_ledger.reconciliation.query import OpenRecordQuery
from src.attendance_ledger.attendance_ledger.shifts.model import Shift
from src.attendance_ledger.attendance_ledger.timesheets.model import Timesheet

BASE = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


class InMemoryTimesheets:
    def __init__(self, items: list[Timesheet]):
        self.items = items
        self.calls: list[dict] = []

    def find_open(self, *, limit: int, organization_id: Optional[str] = None, due_before=None):
        self.calls.append({"limit": limit, "organization_id": organization_id, "due_before": due_before})
        matches = [t for t in self.items if organization_id is None or t.organization_id == organization_id]
        return iter(matches[:limit])


class InMemoryShifts:
    def __init__(self, shifts: dict[str, Shift]):
        self.shifts = shifts

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        return self.shifts.get(shift_id)


def _ts(n: int, *, org: str = "org-1", closed: bool = False, shift_id: Optional[str] = "shift-1") -> Timesheet:
    clock_in = BASE + timedelta(minutes=n)
    return Timesheet(
        timesheet_id=f"ts-{n}",
        organization_id=org,
        worker_id=f"w-{n}",
        shift_id=shift_id,
        clock_in_at=clock_in,
        clock_out_at=clock_in + timedelta(hours=8) if closed else None,
    )


def test_returns_lazy_sequence_capped_at_page_size():
    repo = InMemoryTimesheets([_ts(n) for n in range(5)])
    query = OpenRecordQuery(repo, InMemoryShifts({}), page_size=3)

    records = query.find_open_records()

    assert inspect.isgenerator(records)
    assert repo.calls == []
    assert [r.timesheet_id for r in records] == ["ts-0", "ts-1", "ts-2"]
    assert repo.calls == [{"limit": 3, "organization_id": None, "due_before": None}]


def test_explicit_page_size_overrides_default():
    repo = InMemoryTimesheets([_ts(n) for n in range(5)])
    query = OpenRecordQuery(repo, InMemoryShifts({}), page_size=3)

    assert len(list(query.find_open_records(2))) == 2


def test_drops_records_that_are_not_open():
    repo = InMemoryTimesheets([_ts(0), _ts(1, closed=True), _ts(2)])
    query = OpenRecordQuery(repo, InMemoryShifts({}))

    assert [r.timesheet_id for r in query.find_open_records()] == ["ts-0", "ts-2"]


def test_scopes_to_configured_organization():
    repo = InMemoryTimesheets([_ts(0, org="org-1"), _ts(1, org="org-2")])
    query = OpenRecordQuery(repo, InMemoryShifts({}), organization_id="org-2")

    assert [r.timesheet_id for r in query.find_open_records()] == ["ts-1"]
    assert [r.timesheet_id for r in query.find_open_records(organization_id="org-1")] == ["ts-0"]


def test_page_size_must_be_positive():
    with pytest.raises(ValidationError):
        OpenRecordQuery(InMemoryTimesheets([]), InMemoryShifts({}), page_size=0)


def test_shift_for_returns_referenced_shift():
    shift = Shift(shift_id="shift-1", organization_id="org-1", day=date(2026, 3, 2), start="09:00", end="17:00")
    query = OpenRecordQuery(InMemoryTimesheets([]), InMemoryShifts({"shift-1": shift}))

    assert query.shift_for(_ts(0)) is shift


@pytest.mark.parametrize("shift_id", [None, "", "missing"])
def test_shift_for_raises_when_shift_cannot_be_found(shift_id):
    query = OpenRecordQuery(InMemoryTimesheets([]), InMemoryShifts({}))

    with pytest.raises(ReferenceNotFoundError):
        query.shift_for(_ts(0, shift_id=shift_id))


def test_due_cutoff_is_pushed_into_the_store_query():
    repo = InMemoryTimesheets([_ts(0)])
    query = OpenRecordQuery(repo, InMemoryShifts({}), page_size=2)
    cutoff = datetime(2026, 3, 2, 16, 35, tzinfo=timezone.utc)

    list(query.find_open_records(due_before=cutoff))

    assert repo.calls == [{"limit": 2, "organization_id": None, "due_before": cutoff}]
