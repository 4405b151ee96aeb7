from __future__ import annotations

import hmac
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.logging import get_logger
from ..core.constants import DEFAULT_AUDIT_LIMIT
from ..core.exceptions import HashComputationError
from ..timesheets.model import Timesheet
from ..timesheets.repository import TimesheetRepository
from .hasher import compute_hash, normalize_salt, verify_hash
from .model import LedgerEntry
from .repository import LedgerRepository
from .secrets import SecretStore

logger = get_logger(__name__)


def build_ledger_entry(
    *,
    salt: str,
    timesheet: Timesheet,
    organization_id: str,
    clock_out_at: datetime,
    recorded_at: datetime,
    entry_id: Optional[str] = None,
) -> LedgerEntry:
    """Sign the closure of ``timesheet`` at ``clock_out_at``.

    Raises ``ConfigurationError`` without a salt and ``HashComputationError`` when the
    record's fields cannot be hashed.
    """
    digest = compute_hash(salt, timesheet.shift_id, timesheet.worker_id, timesheet.clock_in_at, clock_out_at)
    return LedgerEntry(
        entry_id=entry_id or uuid.uuid4().hex,
        shift_id=str(timesheet.shift_id),
        organization_id=organization_id,
        worker_id=timesheet.worker_id,
        clock_in_at=timesheet.clock_in_at,
        clock_out_at=clock_out_at,
        recorded_at=recorded_at,
        hash=digest,
    )


@dataclass(frozen=True)
class AuditReport:
    checked: int = 0
    tampered: list[str] = field(default_factory=list)
    missing_timesheets: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.tampered and not self.missing_timesheets


class LedgerAuditService:
    """Verifies ledger entries independently of the worker that wrote them.

    An entry is tampered when its stored hash does not match its own fields, or when the
    referenced timesheet's current values no longer hash to it.
    """

    def __init__(self, ledger: LedgerRepository, timesheets: TimesheetRepository, secrets: SecretStore):
        self._ledger = ledger
        self._timesheets = timesheets
        self._secrets = secrets

    def audit(self, *, organization_id: Optional[str] = None, limit: int = DEFAULT_AUDIT_LIMIT) -> AuditReport:
        salt = normalize_salt(self._secrets.get_ledger_salt())
        entries = self._ledger.list_entries(limit=limit, organization_id=organization_id)

        tampered: list[str] = []
        missing: list[str] = []
        for entry in entries:
            if not verify_hash(entry, salt):
                tampered.append(entry.entry_id)
                continue

            timesheet = self._timesheets.get_for_worker_and_shift(worker_id=entry.worker_id, shift_id=entry.shift_id)
            if timesheet is None:
                missing.append(entry.entry_id)
                continue
            if not self._timesheet_matches(entry, timesheet, salt):
                tampered.append(entry.entry_id)

        report = AuditReport(checked=len(entries), tampered=tampered, missing_timesheets=missing)
        if report.ok:
            logger.info("Ledger audit passed: %d entries checked", report.checked)
        else:
            logger.warning(
                "Ledger audit found %d tampered and %d orphaned entries out of %d",
                len(tampered),
                len(missing),
                report.checked,
            )
        return report

    @staticmethod
    def _timesheet_matches(entry: LedgerEntry, timesheet: Timesheet, salt: str) -> bool:
        try:
            current = compute_hash(
                salt,
                timesheet.shift_id,
                timesheet.worker_id,
                timesheet.clock_in_at,
                timesheet.clock_out_at,
            )
        except HashComputationError:
            return False
        return hmac.compare_digest(current, entry.hash)
