from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import cutoff_instant, shift_end_instant
from ..core.constants import DEFAULT_GRACE_MINUTES, SEVERITY_ESCALATION_FACTOR
from ..core.enums import AlertSeverity, AlertType
from ..shifts.model import Shift
from ..timesheets.model import Timesheet
from .model import Alert


@dataclass(frozen=True)
class SeverityPolicy:
    """Severity from how far past the cutoff the record was found.

    ``low`` within one grace window after the cutoff, ``medium`` within
    ``escalation_factor`` windows, ``high`` beyond that. A zero grace falls back to the
    default grace as the window size.
    """

    grace_minutes: int = DEFAULT_GRACE_MINUTES
    escalation_factor: int = SEVERITY_ESCALATION_FACTOR

    @property
    def window(self) -> timedelta:
        return timedelta(minutes=self.grace_minutes or DEFAULT_GRACE_MINUTES)

    def severity_for(self, overdue: timedelta) -> AlertSeverity:
        if overdue <= self.window:
            return AlertSeverity.LOW
        if overdue <= self.window * self.escalation_factor:
            return AlertSeverity.MEDIUM
        return AlertSeverity.HIGH


def build_late_clockout_alert(
    record: Timesheet,
    shift: Shift,
    *,
    now: datetime,
    policy: Optional[SeverityPolicy] = None,
    alert_id: Optional[str] = None,
) -> Alert:
    """Pure construction; the alert is inserted together with its ledger entry."""
    policy = policy or SeverityPolicy()
    shift_end = shift_end_instant(shift.day, shift.end)
    overdue = now - cutoff_instant(shift_end, policy.grace_minutes)

    return Alert(
        alert_id=alert_id or uuid.uuid4().hex,
        organization_id=shift.organization_id,
        type=AlertType.LATE_CLOCKOUT,
        severity=policy.severity_for(overdue),
        message=(
            f"Worker {record.worker_id} was automatically clocked out of shift {shift.shift_id} "
            f"at its scheduled end ({shift_end:%Y-%m-%d %H:%M} UTC)."
        ),
        worker_id=record.worker_id,
        shift_id=shift.shift_id,
        created_at=now,
    )
