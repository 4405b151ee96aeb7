from __future__ import annotations

from enum import Enum


class TimesheetSource(str, Enum):
    """Who closed the attendance record."""

    MANUAL = "manual"
    AUTO = "auto"


class ShiftStatus(str, Enum):
    """Shift lifecycle owned by the scheduling feature."""

    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class AlertType(str, Enum):
    LATE_CLOCKOUT = "late_clockout"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecordState(str, Enum):
    """Per-record reconciliation state within one run."""

    OPEN = "open"
    SKIPPED = "skipped"
    ELIGIBLE_FOR_CLOSE = "eligible_for_close"
    CLOSED = "closed"


class SkipReason(str, Enum):
    MISSING_SHIFT = "missing_shift"
    NOT_DUE = "not_due"
    INVALID_SHIFT = "invalid_shift"
    HASH_FAILED = "hash_failed"
    SUPERSEDED = "superseded"
