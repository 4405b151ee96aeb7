from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AlertSeverity, AlertType


@dataclass(frozen=True)
class Alert:
    """Operational notification. Resolved later by a manager, outside this package."""

    alert_id: str
    organization_id: str
    type: AlertType
    severity: AlertSeverity
    message: str
    worker_id: str
    shift_id: str
    created_at: datetime
    resolved: bool = False
