from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class Shift:
    """Scheduled work block. Read-only for reconciliation.

    ``start`` and ``end`` are "HH:MM" strings in UTC on ``day``.
    """

    shift_id: str
    organization_id: str
    day: date
    start: str
    end: str
    assigned_worker_id: Optional[str] = None
    status: ShiftStatus = ShiftStatus.PUBLISHED
