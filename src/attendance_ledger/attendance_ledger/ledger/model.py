from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LedgerEntry:
    """Append-only audit record of an attendance closure. Never updated or deleted."""

    entry_id: str
    shift_id: str
    organization_id: str
    worker_id: str
    clock_in_at: datetime
    clock_out_at: datetime
    recorded_at: datetime
    hash: str
    auto_clock_out: bool = True
