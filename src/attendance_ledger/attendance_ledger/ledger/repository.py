from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LedgerEntry


class LedgerRepository(Protocol):
    """Read side of the ledger, used by auditors. Inserts go through the batch writer."""

    def list_entries(
        self,
        *,
        limit: int,
        organization_id: Optional[str] = None,
        shift_id: Optional[str] = None,
    ) -> Sequence[LedgerEntry]:
        raise NotImplementedError
