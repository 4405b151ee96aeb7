"""Keyed digest over the immutable fields of an attendance record.

The message is the length-prefixed concatenation of shift id, worker id, clock-in and
clock-out (epoch milliseconds, UTC)::

    <byte length>:<value><byte length>:<value>...

so no two different field splits can produce the same message. The digest is
HMAC-SHA256 keyed with the ledger salt, hex encoded.
"""

from __future__ import annotations

import hashlib
import hmac
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_epoch_millis
from ..core.constants import LEDGER_SALT_ENV
from ..core.exceptions import ConfigurationError, HashComputationError
from .model import LedgerEntry


def normalize_salt(salt: Optional[str]) -> str:
    """The key every digest is made with: the configured salt without surrounding whitespace."""
    if salt is None or not str(salt).strip():
        raise ConfigurationError(f"{LEDGER_SALT_ENV} is not configured")
    return str(salt).strip()


def _require_salt(salt: Optional[str]) -> bytes:
    return normalize_salt(salt).encode("utf-8")


def _id_field(value: Optional[str], name: str) -> str:
    if value is None or not str(value):
        raise HashComputationError(f"{name} is empty")
    return str(value)


def _instant_field(value: Optional[datetime], name: str) -> str:
    if value is None:
        raise HashComputationError(f"{name} is not set")
    if not isinstance(value, datetime):
        raise HashComputationError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        raise HashComputationError(f"{name} has no timezone")
    return str(to_epoch_millis(value))


def _encode(fields: list[str]) -> bytes:
    out = bytearray()
    for field in fields:
        raw = field.encode("utf-8")
        out += str(len(raw)).encode("ascii") + b":" + raw
    return bytes(out)


def compute_hash(
    salt: Optional[str],
    shift_id: Optional[str],
    worker_id: Optional[str],
    clock_in_at: Optional[datetime],
    clock_out_at: Optional[datetime],
) -> str:
    key = _require_salt(salt)
    message = _encode(
        [
            _id_field(shift_id, "shift_id"),
            _id_field(worker_id, "worker_id"),
            _instant_field(clock_in_at, "clock_in_at"),
            _instant_field(clock_out_at, "clock_out_at"),
        ]
    )
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def verify_hash(entry: LedgerEntry, salt: Optional[str]) -> bool:
    """Recompute the digest of ``entry`` and compare it with the stored one.

    Raises ``ConfigurationError`` without a salt; an entry whose fields cannot be
    hashed does not verify.
    """
    _require_salt(salt)
    try:
        expected = compute_hash(salt, entry.shift_id, entry.worker_id, entry.clock_in_at, entry.clock_out_at)
    except HashComputationError:
        return False
    return hmac.compare_digest(expected, str(entry.hash or ""))
