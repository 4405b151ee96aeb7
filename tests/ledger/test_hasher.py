from __future__ import annotations

import hashlib
import hmac
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from src.attendance_ledger.attendance_ledger.core.exceptions import ConfigurationError, HashComputationError
from src.attendance_ledger.attendance_ledger.ledger.hasher import compute_hash, normalize_salt, verify_hash
from src.attendance_ledger.attendance_ledger.ledger.model import LedgerEntry

SALT = "s3cret-salt"
CLOCK_IN = datetime(2026, 3, 2, 8, 58, tzinfo=timezone.utc)
CLOCK_OUT = datetime(2026, 3, 2, 17, 0, tzinfo=timezone.utc)


def _entry(**overrides) -> LedgerEntry:
    entry = LedgerEntry(
        entry_id="e-1",
        shift_id="shift-1",
        organization_id="org-1",
        worker_id="worker-1",
        clock_in_at=CLOCK_IN,
        clock_out_at=CLOCK_OUT,
        recorded_at=datetime(2026, 3, 2, 17, 26, tzinfo=timezone.utc),
        hash=compute_hash(SALT, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT),
    )
    return replace(entry, **overrides)


def test_digest_is_hmac_sha256_over_length_prefixed_fields():
    in_ms = str(int(CLOCK_IN.timestamp() * 1000))
    out_ms = str(int(CLOCK_OUT.timestamp() * 1000))
    message = f"7:shift-18:worker-1{len(in_ms)}:{in_ms}{len(out_ms)}:{out_ms}".encode("utf-8")
    expected = hmac.new(SALT.encode("utf-8"), message, hashlib.sha256).hexdigest()

    assert compute_hash(SALT, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT) == expected


def test_digest_is_deterministic_and_hex():
    first = compute_hash(SALT, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT)
    second = compute_hash(SALT, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT)

    assert first == second
    assert len(first) == 64
    int(first, 16)


def test_field_boundaries_cannot_collide():
    a = compute_hash(SALT, "ab", "c", CLOCK_IN, CLOCK_OUT)
    b = compute_hash(SALT, "a", "bc", CLOCK_IN, CLOCK_OUT)
    c = compute_hash(SALT, "a|b", "c", CLOCK_IN, CLOCK_OUT)
    d = compute_hash(SALT, "a", "b|c", CLOCK_IN, CLOCK_OUT)

    assert len({a, b, c, d}) == 4


def test_digest_depends_on_salt():
    assert compute_hash(SALT, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT) != compute_hash(
        "other", "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT
    )


def test_same_instant_in_other_zone_hashes_identically():
    shifted = CLOCK_OUT.astimezone(timezone(timedelta(hours=-5)))

    assert compute_hash(SALT, "shift-1", "worker-1", CLOCK_IN, shifted) == compute_hash(
        SALT, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT
    )


@pytest.mark.parametrize("salt", [None, "", "   "])
def test_missing_salt_is_configuration_error(salt):
    with pytest.raises(ConfigurationError):
        compute_hash(salt, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT)


@pytest.mark.parametrize(
    "shift_id,worker_id,clock_in,clock_out",
    [
        ("", "worker-1", CLOCK_IN, CLOCK_OUT),
        ("shift-1", None, CLOCK_IN, CLOCK_OUT),
        ("shift-1", "worker-1", None, CLOCK_OUT),
        ("shift-1", "worker-1", CLOCK_IN, None),
        ("shift-1", "worker-1", datetime(2026, 3, 2, 9, 0), CLOCK_OUT),
        ("shift-1", "worker-1", "2026-03-02T09:00:00Z", CLOCK_OUT),
    ],
)
def test_malformed_inputs_raise_hash_computation_error(shift_id, worker_id, clock_in, clock_out):
    with pytest.raises(HashComputationError):
        compute_hash(SALT, shift_id, worker_id, clock_in, clock_out)


def test_committed_entry_verifies():
    assert verify_hash(_entry(), SALT) is True


def test_wrong_salt_does_not_verify():
    assert verify_hash(_entry(), "not-the-salt") is False


def test_verify_without_salt_raises():
    with pytest.raises(ConfigurationError):
        verify_hash(_entry(), "")


@pytest.mark.parametrize(
    "change",
    [
        {"clock_in_at": CLOCK_IN - timedelta(minutes=30)},
        {"clock_out_at": CLOCK_OUT + timedelta(hours=2)},
        {"shift_id": "shift-2"},
        {"worker_id": "worker-2"},
    ],
)
def test_tampering_with_any_hashed_field_is_detected(change):
    original = _entry()
    tampered = replace(original, **change)
    recomputed = compute_hash(SALT, tampered.shift_id, tampered.worker_id, tampered.clock_in_at, tampered.clock_out_at)

    assert recomputed != original.hash
    assert verify_hash(tampered, SALT) is False


def test_entry_with_unhashable_fields_does_not_verify():
    assert verify_hash(_entry(clock_in_at=None), SALT) is False


@pytest.mark.parametrize("configured", ["s3cret-salt\n", "  s3cret-salt", "\ts3cret-salt \r\n"])
def test_surrounding_whitespace_in_salt_does_not_change_the_key(configured):
    assert compute_hash(configured, "shift-1", "worker-1", CLOCK_IN, CLOCK_OUT) == _entry().hash
    assert verify_hash(_entry(), configured)
    assert normalize_salt(configured) == SALT
