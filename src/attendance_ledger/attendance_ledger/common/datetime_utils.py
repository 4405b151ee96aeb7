"""Clock arithmetic for shift ends and auto clock-out cutoffs.

Zone convention: a shift's ``day`` is a calendar date and its ``start``/``end`` are
"HH:MM" wall-clock strings already normalized to UTC. Every instant produced here is a
timezone-aware UTC ``datetime``; the host's local zone is never consulted.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from ..core.exceptions import UnsupportedShiftError, ValidationError


def parse_time_of_day(value: str) -> time:
    """Parse an "HH:MM" string into a ``time``."""
    v = (value or "").strip()
    try:
        return datetime.strptime(v, "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Invalid time of day (HH:MM): {value!r}")


def ensure_same_day_shift(start: str, end: str) -> None:
    """Reject overnight shifts: the end must fall after the start on the same day."""
    if parse_time_of_day(end) <= parse_time_of_day(start):
        raise UnsupportedShiftError(f"Shift end {end} is not after start {start}; overnight shifts are not supported")


def shift_end_instant(day: date, end_time_of_day: str) -> datetime:
    return datetime.combine(day, parse_time_of_day(end_time_of_day), tzinfo=timezone.utc)


def cutoff_instant(shift_end: datetime, grace_minutes: int) -> datetime:
    if grace_minutes < 0:
        raise ValidationError("Grace minutes must be non-negative")
    return shift_end + timedelta(minutes=grace_minutes)


def to_utc(value: datetime) -> datetime:
    """Attach UTC to naive values and convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    return int(to_utc(value).timestamp() * 1000)


def utc_now() -> datetime:
    """Default clock for the worker; tests pass a fixed ``now`` instead."""
    return datetime.now(timezone.utc)
