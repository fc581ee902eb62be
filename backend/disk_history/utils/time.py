"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_ms(value: datetime) -> int:
    """Milliseconds since the Unix epoch; sub-millisecond digits are dropped."""
    delta = as_utc(value) - EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def to_ms_ceil(value: datetime) -> int:
    """Smallest whole millisecond not earlier than ``value``."""
    delta = as_utc(value) - EPOCH
    return to_ms(value) + (1 if delta.microseconds % 1000 else 0)


def from_ms(value: int) -> datetime:
    return EPOCH + timedelta(milliseconds=int(value))


__all__ = ["EPOCH", "FAR_FUTURE", "utc_now", "as_utc", "to_ms", "to_ms_ceil", "from_ms"]
