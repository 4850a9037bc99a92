from __future__ import annotations

from datetime import UTC, datetime, timedelta


def now_utc() -> datetime:
    return datetime.now(UTC)


def now_millis() -> int:
    return to_millis(now_utc())


def to_millis(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def from_millis(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=UTC)


def duration_millis(delta: timedelta) -> int:
    return int(delta.total_seconds() * 1000)


def format_timestamp(millis: int) -> str:
    return from_millis(millis).strftime("%Y-%m-%d %H:%M:%S UTC")
