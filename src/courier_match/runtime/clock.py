# runtime/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Protocol, runtime_checkable

MIN = timedelta(minutes=1)


def minutes(x: float) -> timedelta:
    return x * MIN


def _resolve_tz(tz: tzinfo | str | None) -> tzinfo | None:
    if isinstance(tz, str):
        from zoneinfo import ZoneInfo  # py>=3.9

        return ZoneInfo(tz)
    return tz


def with_tz(dt: datetime, tz: tzinfo | str | None) -> datetime:
    """Return dt in the requested timezone (tzinfo or IANA string).
    If tz is None, dt is returned unchanged (naive stays local wall time)."""
    tz = _resolve_tz(tz)
    if tz is None:
        return dt
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(tz)


def hour_at(dt: datetime, *, tz: tzinfo | str | None = None) -> int:
    """Return hour-of-day 0..23 in the requested time zone (DST-aware)."""
    return with_tz(dt, tz).hour


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


@dataclass(frozen=True)
class SystemClock:
    tz: tzinfo | str | None = None  # None => naive host-local time

    def now(self) -> datetime:
        tz = _resolve_tz(self.tz)
        return datetime.now(tz) if tz is not None else datetime.now()


@dataclass(frozen=True)
class FixedClock:
    """Always returns `at`; used for replays and tests."""

    at: datetime

    def now(self) -> datetime:
        return self.at

    @classmethod
    def utc(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> FixedClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC))
