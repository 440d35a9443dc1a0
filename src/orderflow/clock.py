"""Time providers for seasonal discounts and order timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Always returns the same instant. Naive datetimes are taken as UTC."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


def month_index(clock: Clock) -> int:
    """Zero-based month (0 = January, 11 = December)."""
    return clock.now().month - 1


def iso_timestamp(clock: Clock) -> str:
    return clock.now().astimezone(timezone.utc).isoformat()
