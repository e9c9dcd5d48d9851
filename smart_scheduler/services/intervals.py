"""Minute-of-day intervals derived from a day's events."""

from __future__ import annotations

from datetime import date, time
from typing import Iterable, NamedTuple

from smart_scheduler.domain.models import Event

MINUTES_PER_DAY = 24 * 60


class Interval(NamedTuple):
    """Half-open ``[start, end)`` range in minutes since midnight."""

    start: int
    end: int

    def overlaps(self, other: Interval) -> bool:
        return self.start < other.end and other.start < self.end


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as zero-padded ``HH:MM``."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range: {minutes}")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def intervals_for(events: Iterable[Event], day: date) -> list[Interval]:
    """Return the intervals of events on *day*, sorted by start minute.

    Overlapping bookings are passed through untouched. ``sorted`` is stable,
    so events starting at the same minute keep their input order.
    """
    intervals = [
        Interval(to_minutes(event.start_time), to_minutes(event.end_time))
        for event in events
        if event.date == day
    ]
    return sorted(intervals, key=lambda interval: interval.start)
