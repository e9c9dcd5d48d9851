"""Service for reporting overlaps between events on the same day."""

from __future__ import annotations

from datetime import date, time
from typing import Iterable

from smart_scheduler.domain.models import Event
from smart_scheduler.services.intervals import Interval, to_minutes


def find_conflicts(
    day: date,
    start_time: time,
    end_time: time,
    existing_events: Iterable[Event],
    *,
    exclude_id: str | None = None,
) -> list[Event]:
    """Return events on *day* that overlap ``[start_time, end_time)``.

    Exact boundary touches (end == start) are NOT considered conflicts.
    Overlap is reported, never rejected.
    """
    candidate = Interval(to_minutes(start_time), to_minutes(end_time))
    return [
        event
        for event in existing_events
        if event.date == day
        and event.id != exclude_id
        and candidate.overlaps(
            Interval(to_minutes(event.start_time), to_minutes(event.end_time))
        )
    ]


def describe_conflicts(conflicts: Iterable[Event]) -> list[str]:
    return [
        f"{event.title} ({event.start_time:%H:%M}-{event.end_time:%H:%M})"
        for event in conflicts
    ]
