"""Service for suggesting the earliest free slot in the working day."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Sequence

from smart_scheduler.domain.models import Event, SlotSuggestion
from smart_scheduler.services.intervals import Interval, format_minutes, intervals_for

logger = logging.getLogger(__name__)

WORKING_DAY_START = 9 * 60
WORKING_DAY_END = 18 * 60
DEFAULT_DURATION_MINUTES = 60

NO_SLOT_MESSAGE = "No free slot found for the selected duration."


def normalize_duration(duration_minutes: int | str | None) -> int:
    """Coerce a requested duration to whole minutes.

    Raw query values are accepted as-is; anything missing, unparseable or
    non-positive falls back to the default duration.
    """
    if isinstance(duration_minutes, str):
        try:
            duration_minutes = int(duration_minutes.strip())
        except ValueError:
            return DEFAULT_DURATION_MINUTES
    if duration_minutes is None or duration_minutes <= 0:
        return DEFAULT_DURATION_MINUTES
    return duration_minutes


def find_free_slot(
    intervals: Sequence[Interval],
    duration_minutes: int,
    *,
    window_start: int = WORKING_DAY_START,
    window_end: int = WORKING_DAY_END,
) -> Interval | None:
    """Return the first gap of *duration_minutes* in the window, or ``None``.

    *intervals* must be sorted by start. The cursor only ever moves forward
    (``max`` of itself and each booking's end), so overlapping or nested
    bookings never reopen a gap they cover. A virtual booking at
    *window_end* closes the day, and gaps are clipped to it.
    """
    cursor = window_start
    for next_start, next_end in [*intervals, Interval(window_end, window_end)]:
        gap_end = min(next_start, window_end)
        if gap_end - cursor >= duration_minutes:
            return Interval(cursor, cursor + duration_minutes)
        cursor = max(cursor, next_end)
        if cursor >= window_end:
            break
    return None


def suggest_slot(
    events: Iterable[Event], day: date, duration_minutes: int | str | None = None
) -> SlotSuggestion:
    """Suggest the earliest free slot on *day* given the owner's events."""
    duration = normalize_duration(duration_minutes)
    slot = find_free_slot(intervals_for(events, day), duration)
    if slot is None:
        logger.info("No %d-minute slot free on %s", duration, day)
        return SlotSuggestion(
            available=False,
            date=day,
            duration_minutes=duration,
            message=NO_SLOT_MESSAGE,
        )
    return SlotSuggestion(
        available=True,
        date=day,
        duration_minutes=duration,
        start_time=format_minutes(slot.start),
        end_time=format_minutes(slot.end),
    )
