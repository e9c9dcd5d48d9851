"""Tests for deriving minute intervals from a day's events."""

from __future__ import annotations

from datetime import date, time

import pytest

from smart_scheduler.domain.models import Event
from smart_scheduler.services.intervals import (
    Interval,
    format_minutes,
    intervals_for,
    to_minutes,
)

DAY = date(2024, 6, 1)


def _event(start: time, end: time, day: date = DAY, title: str = "Booked") -> Event:
    return Event(owner_id="u1", title=title, date=day, start_time=start, end_time=end)


def test_to_minutes_is_exact():
    assert to_minutes(time(0, 0)) == 0
    assert to_minutes(time(9, 0)) == 540
    assert to_minutes(time(14, 45)) == 885
    assert to_minutes(time(23, 59)) == 1439


def test_format_minutes_zero_pads():
    assert format_minutes(540) == "09:00"
    assert format_minutes(605) == "10:05"
    assert format_minutes(1080) == "18:00"


def test_format_minutes_rejects_out_of_range():
    with pytest.raises(ValueError):
        format_minutes(-1)


def test_filters_to_requested_date():
    events = [
        _event(time(10, 0), time(11, 0)),
        _event(time(12, 0), time(13, 0), day=date(2024, 6, 2)),
    ]
    assert intervals_for(events, DAY) == [Interval(600, 660)]


def test_sorted_by_start():
    events = [
        _event(time(15, 0), time(16, 0)),
        _event(time(9, 30), time(10, 0)),
        _event(time(12, 0), time(12, 30)),
    ]
    assert [i.start for i in intervals_for(events, DAY)] == [570, 720, 900]


def test_overlaps_are_passed_through():
    events = [
        _event(time(10, 0), time(12, 0)),
        _event(time(11, 0), time(11, 30)),
    ]
    assert intervals_for(events, DAY) == [Interval(600, 720), Interval(660, 690)]


def test_equal_starts_keep_input_order():
    events = [
        _event(time(10, 0), time(12, 0), title="long"),
        _event(time(10, 0), time(10, 30), title="short"),
    ]
    assert intervals_for(events, DAY) == [Interval(600, 720), Interval(600, 630)]


def test_no_events_gives_no_intervals():
    assert intervals_for([], DAY) == []
