"""Tests for the free-slot finder."""

from __future__ import annotations

from datetime import date, time

from smart_scheduler.domain.models import Event
from smart_scheduler.services.intervals import Interval
from smart_scheduler.services.slots import (
    DEFAULT_DURATION_MINUTES,
    NO_SLOT_MESSAGE,
    WORKING_DAY_END,
    WORKING_DAY_START,
    find_free_slot,
    normalize_duration,
    suggest_slot,
)

DAY = date(2024, 6, 1)


# ---------------------------------------------------------------------------
# find_free_slot
# ---------------------------------------------------------------------------


def test_empty_day_gets_window_opening():
    assert find_free_slot([], 45) == Interval(540, 585)


def test_first_fit_before_booking():
    assert find_free_slot([Interval(600, 660)], 30) == Interval(540, 570)


def test_exact_fit_between_bookings():
    intervals = [Interval(540, 600), Interval(630, 1080)]
    assert find_free_slot(intervals, 30) == Interval(600, 630)


def test_gap_one_minute_short_is_skipped():
    intervals = [Interval(540, 600), Interval(629, 700)]
    assert find_free_slot(intervals, 30) == Interval(700, 730)


def test_fully_booked_day_is_unavailable():
    for duration in (1, 30, 540):
        assert find_free_slot([Interval(540, 1080)], duration) is None


def test_duration_longer_than_window_is_unavailable():
    assert find_free_slot([], WORKING_DAY_END - WORKING_DAY_START + 1) is None


def test_whole_window_fits_when_empty():
    assert find_free_slot([], 540) == Interval(540, 1080)


def test_nested_booking_does_not_reopen_gap():
    # 10:30-11:00 sits inside 10:00-12:00; the 60 minutes after 10:30 are busy.
    intervals = [Interval(540, 600), Interval(600, 720), Interval(630, 660)]
    assert find_free_slot(intervals, 60) == Interval(720, 780)


def test_overlapping_bookings_advance_cursor_to_furthest_end():
    intervals = [Interval(540, 700), Interval(560, 620), Interval(700, 710)]
    assert find_free_slot(intervals, 30) == Interval(710, 740)


def test_bookings_before_window_are_ignored():
    assert find_free_slot([Interval(420, 480)], 60) == Interval(540, 600)


def test_booking_straddling_window_start_pushes_cursor():
    assert find_free_slot([Interval(480, 570)], 30) == Interval(570, 600)


def test_slot_never_runs_past_window_end():
    # The gap 17:40-18:20 is 40 minutes long but only 20 are inside the window.
    intervals = [Interval(540, 1060), Interval(1100, 1130)]
    assert find_free_slot(intervals, 30) is None
    assert find_free_slot(intervals, 20) == Interval(1060, 1080)


def test_result_is_stable_across_calls():
    intervals = [Interval(540, 600), Interval(660, 720)]
    first = find_free_slot(intervals, 45)
    assert all(find_free_slot(intervals, 45) == first for _ in range(5))
    assert intervals == [Interval(540, 600), Interval(660, 720)]


def test_returned_slot_never_overlaps_a_booking():
    intervals = [
        Interval(550, 610),
        Interval(600, 615),
        Interval(640, 700),
        Interval(705, 800),
        Interval(900, 1000),
    ]
    for duration in range(1, 101, 7):
        slot = find_free_slot(intervals, duration)
        assert slot is not None
        assert WORKING_DAY_START <= slot.start and slot.end <= WORKING_DAY_END
        assert slot.end - slot.start == duration
        assert not any(slot.overlaps(booked) for booked in intervals)


# ---------------------------------------------------------------------------
# normalize_duration / suggest_slot
# ---------------------------------------------------------------------------


def test_missing_or_invalid_duration_defaults_to_an_hour():
    assert normalize_duration(None) == DEFAULT_DURATION_MINUTES
    assert normalize_duration(0) == DEFAULT_DURATION_MINUTES
    assert normalize_duration(-15) == DEFAULT_DURATION_MINUTES
    assert normalize_duration(25) == 25


def test_raw_query_durations_are_coerced():
    assert normalize_duration("45") == 45
    assert normalize_duration(" 20 ") == 20
    assert normalize_duration("") == DEFAULT_DURATION_MINUTES
    assert normalize_duration("abc") == DEFAULT_DURATION_MINUTES
    assert normalize_duration("30.5") == DEFAULT_DURATION_MINUTES
    assert normalize_duration("-10") == DEFAULT_DURATION_MINUTES


def _event(start: time, end: time, day: date = DAY) -> Event:
    return Event(owner_id="u1", title="Busy", date=day, start_time=start, end_time=end)


def test_suggest_slot_formats_times():
    events = [_event(time(9, 0), time(10, 15))]
    suggestion = suggest_slot(events, DAY, 30)

    assert suggestion.available is True
    assert suggestion.start_time == "10:15"
    assert suggestion.end_time == "10:45"
    assert suggestion.duration_minutes == 30
    assert suggestion.message is None


def test_suggest_slot_ignores_other_days():
    events = [_event(time(9, 0), time(18, 0), day=date(2024, 6, 2))]
    suggestion = suggest_slot(events, DAY, None)

    assert suggestion.start_time == "09:00"
    assert suggestion.end_time == "10:00"
    assert suggestion.duration_minutes == 60


def test_suggest_slot_reports_unavailable():
    suggestion = suggest_slot([_event(time(9, 0), time(18, 0))], DAY, 15)

    assert suggestion.available is False
    assert suggestion.start_time is None
    assert suggestion.end_time is None
    assert suggestion.message == NO_SLOT_MESSAGE
