"""Domain models for the scheduling engine."""

from __future__ import annotations

import datetime as dt
import uuid
from enum import StrEnum

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator


class NotificationPermission(StrEnum):
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


def _new_id() -> str:
    return str(uuid.uuid4())


def _to_minute(value: dt.time) -> dt.time:
    return value.replace(second=0, microsecond=0, tzinfo=None)


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Event(BaseModel):
    """A stored calendar event.

    ``start_time < end_time`` is assumed by the engine but not enforced here:
    manual entry may store an inverted range, exactly as the user typed it.
    """

    id: str | None = None
    owner_id: str
    title: str = Field(min_length=1)
    date: dt.date
    start_time: dt.time
    end_time: dt.time

    @field_validator("start_time", "end_time")
    @classmethod
    def _truncate_to_minute(cls, value: dt.time) -> dt.time:
        return _to_minute(value)

    @field_serializer("start_time", "end_time")
    def _serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")

    @property
    def starts_at(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.start_time)

    @property
    def ends_at(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.end_time)

    def describe_slot(self) -> str:
        return (
            f"{self.date.isoformat()} "
            f"({self.start_time:%H:%M} - {self.end_time:%H:%M})"
        )


class ReminderTask(BaseModel):
    """An armed one-shot reminder, keyed by the event it belongs to."""

    id: str = Field(default_factory=_new_id)
    event_id: str
    owner_id: str
    fire_at: dt.datetime
    message: str


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class AddEventRequest(BaseModel):
    title: str = Field(min_length=1)
    date: dt.date
    start_time: dt.time
    end_time: dt.time

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


class RescheduleRequest(BaseModel):
    """A drag or resize gesture: the new start and end instants."""

    start: dt.datetime
    end: dt.datetime

    @field_validator("start", "end")
    @classmethod
    def _wall_clock(cls, value: dt.datetime) -> dt.datetime:
        # Offsets are dropped, not converted: the calendar works in wall-clock time.
        return value.replace(tzinfo=None)

    @model_validator(mode="after")
    def _end_after_start(self) -> RescheduleRequest:
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class ScheduledEventResponse(BaseModel):
    event: Event
    message: str
    conflicts: list[str] = Field(default_factory=list)
    reminder_at: dt.datetime | None = None


class CalendarEntry(BaseModel):
    id: str
    title: str
    start: dt.datetime
    end: dt.datetime


class SlotSuggestion(BaseModel):
    available: bool
    date: dt.date
    duration_minutes: int
    start_time: str | None = None
    end_time: str | None = None
    message: str | None = None
