"""Domain events emitted when stored events change."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel


class EventCreated(BaseModel):
    """Fired after a new Event is inserted. Carries the fields as created."""

    event_id: str
    owner_id: str
    title: str
    date: dt.date
    start_time: dt.time


class EventRescheduled(BaseModel):
    """Fired after a drag/resize has been written to storage."""

    event_id: str
    owner_id: str
    title: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time


class EventDeleted(BaseModel):
    """Fired after an Event is removed from storage."""

    event_id: str
