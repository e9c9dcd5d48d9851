"""FastAPI application: entry point for the scheduling service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from smart_scheduler.config import get_settings
from smart_scheduler.domain.bus import EventBus
from smart_scheduler.domain.events import EventCreated, EventDeleted
from smart_scheduler.domain.handlers import HandlerRegistry
from smart_scheduler.domain.models import (
    AddEventRequest,
    CalendarEntry,
    Event,
    ReminderTask,
    RescheduleRequest,
    ScheduledEventResponse,
    SlotSuggestion,
)
from smart_scheduler.logging import configure_logging
from smart_scheduler.repos.memory import (
    EventNotFoundError,
    StorageError,
    create_event_repository,
)
from smart_scheduler.services.conflicts import describe_conflicts, find_conflicts
from smart_scheduler.services.notifications import LogNotifier
from smart_scheduler.services.reminders import ReminderScheduler
from smart_scheduler.services.reschedule import RescheduleCoordinator
from smart_scheduler.services.slots import suggest_slot

settings = get_settings()
configure_logging(settings.log_level, log_path=settings.log_file)
logger = logging.getLogger(__name__)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_repo = create_event_repository(seed_demo=settings.seed_demo)
background_scheduler = BackgroundScheduler()
notifier = LogNotifier(settings.notification_permission)
reminder_scheduler = ReminderScheduler(background_scheduler, notifier)
reschedule_coordinator = RescheduleCoordinator(event_repo, event_bus)

handler_registry = HandlerRegistry(bus=event_bus, reminders=reminder_scheduler)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.reminders_enabled:
        background_scheduler.start()
        logger.info("Reminder scheduler started")
    yield
    if background_scheduler.running:
        background_scheduler.shutdown(wait=False)


app = FastAPI(title="Smart Scheduler", lifespan=lifespan)


@app.exception_handler(StorageError)
async def _storage_failed(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage is unavailable, please retry."})


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not signed in")
    return x_user_id


def _owned_event(event_id: str, owner_id: str) -> Event:
    event = event_repo.get(event_id)
    if event is None or event.owner_id != owner_id:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/events", response_model=list[Event])
def list_events(owner_id: str = Depends(current_user_id)) -> list[Event]:
    """Return the user's events ordered by date and start time."""
    return event_repo.list_for_owner(owner_id)


@app.post("/events", response_model=ScheduledEventResponse)
def add_event(
    payload: AddEventRequest, owner_id: str = Depends(current_user_id)
) -> ScheduledEventResponse:
    """Store a new event and arm its reminder.

    Overlap with existing events is allowed; overlapping titles are returned
    in ``conflicts``.
    """
    existing = event_repo.list_for_owner(owner_id)
    conflicts = find_conflicts(
        payload.date, payload.start_time, payload.end_time, existing
    )

    try:
        event = event_repo.add(
            Event(
                owner_id=owner_id,
                title=payload.title,
                date=payload.date,
                start_time=payload.start_time,
                end_time=payload.end_time,
            )
        )
    except StorageError:
        logger.exception("Adding event %r failed", payload.title)
        raise HTTPException(status_code=503, detail="Failed to add event.")

    event_bus.publish(
        EventCreated(
            event_id=event.id,
            owner_id=owner_id,
            title=event.title,
            date=event.date,
            start_time=event.start_time,
        )
    )
    reminder = reminder_scheduler.get(event.id)

    return ScheduledEventResponse(
        event=event,
        message=f'"{event.title}" on {event.describe_slot()}',
        conflicts=describe_conflicts(conflicts),
        reminder_at=reminder.fire_at if reminder else None,
    )


@app.get("/events/{event_id}", response_model=Event)
def get_event(event_id: str, owner_id: str = Depends(current_user_id)) -> Event:
    """Return a single event by id."""
    return _owned_event(event_id, owner_id)


@app.delete("/events/{event_id}")
def delete_event(event_id: str, owner_id: str = Depends(current_user_id)) -> dict:
    """Delete an event and retract its reminder."""
    event = _owned_event(event_id, owner_id)
    try:
        event_repo.delete(event.id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except StorageError:
        logger.exception("Deleting event %s failed", event_id)
        raise HTTPException(status_code=503, detail="Failed to delete event.")
    event_bus.publish(EventDeleted(event_id=event.id))
    return {"status": "deleted"}


@app.post("/events/{event_id}/reschedule", response_model=ScheduledEventResponse)
def reschedule_event(
    event_id: str,
    body: RescheduleRequest,
    owner_id: str = Depends(current_user_id),
) -> ScheduledEventResponse:
    """Apply a drag or resize from the calendar.

    On a storage failure the response carries the event as still stored, so
    the calendar can put it back where it was.
    """
    try:
        result = reschedule_coordinator.reschedule(event_id, owner_id, body.start, body.end)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except StorageError:
        logger.exception("Moving event %s failed", event_id)
        stored = event_repo.get(event_id)
        raise HTTPException(
            status_code=503,
            detail={
                "message": "Failed to move event.",
                "event": stored.model_dump(mode="json") if stored else None,
            },
        )

    conflicts = find_conflicts(
        result.event.date,
        result.event.start_time,
        result.event.end_time,
        result.events,
        exclude_id=event_id,
    )
    reminder = reminder_scheduler.get(event_id)
    return ScheduledEventResponse(
        event=result.event,
        message=result.message,
        conflicts=describe_conflicts(conflicts),
        reminder_at=reminder.fire_at if reminder else None,
    )


@app.get("/calendar", response_model=list[CalendarEntry])
def calendar_entries(owner_id: str = Depends(current_user_id)) -> list[CalendarEntry]:
    """Return the user's events as start/end instants for the calendar view."""
    return [
        CalendarEntry(id=e.id, title=e.title, start=e.starts_at, end=e.ends_at)
        for e in event_repo.list_for_owner(owner_id)
    ]


@app.get("/suggestions", response_model=SlotSuggestion)
def suggest_free_slot(
    day: date = Query(alias="date"),
    duration: str | None = None,
    owner_id: str = Depends(current_user_id),
) -> SlotSuggestion:
    """Suggest the earliest free slot between 09:00 and 18:00 on the given date.

    A missing, unparseable or non-positive ``duration`` means one hour.
    """
    events = event_repo.list_for_owner(owner_id)
    return suggest_slot(events, day, duration)


@app.get("/reminders", response_model=list[ReminderTask])
def list_reminders(owner_id: str = Depends(current_user_id)) -> list[ReminderTask]:
    """Return the user's armed reminders, soonest first."""
    return reminder_scheduler.list_for_owner(owner_id)


@app.post("/tick")
def tick(now: datetime | None = None) -> dict:
    """Fire any reminders due at *now* (simulated clock).

    Defaults to the current wall-clock time when omitted.
    """
    current_time = (now or datetime.now()).replace(tzinfo=None)
    fired = reminder_scheduler.fire_due(current_time)
    return {
        "time": current_time.isoformat(),
        "reminders_fired": [task.id for task in fired],
    }
