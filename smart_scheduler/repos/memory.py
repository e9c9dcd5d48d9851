"""In-memory event storage standing in for the remote document store."""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date, time, timedelta

from smart_scheduler.domain.models import Event

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"title", "date", "start_time", "end_time"})


class StorageError(RuntimeError):
    """Raised when the store rejects a read or write."""


class EventNotFoundError(StorageError):
    """Raised when a write targets an id the store does not hold."""


class EventRepository:
    """Dict-backed store for Event instances, keyed by the id it assigns.

    Callers always get copies back, so nothing they hold aliases the stored
    record.
    """

    def __init__(self) -> None:
        self._store: dict[str, Event] = {}
        self._lock = threading.Lock()

    def add(self, event: Event) -> Event:
        stored = event.model_copy(update={"id": str(uuid.uuid4())})
        with self._lock:
            self._store[stored.id] = stored
        logger.debug("Inserted event %s for owner %s", stored.id, stored.owner_id)
        return stored.model_copy()

    def get(self, event_id: str) -> Event | None:
        with self._lock:
            stored = self._store.get(event_id)
        return stored.model_copy() if stored is not None else None

    def list_for_owner(self, owner_id: str) -> list[Event]:
        """Return the owner's events ordered by date, then start time."""
        with self._lock:
            owned = [e.model_copy() for e in self._store.values() if e.owner_id == owner_id]
        return sorted(owned, key=lambda e: (e.date, e.start_time))

    def update(self, event_id: str, fields: dict) -> Event:
        """Apply a partial update. ``id`` and ``owner_id`` cannot be changed."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise StorageError(f"Fields not updatable: {sorted(unknown)}")
        with self._lock:
            stored = self._store.get(event_id)
            if stored is None:
                raise EventNotFoundError(f"No event with id {event_id}")
            updated = Event.model_validate({**stored.model_dump(), **fields})
            self._store[event_id] = updated
        logger.debug("Updated event %s fields %s", event_id, sorted(fields))
        return updated.model_copy()

    def delete(self, event_id: str) -> None:
        with self._lock:
            if self._store.pop(event_id, None) is None:
                raise EventNotFoundError(f"No event with id {event_id}")
        logger.debug("Deleted event %s", event_id)


# ---------------------------------------------------------------------------
# Seed data – a demo user's day, useful for trying out slot suggestions
# ---------------------------------------------------------------------------

DEMO_OWNER_ID = "demo"


def _seed_events(repo: EventRepository, today: date) -> None:
    tomorrow = today + timedelta(days=1)
    for title, day, start, end in (
        ("Team standup", tomorrow, time(9, 0), time(9, 30)),
        ("Design review", tomorrow, time(10, 0), time(11, 30)),
        ("Lunch with Sam", tomorrow, time(12, 0), time(13, 0)),
        ("Dentist appointment", tomorrow + timedelta(days=1), time(15, 0), time(16, 0)),
    ):
        repo.add(
            Event(
                owner_id=DEMO_OWNER_ID,
                title=title,
                date=day,
                start_time=start,
                end_time=end,
            )
        )


def create_event_repository(*, seed_demo: bool = False) -> EventRepository:
    """Return an EventRepository, optionally pre-loaded with demo events."""
    repo = EventRepository()
    if seed_demo:
        _seed_events(repo, date.today())
    return repo
