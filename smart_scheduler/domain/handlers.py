"""Domain event handlers, wired up at application startup."""

from __future__ import annotations

from smart_scheduler.domain.bus import EventBus
from smart_scheduler.domain.events import EventCreated, EventDeleted, EventRescheduled
from smart_scheduler.services.reminders import ReminderScheduler


class HandlerRegistry:
    """Keeps each event's reminder in step with the event's lifecycle."""

    def __init__(self, bus: EventBus, reminders: ReminderScheduler) -> None:
        self.bus = bus
        self.reminders = reminders
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(EventCreated, self.on_event_created)
        self.bus.subscribe(EventRescheduled, self.on_event_rescheduled)
        self.bus.subscribe(EventDeleted, self.on_event_deleted)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_event_created(self, event: EventCreated) -> None:
        self.reminders.arm(
            event_id=event.event_id,
            owner_id=event.owner_id,
            title=event.title,
            day=event.date,
            start_time=event.start_time,
        )

    def on_event_rescheduled(self, event: EventRescheduled) -> None:
        # Re-arming replaces the old reminder, or retracts it if the new
        # start is too close.
        self.reminders.arm(
            event_id=event.event_id,
            owner_id=event.owner_id,
            title=event.title,
            day=event.date,
            start_time=event.start_time,
        )

    def on_event_deleted(self, event: EventDeleted) -> None:
        self.reminders.cancel(event.event_id)
