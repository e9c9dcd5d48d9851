"""Service turning calendar drag/resize gestures into stored time ranges."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from smart_scheduler.domain.bus import EventBus
from smart_scheduler.domain.events import EventRescheduled
from smart_scheduler.domain.models import Event
from smart_scheduler.repos.memory import EventNotFoundError, EventRepository

logger = logging.getLogger(__name__)


def reschedule_fields(new_start: datetime, new_end: datetime) -> dict:
    """Map a gesture's instants onto the stored ``date``/``start_time``/``end_time``.

    The date comes from *new_start* only; *new_end* contributes its
    time-of-day. Seconds are dropped.
    """
    if new_end.date() != new_start.date():
        logger.warning(
            "Gesture spans %s to %s; storing end time %s on %s",
            new_start.date(),
            new_end.date(),
            new_end.strftime("%H:%M"),
            new_start.date(),
        )
    return {
        "date": new_start.date(),
        "start_time": new_start.time().replace(second=0, microsecond=0),
        "end_time": new_end.time().replace(second=0, microsecond=0),
    }


@dataclass
class RescheduleResult:
    event: Event
    message: str
    events: list[Event] = field(default_factory=list)


class RescheduleCoordinator:
    """Applies a drag/resize to an existing event.

    Only ``date``, ``start_time`` and ``end_time`` are written; title, id
    and owner are left alone. Overlap with other events is allowed.
    Storage failures propagate as ``StorageError`` with nothing else
    changed.
    """

    def __init__(self, event_repo: EventRepository, bus: EventBus) -> None:
        self.event_repo = event_repo
        self.bus = bus

    def reschedule(
        self,
        event_id: str,
        owner_id: str,
        new_start: datetime,
        new_end: datetime,
    ) -> RescheduleResult:
        current = self.event_repo.get(event_id)
        if current is None or current.owner_id != owner_id:
            raise EventNotFoundError(f"No event with id {event_id}")

        updated = self.event_repo.update(event_id, reschedule_fields(new_start, new_end))
        message = (
            f"{updated.title} → {updated.date.isoformat()} "
            f"({updated.start_time:%H:%M}-{updated.end_time:%H:%M})"
        )
        logger.info("Rescheduled event %s: %s", event_id, message)

        self.bus.publish(
            EventRescheduled(
                event_id=event_id,
                owner_id=updated.owner_id,
                title=updated.title,
                date=updated.date,
                start_time=updated.start_time,
                end_time=updated.end_time,
            )
        )

        # Re-read after the write so the caller sees storage's view.
        return RescheduleResult(
            event=updated,
            message=message,
            events=self.event_repo.list_for_owner(owner_id),
        )
