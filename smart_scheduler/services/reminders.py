"""Service for arming, rearming and firing pre-event reminders."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime, time, timedelta
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

from smart_scheduler.domain.models import ReminderTask
from smart_scheduler.services.notifications import Notifier, deliver

logger = logging.getLogger(__name__)

REMINDER_LEAD = timedelta(minutes=10)


def reminder_fire_time(day: date, start_time: time) -> datetime:
    return datetime.combine(day, start_time) - REMINDER_LEAD


def reminder_message(title: str) -> str:
    return f'Reminder: "{title}" starts in 10 minutes.'


class ReminderScheduler:
    """One armed reminder per event, backed by one-shot APScheduler jobs.

    The registry maps event id to its armed task so a reminder can be
    cancelled when the event is deleted and replaced when it is moved.
    Nothing is armed for a fire time at or before ``clock()``.
    """

    def __init__(
        self,
        scheduler: BaseScheduler,
        notifier: Notifier,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._scheduler = scheduler
        self._notifier = notifier
        self._clock = clock
        self._tasks: dict[str, ReminderTask] = {}
        self._lock = threading.RLock()

    def arm(
        self,
        event_id: str,
        owner_id: str,
        title: str,
        day: date,
        start_time: time,
    ) -> ReminderTask | None:
        """Arm (or re-arm) the reminder for an event.

        Any reminder already armed for *event_id* is retracted first, even
        when the new fire time turns out to be in the past.
        """
        fire_at = reminder_fire_time(day, start_time)
        with self._lock:
            self._cancel_locked(event_id)
            if fire_at <= self._clock():
                logger.debug("Not arming reminder for %s: %s already passed", event_id, fire_at)
                return None
            task = ReminderTask(
                event_id=event_id,
                owner_id=owner_id,
                fire_at=fire_at,
                message=reminder_message(title),
            )
            self._scheduler.add_job(
                self._fire,
                trigger=DateTrigger(run_date=fire_at, timezone=self._scheduler.timezone),
                args=[event_id, task.id],
                id=task.id,
                misfire_grace_time=None,
                coalesce=True,
            )
            self._tasks[event_id] = task
        logger.info("Armed reminder %s for event %s at %s", task.id, event_id, fire_at)
        return task

    def cancel(self, event_id: str) -> bool:
        with self._lock:
            return self._cancel_locked(event_id)

    def get(self, event_id: str) -> ReminderTask | None:
        with self._lock:
            return self._tasks.get(event_id)

    def list_for_owner(self, owner_id: str) -> list[ReminderTask]:
        with self._lock:
            owned = [t for t in self._tasks.values() if t.owner_id == owner_id]
        return sorted(owned, key=lambda t: t.fire_at)

    def fire_due(self, now: datetime | None = None) -> list[ReminderTask]:
        """Fire every armed reminder whose time has come, earliest first."""
        current = now or self._clock()
        with self._lock:
            due = sorted(
                (t for t in self._tasks.values() if t.fire_at <= current),
                key=lambda t: t.fire_at,
            )
            for task in due:
                self._cancel_locked(task.event_id)
        for task in due:
            self._deliver(task)
        return due

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel_locked(self, event_id: str) -> bool:
        task = self._tasks.pop(event_id, None)
        if task is None:
            return False
        try:
            self._scheduler.remove_job(task.id)
        except JobLookupError:
            # Job already ran or was dropped by the scheduler.
            logger.debug("Reminder job %s no longer scheduled", task.id)
        logger.info("Cancelled reminder %s for event %s", task.id, event_id)
        return True

    def _fire(self, event_id: str, task_id: str) -> None:
        with self._lock:
            task = self._tasks.get(event_id)
            if task is None or task.id != task_id:
                return
            del self._tasks[event_id]
        self._deliver(task)

    def _deliver(self, task: ReminderTask) -> bool:
        try:
            shown = deliver(self._notifier, task.message)
        except Exception:
            logger.exception("Delivering reminder %s for event %s failed", task.id, task.event_id)
            return False
        logger.info("Fired reminder %s for event %s (shown=%s)", task.id, task.event_id, shown)
        return shown
