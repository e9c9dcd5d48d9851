"""Notification delivery behind a tri-state permission."""

from __future__ import annotations

import logging
from typing import Protocol

from smart_scheduler.domain.models import NotificationPermission

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def permission(self) -> NotificationPermission: ...

    def request_permission(self) -> NotificationPermission: ...

    def show(self, message: str) -> None: ...


class LogNotifier:
    """Delivers reminders to the application log.

    *permission* is the current state; *on_request* is what a permission
    request resolves to while the state is still undetermined.
    """

    def __init__(
        self,
        permission: NotificationPermission = NotificationPermission.GRANTED,
        *,
        on_request: NotificationPermission = NotificationPermission.GRANTED,
    ) -> None:
        self._permission = permission
        self._on_request = on_request
        self.sent: list[str] = []

    def permission(self) -> NotificationPermission:
        return self._permission

    def request_permission(self) -> NotificationPermission:
        if self._permission == NotificationPermission.UNDETERMINED:
            self._permission = self._on_request
        return self._permission

    def show(self, message: str) -> None:
        logger.info("Notification: %s", message)
        self.sent.append(message)


def deliver(notifier: Notifier, message: str) -> bool:
    """Show *message* if permission allows. Returns whether it was shown.

    Permission is checked at call time: ``denied`` suppresses silently and
    ``undetermined`` asks once, showing only on ``granted``.
    """
    permission = notifier.permission()
    if permission == NotificationPermission.UNDETERMINED:
        permission = notifier.request_permission()
    if permission != NotificationPermission.GRANTED:
        logger.debug("Notification suppressed (permission=%s)", permission)
        return False
    notifier.show(message)
    return True
