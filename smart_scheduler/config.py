"""Environment-driven settings for the scheduling service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from smart_scheduler.domain.models import NotificationPermission

load_dotenv()


def _bool_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _permission_from_env(name: str, default: NotificationPermission) -> NotificationPermission:
    raw = os.getenv(name)
    if not raw or not raw.strip():
        return default
    try:
        return NotificationPermission(raw.strip().lower())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    log_level: str
    log_file: Path | None
    reminders_enabled: bool
    notification_permission: NotificationPermission
    seed_demo: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    log_file = os.getenv("SMART_SCHEDULER_LOG_FILE")
    return Settings(
        log_level=os.getenv("SMART_SCHEDULER_LOG_LEVEL", "INFO").upper(),
        log_file=Path(log_file) if log_file else None,
        reminders_enabled=_bool_from_env("SMART_SCHEDULER_REMINDERS_ENABLED", True),
        notification_permission=_permission_from_env(
            "SMART_SCHEDULER_NOTIFICATION_PERMISSION", NotificationPermission.GRANTED
        ),
        seed_demo=_bool_from_env("SMART_SCHEDULER_SEED_DEMO", False),
    )
