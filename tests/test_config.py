"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from smart_scheduler.config import get_settings
from smart_scheduler.domain.models import NotificationPermission


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_permission_defaults_to_granted(monkeypatch):
    monkeypatch.delenv("SMART_SCHEDULER_NOTIFICATION_PERMISSION", raising=False)
    assert get_settings().notification_permission is NotificationPermission.GRANTED


def test_permission_is_read_case_insensitively(monkeypatch):
    monkeypatch.setenv("SMART_SCHEDULER_NOTIFICATION_PERMISSION", " Undetermined ")
    assert get_settings().notification_permission is NotificationPermission.UNDETERMINED


def test_unknown_permission_falls_back_to_granted(monkeypatch):
    monkeypatch.setenv("SMART_SCHEDULER_NOTIFICATION_PERMISSION", "maybe")
    assert get_settings().notification_permission is NotificationPermission.GRANTED


def test_boolean_flags(monkeypatch):
    monkeypatch.setenv("SMART_SCHEDULER_REMINDERS_ENABLED", "off")
    monkeypatch.setenv("SMART_SCHEDULER_SEED_DEMO", "yes")
    settings = get_settings()
    assert settings.reminders_enabled is False
    assert settings.seed_demo is True
