"""Shared fixtures for the weekly scheduler tests."""

from datetime import datetime, timedelta

import pytest

from config.settings import SchedulerSettings
from src.calendar.calendar_manager import CalendarEvent
from src.calendar.mock_calendar_manager import InMemoryCalendarManager
from src.scheduler.templates import EventTemplate, TemplateRegistry

MARKER = "[Auto-Scheduled]"
WORK_CALENDAR_ID = "work@example.com"
HOLIDAY_CALENDAR_ID = "holidays@example.com"


@pytest.fixture
def marker():
    return MARKER


@pytest.fixture
def make_template():
    def _make(name="Daily Sync", weekdays=(1, 2, 3, 4, 5), hour=9, minute=0,
              duration_minutes=30, reminder_minutes=5,
              description="{marker} Standup on {weekday} {date}"):
        return EventTemplate(
            name=name,
            weekdays=frozenset(weekdays),
            hour=hour,
            minute=minute,
            duration_minutes=duration_minutes,
            description_template=description,
            reminder_minutes=reminder_minutes,
        )

    return _make


@pytest.fixture
def make_settings(make_template):
    def _make(templates=None, retention_days=30, default_reminder_minutes=3,
              work_calendar_id=WORK_CALENDAR_ID, holiday_calendar_id=HOLIDAY_CALENDAR_ID):
        if templates is None:
            templates = [make_template()]
        return SchedulerSettings(
            work_calendar_id=work_calendar_id,
            holiday_calendar_id=holiday_calendar_id,
            retention_days=retention_days,
            default_reminder_minutes=default_reminder_minutes,
            marker=MARKER,
            registry=TemplateRegistry(templates),
            token_path="unused-token.json",
        )

    return _make


@pytest.fixture
def calendar_manager():
    manager = InMemoryCalendarManager(time_zone="America/New_York")
    manager.add_calendar(WORK_CALENDAR_ID, summary="Work")
    manager.add_calendar(HOLIDAY_CALENDAR_ID, summary="Holidays")
    return manager


@pytest.fixture
def work_calendar(calendar_manager):
    return calendar_manager.get_calendar(WORK_CALENDAR_ID)


@pytest.fixture
def holiday_calendar(calendar_manager):
    return calendar_manager.get_calendar(HOLIDAY_CALENDAR_ID)


@pytest.fixture
def add_holiday(calendar_manager):
    def _add(day, summary="Holiday"):
        start = datetime(day.year, day.month, day.day)
        return calendar_manager.add_event(
            HOLIDAY_CALENDAR_ID,
            CalendarEvent(summary=summary, start=start, end=start + timedelta(days=1), all_day=True),
        )

    return _add


@pytest.fixture
def wednesday():
    """Wednesday 2026-10-21 10:30; the computed week starts Monday 2026-10-26."""
    return datetime(2026, 10, 21, 10, 30)
