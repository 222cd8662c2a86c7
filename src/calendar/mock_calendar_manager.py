"""
In-memory calendar manager for tests and dry runs without Google Calendar access
"""
import itertools
import logging
from datetime import datetime
from typing import List, Dict, Optional

from src.calendar.calendar_manager import BaseCalendarManager, CalendarEvent, CalendarInfo
from src.scheduler.errors import TransientApiError

logger = logging.getLogger(__name__)


class InMemoryCalendarManager(BaseCalendarManager):
    """Calendar manager that keeps calendars and events in dictionaries"""

    def __init__(self, time_zone: str = "UTC"):
        self.time_zone = time_zone
        self.calendars: Dict[str, CalendarInfo] = {}
        self.events: Dict[str, List[CalendarEvent]] = {}
        self.failing_summaries = set()
        self._ids = itertools.count(1)

        self.add_calendar("primary", summary="Default calendar")

    def add_calendar(self, calendar_id: str, summary: str = "", time_zone: str = None) -> CalendarInfo:
        calendar = CalendarInfo(calendar_id, summary, time_zone or self.time_zone)
        self.calendars[calendar_id] = calendar
        self.events.setdefault(calendar_id, [])
        return calendar

    def add_event(self, calendar_id: str, event: CalendarEvent) -> CalendarEvent:
        """Seed an existing event, assigning an id if it has none"""
        if event.event_id is None:
            event.event_id = f"mock_event_{next(self._ids)}"
        self.events.setdefault(calendar_id, []).append(event)
        return event

    def get_calendar(self, calendar_id: str) -> Optional[CalendarInfo]:
        return self.calendars.get(calendar_id)

    def list_events(self, calendar: CalendarInfo, start: datetime, end: datetime) -> List[CalendarEvent]:
        """Events overlapping [start, end), ordered by start time"""
        matches = [
            event for event in self.events.get(calendar.calendar_id, [])
            if event.start < end and event.end > start
        ]
        return sorted(matches, key=lambda event: event.start)

    def create_event(self, calendar: CalendarInfo, summary: str, start: datetime, end: datetime,
                     description: str = None, reminder_minutes: int = None) -> CalendarEvent:
        if summary in self.failing_summaries:
            raise TransientApiError(f"MOCK: create failed for '{summary}'", status=500)

        event = CalendarEvent(summary=summary, start=start, end=end, description=description,
                              reminder_minutes=reminder_minutes)
        logger.debug(f"MOCK: creating '{summary}' at {start.isoformat()}")
        return self.add_event(calendar.calendar_id, event)

    def delete_event(self, calendar: CalendarInfo, event: CalendarEvent) -> None:
        if event.summary in self.failing_summaries:
            raise TransientApiError(f"MOCK: delete failed for '{event.summary}'", status=500)

        events = self.events.get(calendar.calendar_id, [])
        self.events[calendar.calendar_id] = [e for e in events if e.event_id != event.event_id]
