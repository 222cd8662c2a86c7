"""
Holiday lookup against a subscribed holiday calendar
"""
import logging
from datetime import datetime
from typing import Optional, Set

from src.calendar.calendar_manager import CalendarInfo
from src.scheduler.errors import ConfigurationError

logger = logging.getLogger(__name__)


class HolidayResolver:
    """Reads all-day events from a holiday calendar as ISO date strings"""

    def __init__(self, calendar_manager, holiday_calendar_id: str):
        self.calendar_manager = calendar_manager
        self.holiday_calendar_id = holiday_calendar_id
        self._calendar: Optional[CalendarInfo] = None

    def resolve(self) -> CalendarInfo:
        """Look the holiday calendar up once. Missing calendar is fatal."""
        if self._calendar is None:
            calendar = self.calendar_manager.get_calendar(self.holiday_calendar_id)
            if calendar is None:
                logger.error(f"❌ Holiday calendar not found: {self.holiday_calendar_id}")
                raise ConfigurationError(f"Holiday calendar not found: {self.holiday_calendar_id}")
            self._calendar = calendar
        return self._calendar

    def get_holidays(self, start: datetime, end: datetime) -> Set[str]:
        """ISO dates of all-day holiday events starting in [start, end)"""
        calendar = self.resolve()
        first_day, last_day = start.date(), end.date()

        holidays = set()
        for event in self.calendar_manager.list_events(calendar, start, end):
            if not event.all_day:
                continue
            if first_day <= event.start.date() < last_day:
                holidays.add(event.start_date)

        logger.info(f"🎌 Holidays between {first_day.isoformat()} and {last_day.isoformat()}: "
                    f"{', '.join(sorted(holidays)) or 'none'}")
        return holidays
