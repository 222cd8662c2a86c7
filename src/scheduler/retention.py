"""
Retention cleanup of past auto-scheduled events
"""
import logging
from datetime import datetime, timedelta
from typing import List

from src.calendar.calendar_manager import CalendarEvent, CalendarInfo
from src.scheduler.errors import TransientApiError
from src.scheduler.templates import TemplateRegistry, is_auto_scheduled

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)


class CleanupResult:
    """Outcome of one cleanup pass"""

    def __init__(self, cutoff: datetime):
        self.cutoff = cutoff
        self.deleted = 0
        self.failed: List[CalendarEvent] = []


class RetentionCleaner:
    """Deletes auto-scheduled events that started before the retention cutoff"""

    def __init__(self, calendar_manager, registry: TemplateRegistry, marker: str):
        self.calendar_manager = calendar_manager
        self.registry = registry
        self.marker = marker

    def find_expired(self, calendar: CalendarInfo, cutoff: datetime) -> List[CalendarEvent]:
        """Owned events starting strictly before cutoff"""
        names = self.registry.names
        return [
            event for event in self.calendar_manager.list_events(calendar, EPOCH, cutoff)
            if event.start < cutoff and is_auto_scheduled(event.summary, event.description, names, self.marker)
        ]

    def cleanup(self, calendar: CalendarInfo, now: datetime, retention_days: int) -> CleanupResult:
        result = CleanupResult(now - timedelta(days=retention_days))

        for event in self.find_expired(calendar, result.cutoff):
            try:
                self.calendar_manager.delete_event(calendar, event)
                result.deleted += 1
                logger.debug(f"Deleted '{event.summary}' on {event.start_date}")
            except TransientApiError as e:
                logger.error(f"❌ Failed to delete '{event.summary}' on {event.start_date}: {e}")
                result.failed.append(event)

        logger.info(f"🗑️  Cleanup: deleted {result.deleted} events before {result.cutoff.date().isoformat()}")
        return result
