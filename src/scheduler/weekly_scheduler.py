"""
Weekly Scheduler - orchestrates one reconciliation run

A run cleans up expired auto-scheduled events, computes the Monday-Friday
window, reads the holidays in it and creates one event per template and
weekday that is not a holiday.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Callable, List, Optional, Set, Tuple

from config.settings import SchedulerSettings
from src.scheduler.errors import TransientApiError
from src.scheduler.holidays import HolidayResolver
from src.scheduler.retention import RetentionCleaner
from src.scheduler.templates import TemplateRegistry
from src.scheduler.week_window import compute_window, date_for_weekday, local_now

logger = logging.getLogger(__name__)


class RunState(Enum):
    START = "start"
    CLEANED_UP = "cleaned_up"
    WINDOW_COMPUTED = "window_computed"
    HOLIDAYS_FETCHED = "holidays_fetched"
    EXPANDED = "expanded"
    DONE = "done"


@dataclass(frozen=True)
class EventInstance:
    """One concrete occurrence of a template on a specific date"""

    title: str
    day: date
    start: datetime
    end: datetime
    description: str
    reminder_minutes: int

    @property
    def iso_date(self) -> str:
        return self.day.isoformat()


class ScheduleReport:
    """What one run did"""

    def __init__(self):
        self.state = RunState.START
        self.week_start: Optional[datetime] = None
        self.week_end: Optional[datetime] = None
        self.holidays: Set[str] = set()
        self.deleted = 0
        self.created: List[EventInstance] = []
        self.skipped: List[Tuple[str, str]] = []
        self.failed_creates: List[EventInstance] = []
        self.failed_deletes = 0

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_creates) or self.failed_deletes > 0


def expand_instances(registry: TemplateRegistry, week_start: datetime, holidays: Set[str],
                     default_reminder_minutes: int, marker: str):
    """
    Expand templates into the instances for the week starting at week_start.

    Returns (instances, skipped) where skipped lists (template name, ISO date)
    pairs that fall on a holiday.
    """
    instances = []
    skipped = []

    for template in registry:
        # sorted for chronological log output only; instances are independent
        for weekday in sorted(template.weekdays):
            day = date_for_weekday(week_start, weekday).date()
            iso_date = day.isoformat()
            if iso_date in holidays:
                skipped.append((template.name, iso_date))
                continue

            start = datetime.combine(day, time(template.hour, template.minute))
            instances.append(EventInstance(
                title=template.name,
                day=day,
                start=start,
                end=start + timedelta(minutes=template.duration_minutes),
                description=template.describe(day, marker),
                reminder_minutes=template.reminder_for(default_reminder_minutes),
            ))

    return instances, skipped


class WeeklyScheduler:
    """
    Runs cleanup and scheduling against one work calendar.

    Calendar and holiday lookups happen before anything is deleted, so a
    ConfigurationError never leaves the calendar half-modified.
    """

    def __init__(self, calendar_manager, settings: SchedulerSettings,
                 clock: Callable[[Optional[str]], datetime] = local_now):
        self.calendar_manager = calendar_manager
        self.settings = settings
        self.clock = clock
        self.holiday_resolver = HolidayResolver(calendar_manager, settings.holiday_calendar_id)
        self.cleaner = RetentionCleaner(calendar_manager, settings.registry, settings.marker)

    def run(self, now: datetime = None) -> ScheduleReport:
        report = ScheduleReport()

        calendar = self.calendar_manager.get_work_calendar(self.settings.work_calendar_id)
        self.holiday_resolver.resolve()
        if now is None:
            now = self.clock(calendar.time_zone)
        logger.info(f"🚀 Weekly scheduling run at {now.isoformat()} on {calendar.calendar_id}")

        cleanup = self.cleaner.cleanup(calendar, now, self.settings.retention_days)
        report.deleted = cleanup.deleted
        report.failed_deletes = len(cleanup.failed)
        report.state = RunState.CLEANED_UP

        report.week_start, report.week_end = compute_window(now)
        report.state = RunState.WINDOW_COMPUTED
        logger.info(f"📅 Scheduling window: {report.week_start.date().isoformat()} to "
                    f"{(report.week_end - timedelta(days=1)).date().isoformat()}")

        report.holidays = self.holiday_resolver.get_holidays(report.week_start, report.week_end)
        report.state = RunState.HOLIDAYS_FETCHED

        instances, report.skipped = expand_instances(
            self.settings.registry,
            report.week_start,
            report.holidays,
            self.settings.default_reminder_minutes,
            self.settings.marker,
        )
        for name, iso_date in report.skipped:
            logger.info(f"Skip holiday for {name}: {iso_date}")

        for instance in instances:
            try:
                self.calendar_manager.create_event(
                    calendar,
                    instance.title,
                    instance.start,
                    instance.end,
                    description=instance.description,
                    reminder_minutes=instance.reminder_minutes,
                )
            except TransientApiError as e:
                logger.error(f"❌ Failed to schedule {instance.title} on {instance.iso_date}: {e}")
                report.failed_creates.append(instance)
                continue

            report.created.append(instance)
            logger.info(f"Scheduled {instance.title} on {instance.iso_date} at "
                        f"{instance.start.strftime('%H:%M')} with {instance.reminder_minutes} minute reminder")
        report.state = RunState.EXPANDED

        logger.info(f"✅ Scheduled {len(report.created)} of {len(instances)} events "
                    f"for the week of {report.week_start.date().isoformat()}")
        report.state = RunState.DONE
        return report
