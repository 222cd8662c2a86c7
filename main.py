#!/usr/bin/env python3
"""
Main entry point for the Weekly Event Scheduler

Meant to be invoked on a timer (cron, systemd timer, cloud scheduler) with no
arguments. Each invocation cleans up expired auto-scheduled events and
creates the coming work week's events.
"""

import json
import logging
import os
import sys

from config.settings import Config
from src.calendar.calendar_manager import GoogleCalendarManager
from src.calendar.mock_calendar_manager import InMemoryCalendarManager
from src.scheduler.weekly_scheduler import WeeklyScheduler
from utils.logger import SchedulerLogger


def run_weekly_schedule(settings=None, calendar_manager=None, now=None):
    """
    Run one cleanup and scheduling pass.

    Args:
        settings (SchedulerSettings): defaults to Config.load_settings()
        calendar_manager: defaults to a GoogleCalendarManager using the settings' token
        now (datetime): wall-clock time in the calendar's zone; defaults to the current time

    Returns:
        ScheduleReport: what the run deleted, created, skipped and failed
    """
    settings = settings or Config.load_settings()
    calendar_manager = calendar_manager or GoogleCalendarManager(token_path=settings.token_path)

    report = WeeklyScheduler(calendar_manager, settings).run(now=now)
    SchedulerLogger.log_run_summary(report)
    return report


def _dry_run_manager(settings):
    """Empty in-memory calendars standing in for the configured ones"""
    manager = InMemoryCalendarManager()
    manager.add_calendar(settings.work_calendar_id, summary="Dry run")
    manager.add_calendar(settings.holiday_calendar_id, summary="Holidays (dry run)")
    return manager


def main(argv=None):
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Weekly Event Scheduler')
    parser.add_argument('--templates', help='JSON file with event templates')
    parser.add_argument('--log-level', default=os.environ.get('WEEKLY_EVENTS_LOG_LEVEL', Config.LOG_LEVEL),
                        help='Logging level')
    parser.add_argument('--log-file', default=os.environ.get('WEEKLY_EVENTS_LOG_FILE', Config.LOG_FILE),
                        help='Also write logs to this file')
    parser.add_argument('--dry-run', action='store_true',
                        help='Schedule against empty in-memory calendars and print the result')

    args = parser.parse_args(argv)

    SchedulerLogger.setup_logging(log_level=args.log_level, log_file=args.log_file)
    logger = logging.getLogger(__name__)

    settings = Config.load_settings(templates_file=args.templates)
    logger.info(f"Loaded {len(settings.registry)} event templates")

    if args.dry_run:
        manager = _dry_run_manager(settings)
        run_weekly_schedule(settings, manager)
        events = manager.events[settings.work_calendar_id]
        print(json.dumps([event.to_dict() for event in events], indent=2))
        return 0

    report = run_weekly_schedule(settings)
    return 1 if report.has_failures else 0


if __name__ == '__main__':
    sys.exit(main())
