"""
Scheduling window calculation (Monday through Friday)
"""
from datetime import datetime, timedelta
from typing import Tuple
from zoneinfo import ZoneInfo

WORK_WEEK_DAYS = 5


def compute_window(now: datetime) -> Tuple[datetime, datetime]:
    """
    Return (week_start, week_end) for the week to schedule.

    week_start is local midnight of the current day when `now` is a Monday,
    otherwise of the next Monday. week_end is the exclusive upper bound five
    days later (Saturday 00:00).
    """
    # weekday(): Monday=0 ... Sunday=6
    delta = (7 - now.weekday()) % 7
    week_start = (now + timedelta(days=delta)).replace(hour=0, minute=0, second=0, microsecond=0)
    return week_start, week_start + timedelta(days=WORK_WEEK_DAYS)


def date_for_weekday(week_start: datetime, weekday: int) -> datetime:
    """Date of an ISO weekday (1 = Monday) within the week starting at week_start"""
    return week_start + timedelta(days=weekday - 1)


def local_now(time_zone: str = None) -> datetime:
    """Current naive wall-clock time in the given IANA zone (host zone if None)"""
    if not time_zone:
        return datetime.now()
    return datetime.now(ZoneInfo(time_zone)).replace(tzinfo=None)
