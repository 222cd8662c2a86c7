"""
Google Calendar integration for the Weekly Event Scheduler
"""
import logging
from datetime import datetime
from typing import List, Dict, Optional
from zoneinfo import ZoneInfo

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from src.scheduler.errors import ConfigurationError, TransientApiError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]
DEFAULT_CALENDAR_ID = "primary"
PAGE_SIZE = 250


class CalendarInfo:
    """A resolved calendar and the zone its wall-clock times are in"""

    def __init__(self, calendar_id: str, summary: str = "", time_zone: str = "UTC"):
        self.calendar_id = calendar_id
        self.summary = summary
        self.time_zone = time_zone

    def __repr__(self) -> str:
        return f"CalendarInfo({self.calendar_id!r}, time_zone={self.time_zone!r})"


class CalendarEvent:
    """
    Represents a calendar event.

    start/end are naive wall-clock datetimes in the owning calendar's zone.
    All-day events start at midnight of their date.
    """

    def __init__(self, summary: str, start: datetime, end: datetime,
                 description: str = None, event_id: str = None,
                 all_day: bool = False, reminder_minutes: int = None):
        self.summary = summary
        self.start = start
        self.end = end
        self.description = description
        self.event_id = event_id
        self.all_day = all_day
        self.reminder_minutes = reminder_minutes

    @property
    def start_date(self) -> str:
        """ISO date (YYYY-MM-DD) the event starts on"""
        return self.start.date().isoformat()

    def to_dict(self) -> Dict:
        """Convert to dictionary format for JSON serialization"""
        return {
            "Id": self.event_id,
            "Summary": self.summary,
            "Description": self.description,
            "StartTime": self.start.isoformat(),
            "EndTime": self.end.isoformat(),
            "AllDay": self.all_day,
            "ReminderMinutes": self.reminder_minutes,
        }

    def __repr__(self) -> str:
        return f"CalendarEvent({self.summary!r}, {self.start.isoformat()})"


class BaseCalendarManager:
    """Behaviour shared by every calendar backend"""

    def get_calendar(self, calendar_id: str) -> Optional[CalendarInfo]:
        raise NotImplementedError

    def get_work_calendar(self, calendar_id: str) -> CalendarInfo:
        """Resolve the target calendar, falling back to the account's default calendar"""
        calendar = self.get_calendar(calendar_id) if calendar_id else None

        if calendar is None and calendar_id != DEFAULT_CALENDAR_ID:
            logger.warning(f"⚠️  Calendar {calendar_id!r} not found, falling back to the default calendar")
            calendar = self.get_calendar(DEFAULT_CALENDAR_ID)

        if calendar is None:
            raise ConfigurationError(f"Work calendar not found: {calendar_id}")

        logger.info(f"📅 Using calendar {calendar.calendar_id} ({calendar.time_zone})")
        return calendar


class GoogleCalendarManager(BaseCalendarManager):
    """Calendar manager backed by the Google Calendar v3 API"""

    def __init__(self, token_path: str = None, service=None):
        self.token_path = token_path
        self._service = service

    def _get_credentials(self) -> Credentials:
        """Load the authorized-user token, refreshing it if it has expired"""
        try:
            credentials = Credentials.from_authorized_user_file(self.token_path, SCOPES)
        except (ValueError, FileNotFoundError) as e:
            logger.error(f"❌ Calendar token not available at {self.token_path}: {e}")
            raise ConfigurationError(f"Google Calendar token not usable: {self.token_path}") from e

        if not credentials.valid:
            if credentials.expired and credentials.refresh_token:
                logger.info("Refreshing expired Google credentials")
                try:
                    credentials.refresh(Request())
                except RefreshError as e:
                    logger.error(f"❌ Could not refresh Google credentials from {self.token_path}: {e}")
                    raise ConfigurationError(f"Google credentials at {self.token_path} could not be refreshed") from e
            else:
                raise ConfigurationError(f"Google credentials at {self.token_path} are invalid")

        return credentials

    @property
    def service(self):
        """Google Calendar service, built on first use"""
        if self._service is None:
            self._service = build("calendar", "v3", credentials=self._get_credentials(),
                                  cache_discovery=False)
        return self._service

    def get_calendar(self, calendar_id: str) -> Optional[CalendarInfo]:
        """Look a calendar up by id; None when it does not exist"""
        try:
            result = self.service.calendars().get(calendarId=calendar_id).execute()
        except HttpError as e:
            if e.resp.status == 404:
                return None
            logger.error(f"HTTP error resolving calendar {calendar_id}: {e}")
            raise TransientApiError(f"Could not resolve calendar {calendar_id}: {e}",
                                    status=e.resp.status) from e

        return CalendarInfo(
            calendar_id=result.get("id", calendar_id),
            summary=result.get("summary", ""),
            time_zone=result.get("timeZone", "UTC"),
        )

    def list_events(self, calendar: CalendarInfo, start: datetime, end: datetime) -> List[CalendarEvent]:
        """Get every event overlapping [start, end), following all result pages"""
        zone = ZoneInfo(calendar.time_zone)
        events = []
        page_token = None

        while True:
            try:
                response = self.service.events().list(
                    calendarId=calendar.calendar_id,
                    timeMin=_rfc3339(start, zone),
                    timeMax=_rfc3339(end, zone),
                    singleEvents=True,
                    showDeleted=False,
                    orderBy="startTime",
                    maxResults=PAGE_SIZE,
                    pageToken=page_token,
                ).execute()
            except HttpError as e:
                logger.error(f"HTTP error listing events for {calendar.calendar_id}: {e}")
                raise TransientApiError(f"Could not list events: {e}", status=e.resp.status) from e

            for item in response.get("items", []):
                if item.get("status") == "cancelled":
                    continue
                events.append(_parse_google_event(item, zone))

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Retrieved {len(events)} events from {calendar.calendar_id} "
                     f"between {start.isoformat()} and {end.isoformat()}")
        return events

    def create_event(self, calendar: CalendarInfo, summary: str, start: datetime, end: datetime,
                     description: str = None, reminder_minutes: int = None) -> CalendarEvent:
        """Insert a timed event with an optional single popup reminder"""
        event = {
            "summary": summary,
            "start": {
                "dateTime": start.isoformat(),
                "timeZone": calendar.time_zone,
            },
            "end": {
                "dateTime": end.isoformat(),
                "timeZone": calendar.time_zone,
            },
        }
        if description is not None:
            event["description"] = description
        if reminder_minutes is not None:
            event["reminders"] = {
                "useDefault": False,
                "overrides": [{"method": "popup", "minutes": reminder_minutes}],
            }

        try:
            created = self.service.events().insert(calendarId=calendar.calendar_id, body=event).execute()
        except HttpError as e:
            raise TransientApiError(f"Failed to create '{summary}' at {start.isoformat()}: {e}",
                                    status=e.resp.status) from e

        return _parse_google_event(created, ZoneInfo(calendar.time_zone))

    def delete_event(self, calendar: CalendarInfo, event: CalendarEvent) -> None:
        """Delete an event; an event that is already gone counts as deleted"""
        try:
            self.service.events().delete(calendarId=calendar.calendar_id, eventId=event.event_id).execute()
        except HttpError as e:
            if e.resp.status == 410:
                logger.info(f"Event {event.event_id} was already deleted")
                return
            raise TransientApiError(f"Failed to delete '{event.summary}' ({event.event_id}): {e}",
                                    status=e.resp.status) from e


def _rfc3339(value: datetime, zone: ZoneInfo) -> str:
    """Naive wall-clock time in `zone` as an RFC3339 timestamp with offset"""
    return value.replace(tzinfo=zone).isoformat()


def _parse_google_datetime(payload: Dict, zone: ZoneInfo):
    """Parse a Google start/end object; returns (naive datetime, is_all_day)"""
    if "date" in payload:
        return datetime.fromisoformat(payload["date"]), True

    parsed = datetime.fromisoformat(payload["dateTime"].replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(zone).replace(tzinfo=None)
    return parsed, False


def _parse_google_event(item: Dict, zone: ZoneInfo) -> CalendarEvent:
    start, all_day = _parse_google_datetime(item.get("start", {}), zone)
    end, _ = _parse_google_datetime(item.get("end", item.get("start", {})), zone)

    reminder_minutes = None
    for override in item.get("reminders", {}).get("overrides", []):
        if override.get("method") == "popup":
            reminder_minutes = override.get("minutes")
            break

    return CalendarEvent(
        summary=item.get("summary", ""),
        start=start,
        end=end,
        description=item.get("description"),
        event_id=item.get("id"),
        all_day=all_day,
        reminder_minutes=reminder_minutes,
    )
