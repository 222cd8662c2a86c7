"""
Configuration settings for the Weekly Event Scheduler
"""
import json
import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from src.scheduler.errors import ConfigurationError
from src.scheduler.templates import TemplateRegistry

ENV_PREFIX = "WEEKLY_EVENTS_"


@dataclass(frozen=True)
class SchedulerSettings:
    """Immutable settings passed explicitly to every component"""

    work_calendar_id: str
    holiday_calendar_id: str
    retention_days: int
    default_reminder_minutes: int
    marker: str
    registry: TemplateRegistry
    token_path: str


class Config:
    # Calendar Configuration
    WORK_CALENDAR_ID = "primary"  # falls back to the default calendar when not found
    HOLIDAY_CALENDAR_ID = "en.usa#holiday@group.v.calendar.google.com"
    TOKEN_PATH = "token.json"

    # Cleanup Configuration
    RETENTION_DAYS = 30  # days of past events to keep

    # Reminder Configuration (templates may override)
    DEFAULT_REMINDER_MINUTES = 3

    # Appears in every auto-scheduled description; protects manually created events
    AUTO_SCHEDULE_MARKER = "[Auto-Scheduled]"

    # Logging Configuration
    LOG_LEVEL = "INFO"
    LOG_FILE = None

    # Event templates. Description fields: {marker}, {date} (YYYY-MM-DD), {weekday}
    EVENT_TEMPLATES = [
        {
            "name": "Monday Morning Event",
            "days": [1],
            "time": {"hour": 11, "minute": 0},
            "durationMinutes": 60,
            "reminderMinutes": 5,
            "description": "{marker} Conference ID: 123 456 789",
        },
        {
            "name": "Regular Morning Event",
            "days": [2, 3, 4, 5],
            "time": {"hour": 10, "minute": 15},
            "durationMinutes": 60,
            "description": "{marker} Conference ID: 123 456 789",
        },
        {
            "name": "Mon-Wed Evening Event",
            "days": [1, 2, 3],
            "time": {"hour": 16, "minute": 0},
            "durationMinutes": 60,
            "reminderMinutes": 10,
            "description": "{marker} Conference ID: 987 654 321",
        },
        {
            "name": "Friday Evening Event",
            "days": [5],
            "time": {"hour": 17, "minute": 0},
            "durationMinutes": 60,
            "reminderMinutes": 15,
            "description": "{marker} Conference ID: 987 654 321",
        },
        {
            "name": "Weekly Progress Review",
            "days": [4],
            "time": {"hour": 16, "minute": 0},
            "durationMinutes": 60,
            "reminderMinutes": 5,
            "description": "{marker} Conference ID: 123 456 789",
        },
    ]

    @classmethod
    def load_templates(cls, templates_file: str = None) -> List[Dict]:
        """Template definitions from a JSON file, or the built-in list"""
        if not templates_file:
            return cls.EVENT_TEMPLATES

        if not os.path.exists(templates_file):
            raise ConfigurationError(f"Templates file not found: {templates_file}")

        try:
            with open(templates_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Templates file {templates_file} is not valid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Templates file {templates_file} cannot be read: {e}") from e

        # Either a bare list or {"events": [...]}
        if isinstance(data, dict):
            data = data.get("events")
        return data

    @classmethod
    def load_settings(cls, templates_file: str = None,
                      env: Optional[Mapping[str, str]] = None) -> SchedulerSettings:
        """
        Build the settings value for one run.

        This is the only place the environment is read. Values set through
        WEEKLY_EVENTS_* variables override the class defaults.
        """
        env = os.environ if env is None else env
        templates_file = templates_file or env.get(f"{ENV_PREFIX}TEMPLATES_FILE")

        marker = env.get(f"{ENV_PREFIX}MARKER", cls.AUTO_SCHEDULE_MARKER)
        if not marker:
            raise ConfigurationError("Auto-schedule marker must not be empty")

        return SchedulerSettings(
            work_calendar_id=env.get(f"{ENV_PREFIX}CALENDAR_ID", cls.WORK_CALENDAR_ID),
            holiday_calendar_id=env.get(f"{ENV_PREFIX}HOLIDAY_CALENDAR_ID", cls.HOLIDAY_CALENDAR_ID),
            retention_days=cls._positive_int(env, "RETENTION_DAYS", cls.RETENTION_DAYS),
            default_reminder_minutes=cls._positive_int(env, "DEFAULT_REMINDER_MINUTES",
                                                       cls.DEFAULT_REMINDER_MINUTES),
            marker=marker,
            registry=TemplateRegistry.from_dicts(cls.load_templates(templates_file)),
            token_path=env.get(f"{ENV_PREFIX}TOKEN_PATH", cls.TOKEN_PATH),
        )

    @staticmethod
    def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
        raw = env.get(f"{ENV_PREFIX}{name}")
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}")
        if value <= 0:
            raise ConfigurationError(f"{ENV_PREFIX}{name} must be positive, got {value}")
        return value
