"""
Event template registry for the Weekly Event Scheduler

A template describes one recurring weekly event: which weekdays it runs on,
when it starts, how long it lasts, its reminder lead time and how its
description is rendered. Templates are pure data so they can be loaded from
JSON.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional

from src.scheduler.errors import ConfigurationError
from utils.validators import TemplateValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventTemplate:
    """One recurring weekly event definition"""

    name: str
    weekdays: FrozenSet[int]  # 1 = Monday ... 7 = Sunday
    hour: int
    minute: int
    duration_minutes: int
    description_template: str
    reminder_minutes: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventTemplate":
        """Build a template from its JSON form"""
        time_data = data["time"]
        return cls(
            name=data["name"],
            weekdays=frozenset(data["days"]),
            hour=time_data["hour"],
            minute=time_data.get("minute", 0),
            duration_minutes=data["durationMinutes"],
            description_template=data["description"],
            reminder_minutes=data.get("reminderMinutes"),
        )

    def describe(self, day: date, marker: str) -> str:
        """Render the event description for a concrete date"""
        return self.description_template.format(
            marker=marker,
            date=day.isoformat(),
            weekday=day.strftime("%A"),
        )

    def reminder_for(self, default_minutes: int) -> int:
        """Reminder lead time, falling back to the process-wide default"""
        if self.reminder_minutes is None:
            return default_minutes
        return self.reminder_minutes


def is_auto_scheduled(title: Optional[str], description: Optional[str],
                      template_names: Iterable[str], marker: str) -> bool:
    """
    True when an event was created by this scheduler.

    Both the title must exactly match a template name and the description
    must contain the ownership marker. Manually created events that share a
    template's title are never considered owned.
    """
    if not title or not description:
        return False
    return title in template_names and marker in description


class TemplateRegistry:
    """Read-only, ordered collection of event templates with unique names"""

    def __init__(self, templates: Iterable[EventTemplate]):
        self._templates = tuple(templates)
        self._by_name = {}

        errors = []
        for template in self._templates:
            errors.extend(self._check_template(template))
            if template.name in self._by_name:
                errors.append(f"Duplicate template name: '{template.name}'")
            self._by_name[template.name] = template

        if errors:
            raise ConfigurationError("Invalid event templates: " + "; ".join(errors))

        logger.debug(f"Loaded {len(self._templates)} event templates: {', '.join(self._by_name)}")

    @classmethod
    def from_dicts(cls, templates_data: List[Dict[str, Any]]) -> "TemplateRegistry":
        """Validate raw template data and build a registry from it"""
        errors = TemplateValidator.validate_template_list(templates_data)
        if errors:
            raise ConfigurationError("Invalid event templates: " + "; ".join(errors))
        return cls(EventTemplate.from_dict(data) for data in templates_data)

    @staticmethod
    def _check_template(template: EventTemplate) -> List[str]:
        errors = []
        if not template.weekdays:
            errors.append(f"'{template.name}' has no weekdays")
        if any(day < 1 or day > 7 for day in template.weekdays):
            errors.append(f"'{template.name}' has weekdays outside 1-7: {sorted(template.weekdays)}")
        if not 0 <= template.hour <= 23 or not 0 <= template.minute <= 59:
            errors.append(f"'{template.name}' has invalid time {template.hour}:{template.minute:02d}")
        if template.duration_minutes <= 0:
            errors.append(f"'{template.name}' must have a positive duration")
        if template.reminder_minutes is not None and template.reminder_minutes <= 0:
            errors.append(f"'{template.name}' must have a positive reminder")
        for error in TemplateValidator.validate_description(template.description_template):
            errors.append(f"'{template.name}': {error}")
        return errors

    def __iter__(self) -> Iterator[EventTemplate]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    @property
    def names(self) -> FrozenSet[str]:
        return frozenset(self._by_name)

    def get(self, name: str) -> Optional[EventTemplate]:
        return self._by_name.get(name)
