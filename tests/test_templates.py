"""Tests for event templates, the registry and the ownership predicate."""

from datetime import date

import pytest

from src.scheduler.errors import ConfigurationError
from src.scheduler.templates import EventTemplate, TemplateRegistry, is_auto_scheduled
from utils.validators import TemplateValidator

VALID_TEMPLATE = {
    "name": "Daily Sync",
    "days": [1, 2, 3, 4, 5],
    "time": {"hour": 9, "minute": 0},
    "durationMinutes": 30,
    "reminderMinutes": 5,
    "description": "{marker} Conference ID: 123",
}


class TestEventTemplate:
    def test_from_dict(self):
        template = EventTemplate.from_dict(VALID_TEMPLATE)

        assert template.name == "Daily Sync"
        assert template.weekdays == frozenset({1, 2, 3, 4, 5})
        assert (template.hour, template.minute) == (9, 0)
        assert template.duration_minutes == 30
        assert template.reminder_minutes == 5

    def test_from_dict_without_reminder_uses_default(self):
        data = {k: v for k, v in VALID_TEMPLATE.items() if k != "reminderMinutes"}
        template = EventTemplate.from_dict(data)

        assert template.reminder_minutes is None
        assert template.reminder_for(3) == 3

    def test_reminder_override_wins(self, make_template):
        assert make_template(reminder_minutes=15).reminder_for(3) == 15

    def test_describe_embeds_marker_and_date(self, make_template):
        template = make_template(description="{marker} {weekday} sync for {date}")
        assert template.describe(date(2026, 10, 26), "[Auto]") == "[Auto] Monday sync for 2026-10-26"

    def test_templates_are_immutable(self, make_template):
        template = make_template()
        with pytest.raises(AttributeError):
            template.name = "Other"


class TestTemplateRegistry:
    def test_iterates_in_definition_order(self, make_template):
        registry = TemplateRegistry([make_template("B"), make_template("A")])

        assert [t.name for t in registry] == ["B", "A"]
        assert len(registry) == 2
        assert registry.names == frozenset({"A", "B"})
        assert registry.get("A").name == "A"
        assert registry.get("missing") is None

    def test_duplicate_names_fail_fast(self, make_template):
        with pytest.raises(ConfigurationError, match="Duplicate template name"):
            TemplateRegistry([make_template("Daily Sync"), make_template("Daily Sync", hour=10)])

    def test_description_without_marker_is_rejected(self, make_template):
        with pytest.raises(ConfigurationError, match="marker"):
            TemplateRegistry([make_template(description="Conference ID: 123")])

    @pytest.mark.parametrize("description", [
        "{marker} agenda {agenda}",
        "{marker} slot {0}",
        "{marker!x} bad conversion",
        "{marker} {date.year}",
    ])
    def test_unrenderable_description_is_rejected(self, make_template, description):
        with pytest.raises(ConfigurationError, match="cannot be rendered"):
            TemplateRegistry([make_template(description=description)])

    def test_escaped_marker_is_not_a_marker(self, make_template):
        with pytest.raises(ConfigurationError, match="must contain the"):
            TemplateRegistry([make_template(description="{{marker}} Conference ID: 123")])

    def test_from_dicts_rejects_unknown_description_field(self):
        with pytest.raises(ConfigurationError, match="cannot be rendered"):
            TemplateRegistry.from_dicts([dict(VALID_TEMPLATE, description="{marker} agenda {agenda}")])

    @pytest.mark.parametrize("overrides", [
        {"weekdays": ()},
        {"weekdays": (0, 1)},
        {"weekdays": (8,)},
        {"hour": 24},
        {"minute": 60},
        {"duration_minutes": 0},
        {"reminder_minutes": 0},
    ])
    def test_invalid_templates_are_rejected(self, make_template, overrides):
        with pytest.raises(ConfigurationError):
            TemplateRegistry([make_template(**overrides)])

    def test_from_dicts(self):
        registry = TemplateRegistry.from_dicts([VALID_TEMPLATE, dict(VALID_TEMPLATE, name="Review")])
        assert registry.names == frozenset({"Daily Sync", "Review"})

    def test_from_dicts_reports_every_problem(self):
        bad = dict(VALID_TEMPLATE, days=[0], durationMinutes=-5)

        with pytest.raises(ConfigurationError) as excinfo:
            TemplateRegistry.from_dicts([bad, VALID_TEMPLATE, VALID_TEMPLATE])

        message = str(excinfo.value)
        assert "Invalid weekday" in message
        assert "durationMinutes" in message
        assert "duplicate name 'Daily Sync'" in message


class TestTemplateValidator:
    def test_valid_template_has_no_errors(self):
        assert TemplateValidator.validate_template_structure(VALID_TEMPLATE) == []

    def test_missing_fields(self):
        errors = TemplateValidator.validate_template_structure({"name": "Only a name"})
        assert "Missing required field: days" in errors
        assert "Missing required field: description" in errors

    def test_bool_is_not_a_positive_int(self):
        assert not TemplateValidator.validate_positive_int(True)
        assert TemplateValidator.validate_positive_int(1)

    def test_time_must_be_mapping(self):
        assert TemplateValidator.validate_time("09:00") != []

    def test_description_is_rendered_with_every_field(self):
        assert TemplateValidator.validate_description("{marker} {weekday} on {date}") == []
        assert TemplateValidator.validate_description("{marker} {agenda}") != []

    def test_templates_must_be_a_list(self):
        assert TemplateValidator.validate_template_list({"events": []}) == ["Templates must be a list"]


class TestIsAutoScheduled:
    NAMES = frozenset({"Daily Sync"})

    def test_owned_event(self, marker):
        assert is_auto_scheduled("Daily Sync", f"{marker} Conference ID: 1", self.NAMES, marker)

    def test_title_match_without_marker_is_not_owned(self, marker):
        assert not is_auto_scheduled("Daily Sync", "Manually created", self.NAMES, marker)

    def test_marker_with_unknown_title_is_not_owned(self, marker):
        assert not is_auto_scheduled("Daily sync", f"{marker} ...", self.NAMES, marker)

    def test_missing_description_is_not_owned(self, marker):
        assert not is_auto_scheduled("Daily Sync", None, self.NAMES, marker)
