"""
Validation utilities for the Weekly Event Scheduler
"""
from typing import Dict, Any, List

MARKER_FIELD = "{marker}"
MARKER_SENTINEL = "\x00marker\x00"


class TemplateValidator:
    """Validator for event template definitions"""

    @staticmethod
    def validate_positive_int(value: Any) -> bool:
        """Validate a strictly positive integer (bools rejected)"""
        return isinstance(value, int) and not isinstance(value, bool) and value > 0

    @staticmethod
    def validate_time(time_data: Any) -> List[str]:
        """Validate a {"hour": h, "minute": m} mapping"""
        if not isinstance(time_data, dict):
            return ["'time' must be an object with 'hour' and 'minute'"]

        errors = []
        hour = time_data.get("hour")
        minute = time_data.get("minute", 0)
        if not isinstance(hour, int) or isinstance(hour, bool) or not 0 <= hour <= 23:
            errors.append(f"Invalid hour: {hour!r}. Expected 0-23")
        if not isinstance(minute, int) or isinstance(minute, bool) or not 0 <= minute <= 59:
            errors.append(f"Invalid minute: {minute!r}. Expected 0-59")
        return errors

    @staticmethod
    def validate_description(description: str) -> List[str]:
        """Render a description template with sample values; the marker must survive rendering"""
        try:
            rendered = description.format(marker=MARKER_SENTINEL, date="2026-01-05", weekday="Monday")
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            return [f"'description' cannot be rendered: {e!r}. Allowed fields: {{marker}}, {{date}}, {{weekday}}"]

        if MARKER_SENTINEL not in rendered:
            return [f"'description' must contain the {MARKER_FIELD} field"]
        return []

    @staticmethod
    def validate_template_structure(template_data: Dict[str, Any]) -> List[str]:
        """Validate a single template definition and return list of errors"""
        if not isinstance(template_data, dict):
            return ["Template must be an object"]

        errors = []

        required_fields = ["name", "days", "time", "durationMinutes", "description"]
        for field in required_fields:
            if field not in template_data:
                errors.append(f"Missing required field: {field}")

        name = template_data.get("name")
        if "name" in template_data and (not isinstance(name, str) or not name.strip()):
            errors.append("'name' must be a non-empty string")

        if "days" in template_data:
            days = template_data["days"]
            if not isinstance(days, list) or not days:
                errors.append("'days' must be a non-empty list")
            else:
                for day in days:
                    if not isinstance(day, int) or isinstance(day, bool) or not 1 <= day <= 7:
                        errors.append(f"Invalid weekday: {day!r}. Expected 1 (Monday) to 7 (Sunday)")

        if "time" in template_data:
            errors.extend(TemplateValidator.validate_time(template_data["time"]))

        if "durationMinutes" in template_data:
            if not TemplateValidator.validate_positive_int(template_data["durationMinutes"]):
                errors.append(f"'durationMinutes' must be a positive integer: {template_data['durationMinutes']!r}")

        reminder = template_data.get("reminderMinutes")
        if reminder is not None and not TemplateValidator.validate_positive_int(reminder):
            errors.append(f"'reminderMinutes' must be a positive integer: {reminder!r}")

        if "description" in template_data:
            description = template_data["description"]
            if not isinstance(description, str):
                errors.append("'description' must be a string")
            else:
                errors.extend(TemplateValidator.validate_description(description))

        return errors

    @staticmethod
    def validate_template_list(templates_data: Any) -> List[str]:
        """Validate a list of templates, prefixing errors with the template position"""
        if not isinstance(templates_data, list):
            return ["Templates must be a list"]

        errors = []
        seen_names = set()
        for i, template_data in enumerate(templates_data):
            for error in TemplateValidator.validate_template_structure(template_data):
                errors.append(f"Template {i}: {error}")

            name = template_data.get("name") if isinstance(template_data, dict) else None
            if isinstance(name, str):
                if name in seen_names:
                    errors.append(f"Template {i}: duplicate name '{name}'")
                seen_names.add(name)

        return errors
