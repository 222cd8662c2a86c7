"""Tests for the scheduler entry point."""

import json
import logging
from datetime import date
from unittest.mock import patch

import main
from src.scheduler.weekly_scheduler import RunState


class TestRunWeeklySchedule:
    def test_runs_against_given_manager(self, calendar_manager, make_settings, add_holiday, wednesday, caplog):
        add_holiday(date(2026, 10, 29))

        with caplog.at_level(logging.INFO):
            report = main.run_weekly_schedule(make_settings(), calendar_manager, now=wednesday)

        assert report.state is RunState.DONE
        assert len(report.created) == 4
        assert "Skip holiday for Daily Sync: 2026-10-29" in caplog.text
        assert "Cleanup: deleted 0 events before 2026-09-21" in caplog.text
        assert "WEEKLY SCHEDULE SUMMARY" in caplog.text

    def test_builds_google_manager_from_settings(self, calendar_manager, make_settings, wednesday):
        settings = make_settings()

        with patch.object(main, "GoogleCalendarManager", return_value=calendar_manager) as google:
            main.run_weekly_schedule(settings, now=wednesday)

        google.assert_called_once_with(token_path="unused-token.json")


class TestMain:
    def test_dry_run_prints_scheduled_events(self, capsys, monkeypatch):
        monkeypatch.delenv("WEEKLY_EVENTS_TEMPLATES_FILE", raising=False)
        monkeypatch.delenv("WEEKLY_EVENTS_MARKER", raising=False)

        with patch.object(main, "SchedulerLogger"):
            assert main.main(["--dry-run"]) == 0

        events = json.loads(capsys.readouterr().out)
        # Built-in templates: 1 + 4 + 3 + 1 + 1 instances per week
        assert len(events) == 10
        assert all(event["Description"].startswith("[Auto-Scheduled]") for event in events)

    def test_exit_code_reflects_failures(self, calendar_manager, make_settings, wednesday):
        settings = make_settings()
        calendar_manager.failing_summaries.add("Daily Sync")

        with patch.object(main.Config, "load_settings", return_value=settings), \
                patch.object(main, "GoogleCalendarManager", return_value=calendar_manager), \
                patch.object(main, "SchedulerLogger"):
            assert main.main([]) == 1
