"""
Tests for component wiring that must not fail the request.
"""

import asyncio
import logging
from unittest.mock import MagicMock

from event_signup import dependencies, main

from conftest import TOPIC


class TestOptionalSubmissionHandler:

    def test_build_failure_returns_none(self, monkeypatch, caplog):
        def missing_credentials():
            raise FileNotFoundError("Credentials file not found: google_credentials.json")

        monkeypatch.setattr(dependencies, "get_submission_handler", missing_credentials)
        with caplog.at_level(logging.INFO):
            assert dependencies.get_optional_submission_handler() is None
        assert "Submission handler unavailable" in caplog.text

    def test_returns_built_handler(self, monkeypatch, submission_handler):
        monkeypatch.setattr(dependencies, "get_submission_handler", lambda: submission_handler)
        assert dependencies.get_optional_submission_handler() is submission_handler


class TestKeepTriggerAlive:

    def run_briefly(self, seconds=0.1):
        async def scenario():
            task = asyncio.create_task(main.keep_trigger_alive(interval_seconds=0.01))
            await asyncio.sleep(seconds)
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        asyncio.run(scenario())

    def test_checks_trigger_repeatedly(self, monkeypatch):
        manager = MagicMock()
        manager.ensure_trigger.return_value = "ok"
        monkeypatch.setattr(dependencies, "get_configuration_manager", lambda: manager)
        self.run_briefly()
        assert manager.ensure_trigger.call_count >= 2

    def test_survives_wiring_failure(self, monkeypatch, caplog):
        def no_credentials():
            raise FileNotFoundError("Credentials file not found")

        monkeypatch.setattr(dependencies, "get_configuration_manager", no_credentials)
        with caplog.at_level(logging.INFO):
            self.run_briefly()
        assert "Trigger check failed" in caplog.text

    def test_replaces_expired_watch(self, monkeypatch, manager, properties, forms_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        expired = forms_service.add_watch(TOPIC, expire_time="2020-01-01T00:00:00Z")
        monkeypatch.setattr(dependencies, "get_configuration_manager", lambda: manager)
        self.run_briefly(seconds=0.2)
        assert expired not in forms_service.watches_by_id
        assert forms_service.topics() == [TOPIC]
