"""
Tests for the form submission handler.
"""

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from event_signup.forms.dto import FormSubmitEvent, PubSubPushEnvelope
from event_signup.signup.submission import SubmissionHandler

from fakes import http_error


def submit(email=None):
    return FormSubmitEvent.model_validate(
        {"formId": "form1", "response": {"responseId": "r1", "respondentEmail": email}}
    )


class TestSubmissionHandler:

    def test_adds_respondent_as_guest(self, submission_handler, properties, calendar_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        submission_handler(submit("a@example.com"))
        assert calendar_service.guests("cal1", "evt1") == ["a@example.com"]

    def test_successive_respondents_accumulate(self, submission_handler, properties, calendar_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        submission_handler(submit("a@example.com"))
        submission_handler(submit("b@example.com"))
        submission_handler(submit("a@example.com"))
        assert calendar_service.guests("cal1", "evt1") == ["a@example.com", "b@example.com"]

    def test_unconfigured_makes_no_calendar_call(self, submission_handler, calendar_service, caplog):
        with caplog.at_level(logging.INFO):
            submission_handler(submit("a@example.com"))
        assert calendar_service.calls == []
        assert "Configuration not found." in caplog.text

    def test_partial_binding_makes_no_calendar_call(self, submission_handler, properties, calendar_service):
        properties.set_many({"eventId": "evt1"})
        submission_handler(submit("a@example.com"))
        assert calendar_service.calls == []

    def test_missing_email_is_skipped(self, submission_handler, properties, calendar_service, caplog):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        with caplog.at_level(logging.INFO):
            submission_handler(submit(None))
        assert calendar_service.calls == []
        assert "Respondent email not found." in caplog.text

    def test_event_without_response_is_skipped(self, submission_handler, properties, calendar_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        submission_handler(FormSubmitEvent())
        assert calendar_service.calls == []

    def test_deleted_calendar_is_logged(self, submission_handler, properties, caplog):
        properties.set_many({"calendarId": "gone", "eventId": "evt1"})
        with caplog.at_level(logging.INFO):
            submission_handler(submit("a@example.com"))
        assert "Calendar not found: gone" in caplog.text

    def test_deleted_event_is_logged(self, submission_handler, properties, calendar_service, caplog):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        del calendar_service.events_by_calendar["cal1"]["evt1"]
        with caplog.at_level(logging.INFO):
            submission_handler(submit("a@example.com"))
        assert "Event not found: evt1" in caplog.text
        assert not [c for c in calendar_service.calls if c[0] == "events.patch"]

    def test_platform_error_never_escapes(self, submission_handler, properties, calendar_service, caplog):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        calendar_service.fail_with = http_error(500, "Backend Error")
        with caplog.at_level(logging.INFO):
            assert submission_handler(submit("a@example.com")) is None
        assert "Error in add_attendee_on_submit" in caplog.text

    def test_properties_failure_never_escapes(self, directory, resolver, caplog):
        properties = MagicMock()
        properties.get_all.side_effect = OSError("disk gone")
        handler = SubmissionHandler(properties=properties, directory=directory, resolver=resolver)
        handler(submit("a@example.com"))
        assert "disk gone" in caplog.text


def iso_ago(**delta):
    moment = datetime.now(timezone.utc) - timedelta(**delta)
    return moment.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def notification(form_id="form1", event_type="RESPONSES", publish_time=None):
    return PubSubPushEnvelope.model_validate({
        "message": {
            "attributes": {"formId": form_id, "watchId": "watch-1", "eventType": event_type},
            "messageId": "1234",
            "publishTime": publish_time or iso_ago(seconds=0),
        },
        "subscription": "projects/signup/subscriptions/form-submissions-push",
    })


class TestHandleNotification:

    def test_new_response_adds_guest(self, submission_handler, properties, forms_service, calendar_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        forms_service.add_response("a@example.com", submitted_at=iso_ago(seconds=5))
        assert submission_handler.handle_notification(notification()) == 1
        assert calendar_service.guests("cal1", "evt1") == ["a@example.com"]

    def test_responses_filtered_by_publish_time(self, submission_handler, properties, forms_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        submission_handler.handle_notification(notification())
        _, kwargs = [c for c in forms_service.calls if c[0] == "responses.list"][0]
        assert kwargs["filter"].startswith("timestamp > ")

    def test_old_responses_not_replayed(self, submission_handler, properties, forms_service, calendar_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        forms_service.add_response("old@example.com", submitted_at=iso_ago(days=2))
        forms_service.add_response("new@example.com", submitted_at=iso_ago(seconds=5))
        assert submission_handler.handle_notification(notification()) == 1
        assert calendar_service.guests("cal1", "evt1") == ["new@example.com"]

    def test_redelivered_notification_adds_guest_once(self, submission_handler, properties,
                                                      forms_service, calendar_service):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        forms_service.add_response("a@example.com", submitted_at=iso_ago(seconds=5))
        submission_handler.handle_notification(notification())
        submission_handler.handle_notification(notification())
        assert calendar_service.guests("cal1", "evt1") == ["a@example.com"]

    def test_schema_change_is_ignored(self, submission_handler, forms_service):
        assert submission_handler.handle_notification(notification(event_type="SCHEMA")) == 0
        assert forms_service.calls == []

    def test_other_form_is_ignored(self, submission_handler, forms_service, caplog):
        with caplog.at_level(logging.INFO):
            assert submission_handler.handle_notification(notification(form_id="other")) == 0
        assert forms_service.calls == []
        assert "Ignoring notification for form other" in caplog.text

    def test_response_without_email_is_skipped(self, submission_handler, properties,
                                               forms_service, calendar_service, caplog):
        properties.set_many({"calendarId": "cal1", "eventId": "evt1"})
        forms_service.add_response(None, submitted_at=iso_ago(seconds=5))
        with caplog.at_level(logging.INFO):
            submission_handler.handle_notification(notification())
        assert "Respondent email not found." in caplog.text
        assert calendar_service.guests("cal1", "evt1") == []

    def test_forms_error_never_escapes(self, submission_handler, forms_service, caplog):
        forms_service.fail_with = http_error(403, "Forbidden")
        with caplog.at_level(logging.INFO):
            assert submission_handler.handle_notification(notification()) == 0
        assert "Error handling form notification" in caplog.text

    def test_without_form_client_nothing_is_read(self, directory, resolver, properties):
        handler = SubmissionHandler(properties=properties, directory=directory, resolver=resolver)
        assert handler.handle_notification(notification()) == 0
