"""
Submission Handler

Entry point the platform calls once per form response. Adds the respondent
as a guest on the bound event. Nothing raised in here may reach the caller:
every failure ends in a log line and a silent return.

Forms watches do not carry the response itself. A watch notification only
names the form, so `handle_notification` re-reads the responses submitted
around the time it was published and runs the handler on each of them.
Replaying a response is harmless because an existing guest is not added
twice.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz

from event_signup.calendars.directory import CalendarDirectory
from event_signup.calendars.events import EventResolver
from event_signup.calendars.utils.datetime_utils import parse_rfc3339
from event_signup.constants import TRIGGER_SETTINGS
from event_signup.db.properties import PropertiesStore
from event_signup.forms.client import FormsClient
from event_signup.forms.dto import FormSubmitEvent, PubSubPushEnvelope
from event_signup.signup.configuration import read_binding

logger = logging.getLogger(__name__)


class SubmissionHandler:
    def __init__(
        self,
        properties: PropertiesStore,
        directory: CalendarDirectory,
        resolver: EventResolver,
        form: Optional[FormsClient] = None,
        lookback: timedelta = timedelta(minutes=10),
    ):
        self.properties = properties
        self.directory = directory
        self.resolver = resolver
        self.form = form
        self.lookback = lookback

    def __call__(self, event: FormSubmitEvent) -> None:
        try:
            binding = read_binding(self.properties)
            if not binding.is_complete:
                logger.warning("Configuration not found.")
                return

            respondent_email = event.response.respondent_email
            if not respondent_email:
                logger.warning("Respondent email not found.")
                return

            calendar = self.directory.resolve_calendar(binding.calendar_id)
            if not calendar:
                logger.warning(f"Calendar not found: {binding.calendar_id}")
                return

            calendar_event = self.resolver.add_guest(calendar.id, binding.event_id, respondent_email)
            if not calendar_event:
                logger.warning(f"Event not found: {binding.event_id}")
                return

            logger.info(
                f'Added guest: {respondent_email} to event: "{calendar_event.get("summary", "")}".'
            )
        except Exception as e:
            logger.error(f"Error in add_attendee_on_submit: {e}")

    def handle_notification(self, envelope: PubSubPushEnvelope) -> int:
        """
        Turn a watch notification into submission events.

        Returns:
            Number of responses passed to the handler
        """
        try:
            attributes = envelope.message.attributes
            event_type = attributes.get('eventType')
            if event_type != TRIGGER_SETTINGS.ON_FORM_SUBMIT:
                logger.info(f"Ignoring form event of type {event_type}")
                return 0

            if self.form is None:
                logger.warning("No form client configured for notifications.")
                return 0

            form_id = attributes.get('formId')
            if form_id != self.form.form_id:
                logger.warning(f"Ignoring notification for form {form_id}")
                return 0

            if envelope.message.publish_time:
                published = parse_rfc3339(envelope.message.publish_time)
            else:
                published = datetime.now(pytz.UTC)

            responses = self.form.list_responses(since=published - self.lookback)
            for response in responses:
                self(FormSubmitEvent(form_id=form_id, response=response))
            return len(responses)
        except Exception as e:
            logger.error(f"Error handling form notification: {e}")
            return 0
