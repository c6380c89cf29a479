"""
Configuration Manager

Owns the binding between the form and a calendar event:
- reads and writes the persisted calendarId/eventId pair
- derives the dialog status from it
- keeps exactly one live submission trigger installed while configured

Every public operation except set_accepting_responses converts failures
into a DialogData error shape instead of raising.
"""

import logging
from datetime import datetime, timedelta

import pytz

from event_signup.calendars.directory import CalendarDirectory
from event_signup.calendars.dto import LinkedEventError
from event_signup.calendars.events import EventResolver
from event_signup.constants import PROPERTY_KEYS, TRIGGER_SETTINGS
from event_signup.db.properties import PropertiesStore
from event_signup.forms.client import FormsClient
from event_signup.forms.triggers import TriggerRegistry
from event_signup.signup.dto import (
    Binding,
    ConfiguredStatus,
    DialogData,
    OperationError,
    UnconfiguredStatus,
)

logger = logging.getLogger(__name__)


def read_binding(properties: PropertiesStore) -> Binding:
    config = properties.get_all()
    return Binding(
        calendar_id=config.get(PROPERTY_KEYS.CALENDAR_ID),
        event_id=config.get(PROPERTY_KEYS.EVENT_ID),
    )


class ConfigurationManager:
    def __init__(
        self,
        properties: PropertiesStore,
        directory: CalendarDirectory,
        resolver: EventResolver,
        form: FormsClient,
        triggers: TriggerRegistry,
        handler_name: str = TRIGGER_SETTINGS.HANDLER_NAME,
    ):
        self.properties = properties
        self.directory = directory
        self.resolver = resolver
        self.form = form
        self.triggers = triggers
        self.handler_name = handler_name

    def get_status(self) -> DialogData:
        """
        Current dialog status.

        A binding that no longer resolves falls back to the unconfigured
        status, carrying the lookup error as errorMessage.
        """
        try:
            binding = read_binding(self.properties)

            if not binding.is_complete:
                return UnconfiguredStatus(all_calendars=self.directory.list_calendars())

            self.ensure_trigger()

            details = self.resolver.describe(binding.calendar_id, binding.event_id)
            if isinstance(details, LinkedEventError):
                return UnconfiguredStatus(
                    all_calendars=self.directory.list_calendars(),
                    error_message=details.error,
                )

            return ConfiguredStatus(
                linked_calendar_name=details.calendar_name,
                linked_event_title=details.event_title,
                linked_event_time=details.event_time,
                form_collects_emails=self.form.collects_email(),
            )
        except Exception as e:
            logger.error(f"Error in get_status: {e}")
            return UnconfiguredStatus(error_message=f"Server error: {e}")

    def save(self, calendar_id: str, event_id: str) -> DialogData:
        """Store the binding as given, reinstall the trigger, return the new status."""
        try:
            self.properties.set_many({
                PROPERTY_KEYS.CALENDAR_ID: calendar_id,
                PROPERTY_KEYS.EVENT_ID: event_id,
            })
            logger.info(f"Configuration saved: Calendar ID: {calendar_id}, Event ID: {event_id}")
            self.install_trigger()
            return self.get_status()
        except Exception as e:
            logger.error(f"Error saving configuration: {e}")
            return OperationError(error_message=f"Error saving configuration: {e}")

    def reset(self) -> DialogData:
        """Remove the submission trigger and every stored property."""
        try:
            self._delete_handler_triggers()
            self.properties.delete_all()
            logger.info("Configuration and trigger have been reset.")
            return self.get_status()
        except Exception as e:
            logger.error(f"Error resetting configuration: {e}")
            return UnconfiguredStatus(error_message=f"Server error while resetting: {e}")

    def set_accepting_responses(self, enabled: bool) -> bool:
        return self.form.set_accepting_responses(enabled)

    def _delete_handler_triggers(self) -> int:
        deleted = 0
        for trigger in self.triggers.list():
            if trigger.handler_name == self.handler_name:
                self.triggers.delete(trigger.id)
                deleted += 1
        return deleted

    def install_trigger(self) -> None:
        """
        Replace any submission trigger of this handler with a fresh one.

        Safe to repeat: at most one trigger per handler name survives.
        """
        deleted = self._delete_handler_triggers()
        if deleted:
            logger.info(f"Deleted {deleted} existing trigger(s) for {self.handler_name}")
        self.triggers.create(self.handler_name, TRIGGER_SETTINGS.ON_FORM_SUBMIT)
        logger.info("Form submit trigger created/updated.")

    def ensure_trigger(self) -> str:
        """
        Keep the submission trigger alive while a binding exists.

        Expired or suspended watches count as absent and are replaced, as is
        any set other than exactly one live watch. A live watch close to
        expiry is renewed in place. Failures are logged, never raised.

        Returns:
            What was done: "skipped", "ok", "renewed", "installed" or "failed"
        """
        try:
            if not read_binding(self.properties).is_complete:
                return "skipped"

            now = datetime.now(pytz.UTC)
            own = [t for t in self.triggers.list() if t.handler_name == self.handler_name]
            live = [t for t in own if t.is_active and not t.expires_before(now)]

            if len(own) != 1 or len(live) != 1:
                logger.warning(
                    f"{len(live)} live of {len(own)} trigger(s) for {self.handler_name}; reinstalling"
                )
                self.install_trigger()
                return "installed"

            trigger = live[0]
            if trigger.expires_before(now + timedelta(days=TRIGGER_SETTINGS.RENEW_MARGIN_DAYS)):
                renewed = self.triggers.renew(trigger.id)
                logger.info(f"Renewed trigger {trigger.id} until {renewed.expire_time}")
                return "renewed"
            return "ok"
        except Exception as e:
            logger.error(f"Error in ensure_trigger: {e}")
            return "failed"
