"""
Component Wiring

Cached factories that build each component once per process. Routes take
them through FastAPI's Depends, so tests can swap any of them with
app.dependency_overrides.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from event_signup.calendars.directory import CalendarDirectory
from event_signup.calendars.events import EventResolver
from event_signup.clients.google_services import (
    build_calendar_service,
    build_forms_service,
    load_credentials,
)
from event_signup.config import settings
from event_signup.constants import TRIGGER_SETTINGS
from event_signup.db.properties import InMemoryPropertiesStore, JsonFilePropertiesStore
from event_signup.forms.client import FormsClient
from event_signup.forms.triggers import FormWatchTriggerRegistry
from event_signup.signup.configuration import ConfigurationManager
from event_signup.signup.submission import SubmissionHandler

logger = logging.getLogger(__name__)


@lru_cache
def get_credentials():
    return load_credentials()


@lru_cache
def get_calendar_service():
    return build_calendar_service(get_credentials())


@lru_cache
def get_forms_service():
    return build_forms_service(get_credentials())


@lru_cache
def get_properties():
    if settings.PROPERTIES_FILE:
        return JsonFilePropertiesStore(settings.PROPERTIES_FILE, namespace=settings.FORM_ID)
    return InMemoryPropertiesStore()


@lru_cache
def get_calendar_directory() -> CalendarDirectory:
    return CalendarDirectory(get_calendar_service())


@lru_cache
def get_event_resolver() -> EventResolver:
    return EventResolver(
        get_calendar_service(),
        get_calendar_directory(),
        user_timezone=settings.USER_TIMEZONE,
        send_updates=settings.GUEST_SEND_UPDATES,
    )


@lru_cache
def get_forms_client() -> FormsClient:
    return FormsClient(get_forms_service(), settings.FORM_ID)


@lru_cache
def get_trigger_registry() -> FormWatchTriggerRegistry:
    return FormWatchTriggerRegistry(
        get_forms_service(),
        settings.FORM_ID,
        topics={TRIGGER_SETTINGS.HANDLER_NAME: settings.TRIGGER_TOPIC},
    )


@lru_cache
def get_configuration_manager() -> ConfigurationManager:
    return ConfigurationManager(
        properties=get_properties(),
        directory=get_calendar_directory(),
        resolver=get_event_resolver(),
        form=get_forms_client(),
        triggers=get_trigger_registry(),
    )


@lru_cache
def get_submission_handler() -> SubmissionHandler:
    return SubmissionHandler(
        properties=get_properties(),
        directory=get_calendar_directory(),
        resolver=get_event_resolver(),
        form=get_forms_client(),
        lookback=timedelta(minutes=settings.SUBMISSION_LOOKBACK_MINUTES),
    )


def get_optional_submission_handler() -> Optional[SubmissionHandler]:
    """
    The submission handler, or None when it cannot be built.

    Building it loads credentials and API clients, which the submission
    entry point must not let escape as a server error.
    """
    try:
        return get_submission_handler()
    except Exception as e:
        logger.error(f"Submission handler unavailable: {e}")
        return None
