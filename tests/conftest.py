from datetime import datetime, timedelta

import pytest
import pytz

from event_signup.calendars.directory import CalendarDirectory
from event_signup.calendars.events import EventResolver
from event_signup.constants import TRIGGER_SETTINGS
from event_signup.db.properties import InMemoryPropertiesStore
from event_signup.forms.client import FormsClient
from event_signup.forms.triggers import FormWatchTriggerRegistry
from event_signup.signup.configuration import ConfigurationManager
from event_signup.signup.submission import SubmissionHandler

from fakes import FakeCalendarService, FakeFormsService

FORM_ID = "form1"
TOPIC = "projects/signup/topics/form-submissions"


def iso_in(days: int, hours: int = 0) -> str:
    moment = datetime.now(pytz.UTC) + timedelta(days=days, hours=hours)
    return moment.replace(microsecond=0).isoformat().replace("+00:00", "Z")


@pytest.fixture
def calendar_service():
    service = FakeCalendarService(primary_id="me@example.com")
    service.add_calendar("team@example.com", "Team")
    service.add_calendar("me@example.com", "Me")
    service.add_calendar("holidays@example.com", "Holidays")
    service.add_calendar("cal1", "Workshops", time_zone="Europe/Berlin")
    service.add_event("cal1", "evt1", "Python Workshop", iso_in(7), iso_in(7, 2))
    service.add_event("cal1", "evt2", "Data Workshop", iso_in(30), iso_in(30, 3))
    service.add_event("cal1", "evt3", "Board Meeting", iso_in(60), iso_in(60, 1))
    return service


@pytest.fixture
def forms_service():
    return FakeFormsService(form_id=FORM_ID)


@pytest.fixture
def properties():
    return InMemoryPropertiesStore()


@pytest.fixture
def directory(calendar_service):
    return CalendarDirectory(calendar_service)


@pytest.fixture
def resolver(calendar_service, directory):
    return EventResolver(calendar_service, directory, user_timezone="UTC")


@pytest.fixture
def trigger_registry(forms_service):
    return FormWatchTriggerRegistry(
        forms_service, FORM_ID, topics={TRIGGER_SETTINGS.HANDLER_NAME: TOPIC}
    )


@pytest.fixture
def forms_client(forms_service):
    return FormsClient(forms_service, FORM_ID)


@pytest.fixture
def manager(properties, directory, resolver, forms_client, trigger_registry):
    return ConfigurationManager(
        properties=properties,
        directory=directory,
        resolver=resolver,
        form=forms_client,
        triggers=trigger_registry,
    )


@pytest.fixture
def submission_handler(properties, directory, resolver, forms_client):
    return SubmissionHandler(
        properties=properties, directory=directory, resolver=resolver, form=forms_client
    )
