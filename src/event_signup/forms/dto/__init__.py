"""
Form Data Models

- Trigger: a registered submission watch on the active form
- FormResponse / FormSubmitEvent: payload delivered once per form submission
- PubSubMessage / PubSubPushEnvelope: watch notification pushed by Cloud Pub/Sub
"""

from datetime import datetime
from typing import Dict, Optional

from event_signup.calendars.dto import CamelModel
from event_signup.calendars.utils.datetime_utils import parse_rfc3339
from event_signup.constants import TRIGGER_SETTINGS


class Trigger(CamelModel):
    """Platform registration binding a handler name to a form event."""
    id: str
    handler_name: str
    event_type: str
    expire_time: Optional[str] = None
    state: Optional[str] = None

    @property
    def is_active(self) -> bool:
        # State is omitted on some watches
        return self.state in (None, TRIGGER_SETTINGS.ACTIVE_STATE)

    def expires_before(self, moment: datetime) -> bool:
        if not self.expire_time:
            return False
        return parse_rfc3339(self.expire_time) <= moment


class FormResponse(CamelModel):
    """The submitted response, as returned by the Forms API."""
    response_id: Optional[str] = None
    respondent_email: Optional[str] = None
    last_submitted_time: Optional[str] = None


class FormSubmitEvent(CamelModel):
    """Single argument of the submission handler."""
    form_id: Optional[str] = None
    response: FormResponse = FormResponse()


class PubSubMessage(CamelModel):
    """
    Pub/Sub message published by a Forms watch.

    The form event travels in the attributes (formId, watchId, eventType);
    the message body is empty.
    """
    attributes: Dict[str, str] = {}
    message_id: Optional[str] = None
    publish_time: Optional[str] = None
    data: Optional[str] = None


class PubSubPushEnvelope(CamelModel):
    """Request body of a Pub/Sub push subscription."""
    message: PubSubMessage
    subscription: Optional[str] = None
