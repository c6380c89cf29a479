"""
Submission Trigger Registry

Triggers are Forms API watches on the active form. A watch publishes form
events to a Cloud Pub/Sub topic; each handler name owns one topic, so the
handler a watch belongs to is found by reverse lookup of its topic.

Watches expire seven days after creation or last renewal and can be
suspended by the platform when their topic stops accepting messages.
"""

import logging
from typing import Dict, List, Protocol

from googleapiclient.errors import HttpError

from event_signup.clients.google_services import is_not_found
from event_signup.forms.dto import Trigger

logger = logging.getLogger(__name__)


class TriggerRegistry(Protocol):
    """Capability the configuration uses to manage submission triggers."""

    def list(self) -> List[Trigger]:
        ...

    def delete(self, trigger_id: str) -> None:
        ...

    def create(self, handler_name: str, event_type: str) -> Trigger:
        ...

    def renew(self, trigger_id: str) -> Trigger:
        ...


class FormWatchTriggerRegistry:
    """
    Trigger registry backed by `forms.watches` of one form.

    Args:
        service: Google Forms API service object
        form_id: ID of the active form
        topics: Handler name -> fully qualified Pub/Sub topic name
    """

    def __init__(self, service, form_id: str, topics: Dict[str, str]):
        self.service = service
        self.form_id = form_id
        self.topics = topics
        self._handlers = {topic: name for name, topic in topics.items()}

    def _to_trigger(self, watch: dict) -> Trigger:
        topic = watch.get('target', {}).get('topic', {}).get('topicName', '')
        return Trigger(
            id=watch['id'],
            handler_name=self._handlers.get(topic, ''),
            event_type=watch.get('eventType', ''),
            expire_time=watch.get('expireTime'),
            state=watch.get('state'),
        )

    def list(self) -> List[Trigger]:
        result = self.service.forms().watches().list(formId=self.form_id).execute()
        return [self._to_trigger(watch) for watch in result.get('watches', [])]

    def delete(self, trigger_id: str) -> None:
        try:
            self.service.forms().watches().delete(formId=self.form_id, watchId=trigger_id).execute()
        except HttpError as e:
            if not is_not_found(e):
                raise
            logger.info(f"Watch {trigger_id} was already gone")

    def create(self, handler_name: str, event_type: str) -> Trigger:
        if handler_name not in self.topics:
            raise ValueError(f"No topic configured for handler {handler_name}")
        watch = self.service.forms().watches().create(
            formId=self.form_id,
            body={
                'watch': {
                    'target': {'topic': {'topicName': self.topics[handler_name]}},
                    'eventType': event_type,
                }
            },
        ).execute()
        return self._to_trigger(watch)

    def renew(self, trigger_id: str) -> Trigger:
        """Push the watch's expiry seven days out. Errors propagate."""
        watch = self.service.forms().watches().renew(
            formId=self.form_id, watchId=trigger_id, body={}
        ).execute()
        return self._to_trigger(watch)
