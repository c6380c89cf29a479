"""
Google Forms Client

Live reads and writes of the active form's settings and responses.
"""

import logging
from datetime import datetime
from typing import List

import pytz

from event_signup.constants import EMAIL_COLLECTING_TYPES
from event_signup.forms.dto import FormResponse

logger = logging.getLogger(__name__)


class FormsClient:
    """
    Operations on one Google Form.

    Args:
        service: Google Forms API service object
        form_id: ID of the active form
    """

    def __init__(self, service, form_id: str):
        self.service = service
        self.form_id = form_id

    def _get_form(self) -> dict:
        return self.service.forms().get(formId=self.form_id).execute()

    def collects_email(self) -> bool:
        """Whether the form currently records respondent emails."""
        collection_type = self._get_form().get('settings', {}).get('emailCollectionType')
        return collection_type in EMAIL_COLLECTING_TYPES

    def set_accepting_responses(self, enabled: bool) -> bool:
        """
        Open or close the form for new responses. Errors propagate.

        Opening a form publishes it, since an unpublished form cannot accept
        responses. Closing leaves the published flag as it is.
        """
        if enabled:
            is_published = True
        else:
            publish_state = self._get_form().get('publishSettings', {}).get('publishState', {})
            # Forms created before publish settings existed are always published
            is_published = publish_state.get('isPublished', True)

        self.service.forms().setPublishSettings(
            formId=self.form_id,
            body={
                'publishSettings': {
                    'publishState': {
                        'isPublished': is_published,
                        'isAcceptingResponses': enabled,
                    }
                },
                'updateMask': 'publishState',
            },
        ).execute()
        logger.info(f"Form {self.form_id} accepting responses: {enabled}")
        return enabled

    def list_responses(self, since: datetime) -> List[FormResponse]:
        """
        Responses submitted after `since`, oldest first. Errors propagate.

        Args:
            since: Lower bound (exclusive) on a response's last submission time
        """
        if since.tzinfo is None:
            since = pytz.UTC.localize(since)
        # The filter accepts RFC 3339 timestamps in UTC
        timestamp = since.astimezone(pytz.UTC).strftime('%Y-%m-%dT%H:%M:%SZ')

        responses = []
        page_token = None
        while True:
            page = self.service.forms().responses().list(
                formId=self.form_id,
                filter=f"timestamp > {timestamp}",
                pageToken=page_token,
            ).execute()
            responses.extend(
                FormResponse.model_validate(item) for item in page.get('responses', [])
            )
            page_token = page.get('nextPageToken')
            if not page_token:
                break

        return sorted(responses, key=lambda r: r.last_submitted_time or '')
