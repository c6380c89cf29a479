"""
Event Resolver

Searches a calendar for upcoming events, describes the linked event and adds
guests to it through the Google Calendar API.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import pytz
from googleapiclient.errors import HttpError

from event_signup.calendars.directory import CalendarDirectory
from event_signup.calendars.dto import EventSummary, LinkedEventDetails, LinkedEventError
from event_signup.calendars.utils.datetime_utils import (
    add_years,
    format_event_time_range,
    parse_google_calendar_datetime,
    to_utc_iso,
)
from event_signup.clients.google_services import is_not_found
from event_signup.constants import SEARCH_SETTINGS

# Set up logging
logger = logging.getLogger(__name__)

# Serializes read-modify-write of attendee lists within this process
_guest_list_lock = threading.Lock()


class EventResolver:
    """
    Event lookups within the user's calendars.

    Args:
        service: Google Calendar API service object
        directory: Calendar directory used to resolve calendar IDs
        user_timezone: Timezone event times are displayed in
        send_updates: Calendar `sendUpdates` value used when adding guests
    """

    def __init__(
        self,
        service,
        directory: CalendarDirectory,
        user_timezone: str = "UTC",
        send_updates: str = "none",
    ):
        self.service = service
        self.directory = directory
        self.user_timezone = user_timezone
        self.send_updates = send_updates

    def _now(self) -> datetime:
        return datetime.now(pytz.UTC)

    def get_event(self, calendar_id: str, event_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a raw event resource.

        Returns:
            The event, or None when it does not exist or was cancelled
        """
        if not event_id:
            return None
        try:
            event = self.service.events().get(calendarId=calendar_id, eventId=event_id).execute()
        except HttpError as e:
            if is_not_found(e):
                return None
            raise
        if event.get('status') == 'cancelled':
            return None
        return event

    def search(self, calendar_id: str, query: str) -> List[EventSummary]:
        """
        Search events in [now, now + 1 year) whose text matches query.

        Args:
            calendar_id: Calendar to search; empty returns [] without an API call
            query: Free text matched by the Calendar API; empty matches everything

        Returns:
            Matching events ordered by start time, or [] on any failure
        """
        if not calendar_id:
            return []
        try:
            calendar = self.directory.resolve_calendar(calendar_id)
            if not calendar:
                return []

            time_min = self._now()
            time_max = add_years(time_min, SEARCH_SETTINGS.WINDOW_YEARS)

            params = {
                'calendarId': calendar.id,
                'timeMin': to_utc_iso(time_min),
                'timeMax': to_utc_iso(time_max),
                'singleEvents': True,
                'orderBy': 'startTime',
                'maxResults': SEARCH_SETTINGS.PAGE_SIZE,
            }
            if query:
                params['q'] = query

            results = []
            page_token = None
            while True:
                page = self.service.events().list(pageToken=page_token, **params).execute()
                for event in page.get('items', []):
                    results.append(self._to_event_summary(event, calendar.time_zone))
                page_token = page.get('nextPageToken')
                if not page_token:
                    return results
        except Exception as e:
            logger.error(f"Error in search: {e}")
            return []

    def _to_event_summary(self, event: Dict[str, Any], tz_name: str) -> EventSummary:
        start_time = parse_google_calendar_datetime(event.get('start', {}), tz_name)
        end_time = parse_google_calendar_datetime(event.get('end', {}), tz_name)
        return EventSummary(
            id=event['id'],
            title=event.get('summary', ''),
            start_time=to_utc_iso(start_time),
            end_time=to_utc_iso(end_time),
        )

    def describe(self, calendar_id: str, event_id: str) -> Union[LinkedEventDetails, LinkedEventError]:
        """
        Display details of the bound event.

        Returns:
            LinkedEventDetails, or LinkedEventError when the calendar or event
            cannot be resolved or the API fails
        """
        try:
            calendar = self.directory.resolve_calendar(calendar_id)
            if not calendar:
                return LinkedEventError(error='Linked calendar not found.')

            event = self.get_event(calendar.id, event_id)
            if not event:
                return LinkedEventError(error='Linked event not found.')

            start_time = parse_google_calendar_datetime(event.get('start', {}), calendar.time_zone)
            end_time = parse_google_calendar_datetime(event.get('end', {}), calendar.time_zone)

            return LinkedEventDetails(
                calendar_name=calendar.name,
                event_title=event.get('summary', ''),
                event_time=format_event_time_range(start_time, end_time, self.user_timezone),
            )
        except Exception as e:
            return LinkedEventError(error=f"Could not retrieve event details: {e}")

    def add_guest(self, calendar_id: str, event_id: str, email: str) -> Optional[Dict[str, Any]]:
        """
        Add email to the event's guest list.

        The attendee list is re-read and patched under a process-wide lock so
        concurrent submissions do not overwrite each other's additions. An
        address already on the list (compared case-insensitively) is left as
        is and no update is sent.

        Returns:
            The event as stored after the update, or None if the event is gone
        """
        with _guest_list_lock:
            event = self.get_event(calendar_id, event_id)
            if not event:
                return None

            attendees = list(event.get('attendees', []))
            if any(a.get('email', '').lower() == email.lower() for a in attendees):
                logger.info(f"{email} is already a guest of event {event_id}")
                return event

            attendees.append({'email': email})
            return self.service.events().patch(
                calendarId=calendar_id,
                eventId=event_id,
                body={'attendees': attendees},
                sendUpdates=self.send_updates,
            ).execute()
