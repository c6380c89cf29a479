"""
Calendar Directory

Lists the calendars the current user can access and resolves calendar IDs
to handles through the Google Calendar API.
"""

import logging
from typing import List, Optional

from googleapiclient.errors import HttpError

from event_signup.calendars.dto import CalendarHandle, CalendarSummary
from event_signup.clients.google_services import is_not_found

# Set up logging
logger = logging.getLogger(__name__)


class CalendarDirectory:
    """
    Calendar lookups for the signed-in user.

    Args:
        service: Google Calendar API service object
    """

    def __init__(self, service):
        self.service = service

    def _fetch_calendar_list(self) -> List[dict]:
        entries = []
        page_token = None
        while True:
            result = self.service.calendarList().list(pageToken=page_token).execute()
            entries.extend(result.get('items', []))
            page_token = result.get('nextPageToken')
            if not page_token:
                return entries

    def get_default_calendar_id(self) -> str:
        """ID of the user's primary calendar."""
        return self.service.calendars().get(calendarId='primary').execute()['id']

    def list_calendars(self) -> List[CalendarSummary]:
        """
        All calendars accessible to the user, default calendar first.

        Other calendars keep the order the API returned them in. Any failure
        degrades to an empty list, so an empty result means "unavailable"
        rather than "the user has no calendars".
        """
        try:
            entries = self._fetch_calendar_list()
            default_id = self.get_default_calendar_id()

            calendars = [
                CalendarSummary(id=entry['id'], name=entry.get('summary', ''))
                for entry in entries
            ]

            for index, calendar in enumerate(calendars):
                if calendar.id == default_id:
                    calendars.insert(0, calendars.pop(index))
                    break

            return calendars
        except Exception as e:
            logger.error(f"Error in list_calendars: {e}")
            return []

    def resolve_calendar(self, calendar_id: str) -> Optional[CalendarHandle]:
        """
        Resolve a calendar ID to a handle.

        Returns:
            The calendar handle, or None if the ID does not resolve
        """
        if not calendar_id:
            return None
        try:
            calendar = self.service.calendars().get(calendarId=calendar_id).execute()
        except HttpError as e:
            if is_not_found(e):
                return None
            raise
        return CalendarHandle(
            id=calendar['id'],
            name=calendar.get('summary', ''),
            time_zone=calendar.get('timeZone') or 'UTC',
        )
