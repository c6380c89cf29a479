"""
Sign-up Data Transfer Objects

The dialog receives one of three shapes and renders each differently:
- ConfiguredStatus: `isConfigured` true with the linked event's details
- UnconfiguredStatus: `isConfigured` false, with calendars to pick from
  and/or an `errorMessage`
- OperationError: bare `errorMessage` without `isConfigured`, returned
  when saving the configuration fails
"""

from typing import List, Literal, Optional, Union

from event_signup.calendars.dto import CalendarSummary, CamelModel


class Binding(CamelModel):
    """The persisted calendar/event pair. Both set or both absent."""
    calendar_id: Optional[str] = None
    event_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.calendar_id) and bool(self.event_id)


class ConfiguredStatus(CamelModel):
    is_configured: Literal[True] = True
    linked_calendar_name: str
    linked_event_title: str
    linked_event_time: str
    form_collects_emails: bool


class UnconfiguredStatus(CamelModel):
    is_configured: Literal[False] = False
    all_calendars: Optional[List[CalendarSummary]] = None
    error_message: Optional[str] = None


class OperationError(CamelModel):
    error_message: str


DialogData = Union[ConfiguredStatus, UnconfiguredStatus, OperationError]


def dump_dialog_data(data: DialogData) -> dict:
    """JSON-ready dict with camelCase keys and unset fields dropped."""
    return data.model_dump(by_alias=True, exclude_none=True)
