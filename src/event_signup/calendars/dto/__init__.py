"""
Calendar Data Models

Read-only projections of Google Calendar resources. None of these are
persisted; they are rebuilt from the API on every request.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CalendarSummary(CamelModel):
    """A calendar offered for selection."""
    id: str
    name: str


class CalendarHandle(CamelModel):
    """A resolved calendar that events can be looked up in."""
    id: str
    name: str
    time_zone: str = "UTC"


class EventSummary(CamelModel):
    """Search result entry; times are ISO-8601 strings."""
    id: str
    title: str
    start_time: str
    end_time: str


class LinkedEventDetails(CamelModel):
    """Display details of the event the form is bound to."""
    calendar_name: str
    event_title: str
    event_time: str


class LinkedEventError(CamelModel):
    """Outcome of a describe call that could not resolve the binding."""
    error: str
