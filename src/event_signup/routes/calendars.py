from fastapi import APIRouter, Depends, Query
from typing import List

from event_signup.calendars.directory import CalendarDirectory
from event_signup.calendars.dto import CalendarSummary, EventSummary
from event_signup.calendars.events import EventResolver
from event_signup.dependencies import get_calendar_directory, get_event_resolver

router = APIRouter()


@router.get("/", response_model=List[CalendarSummary], response_model_by_alias=True)
def list_calendars(directory: CalendarDirectory = Depends(get_calendar_directory)):
    """Calendars the user can pick from, default calendar first. Empty if unavailable."""
    return directory.list_calendars()


@router.get(
    "/{calendar_id}/events",
    response_model=List[EventSummary],
    response_model_by_alias=True,
)
def search_events(
    calendar_id: str,
    query: str = Query(default="", description="Text to match against upcoming events"),
    resolver: EventResolver = Depends(get_event_resolver),
):
    """Upcoming events within a year matching query. Empty on any failure."""
    return resolver.search(calendar_id, query)
