"""
Routes Data Transfer Objects (DTOs)

Request bodies accepted by the API routes. Responses reuse the sign-up and
calendar models directly.
"""

from event_signup.calendars.dto import CamelModel


class SaveConfigurationRequest(CamelModel):
    """Request model for saving the calendar/event binding."""
    calendar_id: str
    event_id: str


class AcceptingResponsesRequest(CamelModel):
    """Request model for opening or closing the form."""
    enabled: bool
