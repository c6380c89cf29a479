"""
Event Sign-up Constants
"""


class APP_SETTINGS:
    """Application metadata"""
    APP_NAME = "Event Sign-up Manager"
    VERSION = "1.0.0"
    DESCRIPTION = "Adds form respondents as guests on a linked calendar event"


class GOOGLE_API_SETTINGS:
    """Google Workspace API settings"""
    CALENDAR_API_VERSION = "v3"
    FORMS_API_VERSION = "v1"
    SCOPES = [
        "https://www.googleapis.com/auth/calendar",
        "https://www.googleapis.com/auth/forms.body",
        "https://www.googleapis.com/auth/forms.responses.readonly",
    ]
    # Statuses the API answers with for missing or deleted resources
    NOT_FOUND_STATUSES = (404, 410)


class PROPERTY_KEYS:
    """Keys of the persisted binding"""
    CALENDAR_ID = "calendarId"
    EVENT_ID = "eventId"


class TRIGGER_SETTINGS:
    """Submission trigger settings"""
    HANDLER_NAME = "add_attendee_on_submit"
    ON_FORM_SUBMIT = "RESPONSES"
    # Renew a watch once it is this close to expiry
    RENEW_MARGIN_DAYS = 2
    ACTIVE_STATE = "ACTIVE"


class SEARCH_SETTINGS:
    """Event search settings"""
    WINDOW_YEARS = 1
    PAGE_SIZE = 250


# Form settings that make the form record a respondent email
EMAIL_COLLECTING_TYPES = ("VERIFIED", "RESPONDER_INPUT")
