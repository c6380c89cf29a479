"""
Google Workspace API Services

Loads OAuth credentials once and builds the Calendar and Forms API
service objects used by the rest of the application.
"""

import logging
import os

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from google_auth_oauthlib.flow import InstalledAppFlow
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from event_signup.config import settings
from event_signup.constants import GOOGLE_API_SETTINGS

# Set up logging
logger = logging.getLogger(__name__)


def load_credentials(
    credentials_file: str = settings.GOOGLE_CREDENTIALS_FILE,
    token_file: str = settings.GOOGLE_TOKEN_FILE,
) -> Credentials:
    """
    Load user credentials for the Calendar and Forms APIs.

    Reuses the cached token when it is still valid, refreshes it when it has
    expired, and otherwise runs the installed-app OAuth flow on a local port.

    Args:
        credentials_file: Path to the OAuth client secrets file
        token_file: Path where the authorized user token is cached

    Returns:
        Valid OAuth 2.0 credentials
    """
    creds = None
    scopes = GOOGLE_API_SETTINGS.SCOPES

    if os.path.exists(token_file):
        creds = Credentials.from_authorized_user_file(token_file, scopes)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not os.path.exists(credentials_file):
                raise FileNotFoundError(f"Credentials file not found: {credentials_file}")
            flow = InstalledAppFlow.from_client_secrets_file(credentials_file, scopes)
            # The redirect URI http://localhost:<port>/ must be whitelisted
            # in the Google Cloud Console.
            creds = flow.run_local_server(port=settings.OAUTH_REDIRECT_PORT)
        with open(token_file, 'w') as token:
            token.write(creds.to_json())
        logger.info(f"Saved OAuth token to {token_file}")

    return creds


def is_not_found(error: HttpError) -> bool:
    """True when the API reports the resource as missing or deleted."""
    return error.resp.status in GOOGLE_API_SETTINGS.NOT_FOUND_STATUSES


def build_calendar_service(creds: Credentials):
    """Build the Google Calendar API service object."""
    return build(
        'calendar',
        GOOGLE_API_SETTINGS.CALENDAR_API_VERSION,
        credentials=creds,
        cache_discovery=False,
    )


def build_forms_service(creds: Credentials):
    """Build the Google Forms API service object."""
    return build(
        'forms',
        GOOGLE_API_SETTINGS.FORMS_API_VERSION,
        credentials=creds,
        cache_discovery=False,
    )
