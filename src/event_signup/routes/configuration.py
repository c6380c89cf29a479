from fastapi import APIRouter, Depends
import logging

from event_signup.dependencies import get_configuration_manager
from event_signup.routes.dto import AcceptingResponsesRequest, SaveConfigurationRequest
from event_signup.signup.configuration import ConfigurationManager
from event_signup.signup.dto import dump_dialog_data

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/")
def save_configuration(
    request: SaveConfigurationRequest,
    manager: ConfigurationManager = Depends(get_configuration_manager),
):
    """
    Bind the form to a calendar event and install the submission trigger.

    Returns the refreshed dialog status, or a bare {"errorMessage"} when
    saving failed.
    """
    return dump_dialog_data(manager.save(request.calendar_id, request.event_id))


@router.delete("/")
def reset_configuration(manager: ConfigurationManager = Depends(get_configuration_manager)):
    """Remove the trigger and every stored property."""
    return dump_dialog_data(manager.reset())


@router.put("/accepting-responses")
def set_accepting_responses(
    request: AcceptingResponsesRequest,
    manager: ConfigurationManager = Depends(get_configuration_manager),
) -> bool:
    # Failures are not converted here; FastAPI answers 500
    return manager.set_accepting_responses(request.enabled)
